"""
Enrollment session: the surface a form or console drives.

A session holds the raw field text for one "add machine" or "edit machine"
interaction. Text changes restart the debounce timer; the timer (or leaving
a field) runs validation; the commit gate is always derived from the latest
validation, or from the current text while a debounce is pending.
"""

import logging
from typing import Callable, Optional

from machine_enroll.config import Settings
from machine_enroll.debounce import DebounceScheduler
from machine_enroll.interfaces import (
    ConnectionProbe,
    MachineRegistry,
    NoticeSink,
    PasswordProtector,
)
from machine_enroll.models import (
    AutoTestIntervalUnit,
    CommitOutcome,
    CredentialEntry,
    TestOutcome,
    ValidationResult,
)
from machine_enroll.validation import (
    NoticeGate,
    entries_are_valid,
    is_local_host,
    validate,
)
from machine_enroll.workflow import ConnectionWorkflow

logger = logging.getLogger(__name__)


class EnrollmentSession:
    def __init__(
        self,
        registry: MachineRegistry,
        probe: ConnectionProbe,
        sink: NoticeSink,
        protector: PasswordProtector,
        settings: Settings,
        edit_mode: bool = False,
        current_host: Optional[str] = None,
        online: bool = False,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.registry = registry
        self.settings = settings
        self.edit_mode = edit_mode
        self.current_host = current_host
        self.online = online

        self.host_text = ""
        self.user_text = ""
        self.password = ""
        self.auto_test_interval_value = settings.default_auto_test_interval
        self.auto_test_interval_unit = settings.default_auto_test_unit

        self._validation = ValidationResult()
        self._notices = NoticeGate(sink, dedupe=settings.dedupe_notices)
        self.scheduler = DebounceScheduler(
            settings.quiet_window, self.run_validation, clock=clock
        )
        self.workflow = ConnectionWorkflow(
            registry, probe, sink, protector, edit_mode=edit_mode
        )

    @classmethod
    def for_existing(
        cls,
        entry: CredentialEntry,
        registry: MachineRegistry,
        probe: ConnectionProbe,
        sink: NoticeSink,
        protector: PasswordProtector,
        settings: Settings,
        online: bool = False,
        clock: Optional[Callable[[], float]] = None,
    ) -> "EnrollmentSession":
        """Session editing a registered entry, prefilled from it.

        The host is left blank when the entry names the local machine.
        """
        session = cls(
            registry,
            probe,
            sink,
            protector,
            settings,
            edit_mode=True,
            current_host=entry.host,
            online=online,
            clock=clock,
        )
        if entry.host and not is_local_host(entry.host, settings.local_host_names):
            session.host_text = entry.host
        session.user_text = entry.user
        session.password = protector.unprotect(entry.password) if entry.password else ""
        session.auto_test_interval_value = entry.auto_test_interval_value
        session.auto_test_interval_unit = entry.auto_test_interval_unit
        session.run_validation()
        return session

    # Text events

    def on_host_text_changed(self, text: str) -> None:
        self.host_text = text
        self.scheduler.touch()

    def on_user_text_changed(self, text: str) -> None:
        self.user_text = text
        self.scheduler.touch()

    def on_password_changed(self, text: str) -> None:
        self.password = text
        self.scheduler.touch()

    def on_field_left(self) -> bool:
        return self.scheduler.force()

    def tick(self) -> bool:
        """Timer tick from the owner's event loop."""
        return self.scheduler.poll()

    def set_auto_test_interval(self, value: int, unit: AutoTestIntervalUnit) -> None:
        self.auto_test_interval_value = value
        self.auto_test_interval_unit = unit

    # Validation

    def run_validation(self) -> ValidationResult:
        self._validation = self._evaluate()
        self._notices.observe(self._validation, self.host_text)
        return self._validation

    def _evaluate(self) -> ValidationResult:
        return validate(
            self.host_text,
            self.user_text,
            self.registry,
            edit_mode=self.edit_mode,
            current_host=self.current_host,
            local_host_names=self.settings.local_host_names,
        )

    def current_validation(self) -> ValidationResult:
        return self._validation

    def entries_are_valid(self) -> bool:
        """Whether the current text may be tested or committed.

        While a debounce is pending the stored result describes older text,
        so the current text is checked again without raising notices.
        """
        result = self._evaluate() if self.scheduler.pending else self._validation
        return entries_are_valid(result, self.host_text, self.user_text, self.password)

    def is_commit_enabled(self) -> bool:
        return not self.workflow.busy and self.entries_are_valid()

    # Actions

    def draft(self) -> CredentialEntry:
        return CredentialEntry(
            host=self.host_text,
            user=self.user_text,
            password=self.password,
            auto_test_interval_value=self.auto_test_interval_value,
            auto_test_interval_unit=self.auto_test_interval_unit,
        )

    def request_test(self) -> TestOutcome:
        self.scheduler.force()
        outcome = self.workflow.request_test(self.draft(), self.entries_are_valid())
        if outcome == TestOutcome.SUCCESS:
            self.online = True
        return outcome

    def request_commit(self, force_retest: bool = False) -> CommitOutcome:
        self.scheduler.force()
        return self.workflow.request_commit(
            self.draft(),
            self.entries_are_valid(),
            known_online=self.online,
            force_retest=force_retest,
        )
