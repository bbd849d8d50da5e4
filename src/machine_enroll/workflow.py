"""
Connection test and commit actions.

Both actions refuse to do anything unless the entries are valid. A test
always probes the host; a commit probes unless it is editing an entry whose
online status is already known, offers to overwrite a same-named machine
when the host does not answer, and finally hands back a CredentialEntry with
a protected password for the caller to persist.
"""

import logging
from contextlib import contextmanager

from machine_enroll import notices
from machine_enroll.exceptions import ProbeException
from machine_enroll.interfaces import (
    ConnectionProbe,
    MachineRegistry,
    NoticeSink,
    PasswordProtector,
)
from machine_enroll.models import (
    CommitOutcome,
    CommitStatus,
    CredentialEntry,
    FailureReason,
    NoticeChoice,
    NoticeKind,
    TestOutcome,
)

logger = logging.getLogger(__name__)


class ConnectionWorkflow:
    def __init__(
        self,
        registry: MachineRegistry,
        probe: ConnectionProbe,
        sink: NoticeSink,
        protector: PasswordProtector,
        edit_mode: bool = False,
    ):
        self.registry = registry
        self.probe = probe
        self.sink = sink
        self.protector = protector
        self.edit_mode = edit_mode
        self.busy = False

    @contextmanager
    def _running(self):
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    def _is_online(self, draft: CredentialEntry, force_refresh: bool) -> bool:
        host = draft.host.strip()
        try:
            result = self.probe.test(host, draft.user.strip(), draft.password, force_refresh)
        except ProbeException as e:
            logger.error(f"Connection probe for {host} failed: {e}")
            return False
        logger.info(f"Connection probe for {host}: {'online' if result.online else 'not online'}")
        return result.online

    def finalize(self, draft: CredentialEntry) -> CredentialEntry:
        """Trimmed host and user, protected password."""
        return draft.model_copy(
            update={
                "host": draft.host.strip(),
                "user": draft.user.strip(),
                "password": self.protector.protect(draft.password),
            }
        )

    def request_test(self, draft: CredentialEntry, entries_valid: bool) -> TestOutcome:
        """Probe the host with the draft credentials, ignoring any cached status."""
        if not entries_valid:
            logger.debug("Test refused, entries are not valid")
            return TestOutcome.FAILURE

        overwritten = False
        with self._running():
            online = self._is_online(draft, force_refresh=True)

        if not online:
            return TestOutcome.FAILURE

        self.sink.notify(
            NoticeKind.INFO,
            notices.CONNECTION_SUCCESSFUL_TITLE,
            notices.CONNECTION_SUCCESSFUL_MESSAGE,
        )
        return TestOutcome.SUCCESS

    def request_commit(
        self,
        draft: CredentialEntry,
        entries_valid: bool,
        known_online: bool = False,
        force_retest: bool = False,
    ) -> CommitOutcome:
        """Verify the draft and produce the entry to persist.

        :param known_online: Online status tracked for the entry being edited
        :param force_retest: Probe even when editing an entry known to be online
        """
        if not entries_valid:
            logger.debug("Commit refused, entries are not valid")
            return CommitOutcome(
                status=CommitStatus.FAILURE, reason=FailureReason.ENTRIES_INVALID
            )

        with self._running():
            if self.edit_mode and not force_retest:
                online = known_online
            else:
                online = self._is_online(draft, force_refresh=True)

            if not online and not self.edit_mode:
                existing = self.registry.find_by_host_name(draft.host.strip())
                if existing is not None:
                    choice = self.sink.notify(
                        NoticeKind.WARNING,
                        notices.OVERWRITE_TITLE,
                        notices.OVERWRITE_MESSAGE,
                        ask=True,
                    )
                    if choice != NoticeChoice.YES:
                        logger.info(f"Overwrite of {existing.host} declined")
                        return CommitOutcome(
                            status=CommitStatus.ABORTED,
                            reason=FailureReason.OVERWRITE_DECLINED,
                        )

                    logger.warning(f"Overwriting registered machine {existing.host}")
                    stored = self.registry.overwrite(existing, self.finalize(draft))
                    overwritten = True
                    online = self._is_online(draft, force_refresh=False)
                    if online:
                        return CommitOutcome(
                            status=CommitStatus.COMMITTED, entry=stored, stored=True
                        )

            if not online:
                return CommitOutcome(
                    status=CommitStatus.FAILURE,
                    reason=FailureReason.NOT_ONLINE,
                    stored=overwritten,
                )

            entry = self.finalize(draft)

        logger.info(f"Machine {entry.host} ready to commit")
        return CommitOutcome(status=CommitStatus.COMMITTED, entry=entry)
