"""Host and logon validation for machine enrollment."""

import logging
from typing import Iterable, Optional

from machine_enroll import notices
from machine_enroll.interfaces import MachineRegistry, NoticeSink
from machine_enroll.models import (
    HostReason,
    NoticeKind,
    UserReason,
    ValidationResult,
)
from machine_enroll.patterns import HOST_MATCHERS, USER_MATCHERS, matches_any

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_HOST_NAMES = ("localhost", "127.0.0.1", ".")


def is_local_host(host: str, local_host_names: Iterable[str] = DEFAULT_LOCAL_HOST_NAMES) -> bool:
    return host.strip().lower() in {name.lower() for name in local_host_names}


def _is_same_host(a: Optional[str], b: str) -> bool:
    return a is not None and a.strip().lower() == b.lower()


def validate(
    host_text: str,
    user_text: str,
    registry: MachineRegistry,
    edit_mode: bool = False,
    current_host: Optional[str] = None,
    local_host_names: Iterable[str] = DEFAULT_LOCAL_HOST_NAMES,
) -> ValidationResult:
    """Judge the host and user text.

    The host rules apply in order and the first one that fires wins:
    empty text is left unjudged, a local host is always rejected, a host
    registered under another entry is rejected outside edit mode, and
    anything else must be a DNS host name or an IPv4 address.

    :param current_host: Host of the entry being edited, never a duplicate of itself
    :return: A fresh ValidationResult; the registry is only read
    """
    host_valid, host_reason = True, HostReason.NONE
    host = host_text.strip()

    if host_text:
        if is_local_host(host, local_host_names):
            host_valid, host_reason = False, HostReason.LOCAL_HOST
        elif (
            not edit_mode
            and not _is_same_host(current_host, host)
            and registry.has_host_named(host, case_insensitive=True)
        ):
            host_valid, host_reason = False, HostReason.DUPLICATE_HOST
        elif not matches_any(host, HOST_MATCHERS):
            host_valid, host_reason = False, HostReason.BAD_SYNTAX

    user_valid, user_reason = True, UserReason.NONE
    if user_text and not matches_any(user_text.strip(), USER_MATCHERS):
        user_valid, user_reason = False, UserReason.BAD_SYNTAX

    result = ValidationResult(
        host_valid=host_valid,
        host_reason=host_reason,
        user_valid=user_valid,
        user_reason=user_reason,
    )
    logger.debug(f"Validated host={host!r} user={user_text.strip()!r}: {result}")
    return result


def entries_are_valid(
    result: ValidationResult, host_text: str, user_text: str, password: str
) -> bool:
    """True when the entries are complete and valid enough to test or commit."""
    return bool(
        result.host_valid and result.user_valid and host_text and user_text and password
    )


class NoticeGate:
    """Turns LocalHost / DuplicateHost results into operator notices.

    With ``dedupe`` set, a notice is shown once per offending host and
    reason; it is armed again as soon as the condition clears or changes.
    """

    _NOTICES = {
        HostReason.LOCAL_HOST: (notices.LOCAL_HOST_TITLE, notices.LOCAL_HOST_MESSAGE),
        HostReason.DUPLICATE_HOST: (
            notices.DUPLICATE_HOST_TITLE,
            notices.DUPLICATE_HOST_MESSAGE,
        ),
    }

    def __init__(self, sink: NoticeSink, dedupe: bool = True):
        self.sink = sink
        self.dedupe = dedupe
        self._last: Optional[tuple[HostReason, str]] = None

    def observe(self, result: ValidationResult, host_text: str) -> bool:
        """Notify for ``result`` if needed. True if a notice was shown."""
        if result.host_reason not in self._NOTICES:
            self._last = None
            return False

        key = (result.host_reason, host_text.strip().lower())
        if self.dedupe and key == self._last:
            logger.debug(f"Suppressing repeated {result.host_reason.value} notice")
            return False

        self._last = key
        title, message = self._NOTICES[result.host_reason]
        logger.info(f"Host {host_text.strip()!r} rejected: {result.host_reason.value}")
        self.sink.notify(NoticeKind.ERROR, title, message)
        return True
