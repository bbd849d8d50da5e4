"""
Collaborator contracts consumed by the enrollment core.

The core never talks to the network, the machine store, or the screen
directly. Callers plug in implementations of these:

- MachineRegistry: the set of already registered machines
- ConnectionProbe: the authenticated connection check against a host
- NoticeSink: modal notices shown to the operator
- PasswordProtector: password-at-rest encryption
"""

from abc import ABC, abstractmethod
from typing import Optional

from machine_enroll.models import (
    CredentialEntry,
    NoticeChoice,
    NoticeKind,
    ProbeResult,
)


class MachineRegistry(ABC):
    """Ordered set of registered machines, keyed by host name."""

    @abstractmethod
    def has_host_named(self, name: str, case_insensitive: bool = True) -> bool:
        pass

    @abstractmethod
    def find_by_host_name(self, name: str) -> Optional[CredentialEntry]:
        """Return the registered entry for ``name`` (case-insensitive) or None."""
        pass

    @abstractmethod
    def overwrite(
        self, existing: CredentialEntry, replacement: CredentialEntry
    ) -> CredentialEntry:
        """Replace ``existing`` in place with ``replacement`` and return the stored entry."""
        pass


class ConnectionProbe(ABC):
    @abstractmethod
    def test(
        self, host: str, user: str, password: str, force_refresh: bool
    ) -> ProbeResult:
        """Attempt an authenticated connection to ``host``.

        :param force_refresh: Ignore any cached online status and probe again
        :raises ProbeException: If the check could not be completed
        """
        pass


class NoticeSink(ABC):
    @abstractmethod
    def notify(
        self, kind: NoticeKind, title: str, message: str, ask: bool = False
    ) -> Optional[NoticeChoice]:
        """Show a notice; when ``ask`` is set, return the operator's yes/no choice."""
        pass


class PasswordProtector(ABC):
    @abstractmethod
    def protect(self, password: str) -> str:
        pass

    @abstractmethod
    def unprotect(self, protected: str) -> str:
        """
        :raises ProtectionException: If ``protected`` cannot be decrypted
        """
        pass
