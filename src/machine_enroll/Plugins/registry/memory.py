"""In-memory machine registry plugin."""

from logging import getLogger
from typing import Iterable, Optional, TYPE_CHECKING

from machine_enroll.exceptions import RegistryException
from machine_enroll.models import CredentialEntry
from machine_enroll.Plugins.base import PluginSettings, RegistryPlugin

if TYPE_CHECKING:
    from machine_enroll.config import Settings

logger = getLogger(__name__)


class MemoryRegistryPlugin(RegistryPlugin):
    """Registry that keeps machines in process memory.

    Useful for tests and for callers that persist machines themselves.
    """

    settings_class = None

    def __init__(
        self,
        plugin_settings: PluginSettings | None = None,
        main_settings: Optional["Settings"] = None,
        entries: Iterable[CredentialEntry] = (),
    ):
        self.main_settings = main_settings
        self._entries: list[CredentialEntry] = []
        for entry in entries:
            self.add(entry)

    def _index_of(self, name: str, case_insensitive: bool = True) -> int | None:
        name = name.strip()
        for i, entry in enumerate(self._entries):
            if case_insensitive:
                if entry.host.lower() == name.lower():
                    return i
            elif entry.host == name:
                return i
        return None

    def has_host_named(self, name: str, case_insensitive: bool = True) -> bool:
        return self._index_of(name, case_insensitive) is not None

    def find_by_host_name(self, name: str) -> Optional[CredentialEntry]:
        i = self._index_of(name)
        return None if i is None else self._entries[i]

    def add(self, entry: CredentialEntry) -> CredentialEntry:
        if self.has_host_named(entry.host):
            raise RegistryException(f"Machine '{entry.host}' is already registered")
        self._entries.append(entry)
        logger.debug(f"Registered machine {entry.host}")
        return entry

    def overwrite(
        self, existing: CredentialEntry, replacement: CredentialEntry
    ) -> CredentialEntry:
        i = self._index_of(existing.host)
        if i is None:
            raise RegistryException(f"Machine '{existing.host}' is not registered")
        self._entries[i] = replacement
        logger.debug(f"Replaced machine {existing.host} with {replacement.host}")
        return replacement

    def entries(self) -> list[CredentialEntry]:
        return list(self._entries)

    def validate(self) -> None:
        logger.info(f"Memory registry ready: {len(self._entries)} machine(s)")
