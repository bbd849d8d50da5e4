"""YAML file-based machine registry plugin."""

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from machine_enroll.exceptions import RegistryException
from machine_enroll.models import CredentialEntry
from machine_enroll.Plugins.base import PluginSettings
from machine_enroll.Plugins.registry.memory import MemoryRegistryPlugin

if TYPE_CHECKING:
    from machine_enroll.config import Settings

logger = getLogger(__name__)


class YamlRegistrySettings(PluginSettings):
    """
    YAML Registry Plugin Settings.

    Config file uses prefixed keys: plugin_yaml_registry_file
    Env vars use: MACHINE_ENROLL_PLUGIN_YAML_REGISTRY_FILE
    Code uses: settings.registry_file
    """

    registry_file: str = "machines.yml"

    model_config = SettingsConfigDict(
        env_prefix="MACHINE_ENROLL_PLUGIN_YAML_",
        plugin_name="yaml",  # type: ignore[typeddict-unknown-key]
    )


class YamlRegistryPlugin(MemoryRegistryPlugin):
    """YAML file-based machine registry.

    Machines are stored keyed by host name, in registration order:

    ```yaml
    db1.example.com:
      user: CORP\\bob
      password: gAAAAABk...   # protected password
      auto_test_interval_value: 10
      auto_test_interval_unit: minutes
    ```

    A missing file is an empty registry; it is created on the first save.
    """

    settings_class = YamlRegistrySettings

    def __init__(self, plugin_settings: YamlRegistrySettings, main_settings: "Settings"):
        super().__init__(plugin_settings, main_settings)
        self.settings = plugin_settings
        self.registry_path = str(
            Path(main_settings.project_root) / plugin_settings.registry_file
        )
        self._loaded = False
        logger.debug(f"YAML registry plugin initialized with path: {self.registry_path}")

    def _load_machines(self) -> list[CredentialEntry]:
        """
        :raises RegistryException: If file cannot be read or parsed
        """
        try:
            with open(self.registry_path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            return []
        except yaml.YAMLError as e:
            raise RegistryException(
                f"Invalid YAML in registry file '{self.registry_path}': {e}"
            )

        if data is None:
            return []
        if not isinstance(data, dict):
            raise RegistryException(
                f"Registry file '{self.registry_path}' must contain a YAML dictionary, "
                f"got {type(data).__name__}"
            )

        machines = []
        for host, fields in data.items():
            if not isinstance(fields, dict):
                raise RegistryException(
                    f"Machine '{host}' must be a dictionary with at least a 'user' key, "
                    f"got {type(fields).__name__}"
                )
            try:
                machines.append(CredentialEntry(host=str(host), **fields))
            except ValidationError as e:
                raise RegistryException(f"Machine '{host}' is invalid: {e}") from e
        return machines

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        # Marked first: the base add() looks hosts up through this class
        self._loaded = True
        self._entries = []
        try:
            for entry in self._load_machines():
                super().add(entry)
        except RegistryException:
            self._loaded = False
            raise

    def has_host_named(self, name: str, case_insensitive: bool = True) -> bool:
        self._ensure_loaded()
        return super().has_host_named(name, case_insensitive)

    def find_by_host_name(self, name: str):
        self._ensure_loaded()
        return super().find_by_host_name(name)

    def entries(self) -> list[CredentialEntry]:
        self._ensure_loaded()
        return super().entries()

    def add(self, entry: CredentialEntry) -> CredentialEntry:
        self._ensure_loaded()
        super().add(entry)
        self.save()
        return entry

    def overwrite(
        self, existing: CredentialEntry, replacement: CredentialEntry
    ) -> CredentialEntry:
        self._ensure_loaded()
        stored = super().overwrite(existing, replacement)
        self.save()
        return stored

    def save(self) -> None:
        data = {
            entry.host: entry.model_dump(mode="json", exclude={"host"})
            for entry in self._entries
        }
        path = Path(self.registry_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                yaml.safe_dump(data, f, sort_keys=False)
        except OSError as e:
            raise RegistryException(f"Cannot write registry file '{path}': {e}") from e
        logger.debug(f"Saved {len(data)} machine(s) to {path}")

    def validate(self) -> None:
        """
        :raises RegistryException: If the path is not a file or the file is invalid
        """
        path = Path(self.registry_path)
        if path.exists() and not path.is_file():
            raise RegistryException(f"Registry path is not a file: {self.registry_path}")

        self._loaded = False
        self._ensure_loaded()
        logger.info(
            f"YAML registry plugin validated: {len(self._entries)} machine(s) loaded "
            f"from {self.registry_path}"
        )
