"""
Base classes for machine registry plugins.

A registry plugin is a MachineRegistry that can also add, list and check its
machines. Plugins with their own options declare a PluginSettings subclass;
its fields are read from the shared config file under ``plugin_<name>_``
keys and from ``MACHINE_ENROLL_PLUGIN_<NAME>_`` env vars.
"""

import os
from abc import abstractmethod
from typing import Any, TYPE_CHECKING

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from machine_enroll.config import LoggingYamlConfigSettingsSource
from machine_enroll.interfaces import MachineRegistry
from machine_enroll.models import CredentialEntry

if TYPE_CHECKING:
    from machine_enroll.config import Settings


class PluginYamlSettingsSource(LoggingYamlConfigSettingsSource):
    """Shared config file keys for one plugin, ``plugin_yaml_registry_file`` -> ``registry_file``."""

    def __init__(self, settings_cls: type[BaseSettings], plugin_name: str):
        super().__init__(settings_cls)
        self.key_prefix = f"plugin_{plugin_name}_"

    def __call__(self) -> dict[str, Any]:
        return {
            key.lower()[len(self.key_prefix) :]: value
            for key, value in super().__call__().items()
            if key.lower().startswith(self.key_prefix)
        }


class PluginSettings(BaseSettings):
    """
    Base class for registry plugin settings.

    Subclasses set 'plugin_name' and an env_prefix of
    MACHINE_ENROLL_PLUGIN_<NAME>_ in model_config.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("MACHINE_ENROLL_ENV_FILE", "machine_enroll.env"),
        yaml_file=os.getenv("MACHINE_ENROLL_CONFIG_FILE", "machine_enroll_config.yaml"),
        case_sensitive=False,
        extra="forbid",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        plugin_name = cls.model_config.get("plugin_name")
        if not plugin_name:
            raise ValueError(f"{cls.__name__} must set 'plugin_name' in model_config")

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PluginYamlSettingsSource(settings_cls, plugin_name),
        )


class RegistryPlugin(MachineRegistry):
    """Machine registry selected by the ``registry_plugin`` setting."""

    settings_class: type[PluginSettings] | None = None

    @abstractmethod
    def __init__(self, plugin_settings: PluginSettings | None, main_settings: "Settings"):
        pass

    @abstractmethod
    def add(self, entry: CredentialEntry) -> CredentialEntry:
        """Register a new machine.

        :raises RegistryException: If a machine with the same host is registered
        """
        pass

    @abstractmethod
    def entries(self) -> list[CredentialEntry]:
        """Registered machines in registration order."""
        pass

    @abstractmethod
    def validate(self) -> None:
        """Check that the registry is ready to serve lookups.

        :raises RegistryException: If validation fails
        """
        pass
