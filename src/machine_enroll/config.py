import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from machine_enroll.models import AutoTestIntervalUnit


class LoggingYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML config source that logs whether the file was found."""

    def __init__(self, settings_cls: type[BaseSettings]):
        yaml_file = settings_cls.model_config.get("yaml_file")
        super().__init__(settings_cls)

        # Use print for immediate visibility during startup before logging is configured
        if yaml_file and Path(yaml_file).exists():
            print(f"INFO: Loading configuration from YAML file: {yaml_file}")
        elif yaml_file:
            print(
                f"WARNING: YAML config file not found: {yaml_file} (using defaults and env vars)"
            )
        else:
            print("DEBUG: No YAML config file specified")


class Settings(BaseSettings):
    """
    Enrollment settings class manages configuration options.

    precedence: ENVVARS > env_file > yaml_file > defaults
    ENVVARS are prefixed with "MACHINE_ENROLL_" (but are not case sensitive)

    :var log_level: Logging level. "info", "debug", etc.
    :type log_level: str

    :var quiet_window_ms: Idle time after the last keystroke before validation runs.
    :type quiet_window_ms: int

    :var local_host_names: Host names that always refer to this machine.
    :type local_host_names: list[str]
    """

    log_level: str | int = "info"  # Input is str, but we convert to int for actual use

    # File settings
    project_root: str = "."

    # Validation settings
    quiet_window_ms: int = 500
    local_host_names: list[str] = ["localhost", "127.0.0.1", "."]
    dedupe_notices: bool = True

    # Registry plugin selection
    registry_plugin: str = "yaml"

    # New entry defaults
    default_auto_test_interval: int = 10
    default_auto_test_unit: AutoTestIntervalUnit = AutoTestIntervalUnit.MINUTES

    # Fernet key used to protect stored passwords; generated per process if unset
    encryption_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="MACHINE_ENROLL_",
        env_file=os.getenv("MACHINE_ENROLL_ENV_FILE", "machine_enroll.env"),
        yaml_file=os.getenv("MACHINE_ENROLL_CONFIG_FILE", "machine_enroll_config.yaml"),
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def quiet_window(self) -> float:
        """Quiet window in seconds."""
        return self.quiet_window_ms / 1000

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v) -> int:
        if isinstance(v, int):
            return v
        return logging.getLevelName(v.upper())

    @field_validator("quiet_window_ms")
    @classmethod
    def validate_quiet_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("quiet_window_ms must be greater than zero")
        return v

    @field_validator("local_host_names")
    @classmethod
    def normalize_local_host_names(cls, v: list[str]) -> list[str]:
        return [name.strip().lower() for name in v if name.strip()]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LoggingYamlConfigSettingsSource(settings_cls),
        )
