"""Pytest configuration and shared fixtures for machine enrollment tests."""
import os
from typing import Optional
from unittest import mock

import pytest
from cryptography.fernet import Fernet

from machine_enroll.config import Settings
from machine_enroll.interfaces import ConnectionProbe, NoticeSink
from machine_enroll.models import NoticeChoice, NoticeKind, ProbeResult
from machine_enroll.Plugins.registry.memory import MemoryRegistryPlugin
from machine_enroll.protect import FernetPasswordProtector


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSink(NoticeSink):
    """Notice sink that records notices and answers questions with ``answer``."""

    def __init__(self, answer: NoticeChoice = NoticeChoice.NO):
        self.answer = answer
        self.notices: list[tuple[NoticeKind, str, str, bool]] = []

    def notify(
        self, kind: NoticeKind, title: str, message: str, ask: bool = False
    ) -> Optional[NoticeChoice]:
        self.notices.append((kind, title, message, ask))
        return self.answer if ask else None

    @property
    def kinds(self) -> list[NoticeKind]:
        return [n[0] for n in self.notices]


class StaticProbe(ConnectionProbe):
    """Probe returning a fixed online status and recording every call."""

    def __init__(self, online: bool = True):
        self.online = online
        self.calls: list[tuple[str, str, str, bool]] = []

    def test(self, host: str, user: str, password: str, force_refresh: bool) -> ProbeResult:
        self.calls.append((host, user, password, force_refresh))
        return ProbeResult(online=self.online)


@pytest.fixture()
def clean_env():
    with mock.patch.dict(os.environ, clear=True):
        yield


@pytest.fixture()
def settings_class(clean_env):
    class TestSettings(Settings):
        model_config = Settings.model_config.copy()
        model_config.update({
            "env_file": None,
            "yaml_file": None,
        })

    return TestSettings


@pytest.fixture()
def settings(settings_class):
    return settings_class(quiet_window_ms=500)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def registry() -> MemoryRegistryPlugin:
    return MemoryRegistryPlugin()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def probe() -> StaticProbe:
    return StaticProbe(online=True)


@pytest.fixture()
def protector() -> FernetPasswordProtector:
    return FernetPasswordProtector(Fernet.generate_key().decode())
