"""
Shared pytest fixtures for remindme tests.

Provides a controllable clock, an isolated repository and an application
wired to temporary data and backup directories.
"""
import pytest
from fastapi.testclient import TestClient

from remindme.config import Settings
from remindme.core.repository import Repository
from remindme.main import create_app


class FakeClock:
    """Clock returning a fixed epoch-ms value that tests advance by hand."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo(clock):
    repository = Repository(clock=clock)
    repository.ensure_system_folders()
    return repository


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        _env_file=None,
        data_file=str(tmp_path / "data" / "reminders.json"),
        backup_dir=str(tmp_path / "backups"),
        static_dir=str(tmp_path / "static"),
        external_secret="s3cret",
        backup_remote=None,
    )


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as c:
        yield c
