"""Shared fixtures for costbook tests."""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from costbook.store.repository import CostRepository

RATES = {"USD": 1, "GBP": 1.8, "EURO": 0.7, "ILS": 3.4}


class StepClock:
    """Clock that advances by ``step`` on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + self.step
        return now


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "costsdb.db"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "config.toml"


@pytest.fixture
def march_clock() -> StepClock:
    year = datetime.now().year
    return StepClock(datetime(year, 3, 5, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def repository(db_path: Path, march_clock: StepClock) -> CostRepository:
    return CostRepository(db_path, clock=march_clock)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the default database and config locations into tmp_path."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("COSTBOOK_DB", raising=False)
    yield tmp_path
