"""Tests for CLI commands."""

import asyncio
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from typer.testing import CliRunner

from psipro.cli.commands import app
from psipro.config import get_settings
from psipro.core import database
from psipro.core.auth import decode_token
from psipro.core.models import Base
from psipro.core.repository import AppointmentRepository

from tests.conftest import OWNER_ID, make_appt

runner = CliRunner()


class TestSlotsCommand:
    def test_default_grid(self):
        result = runner.invoke(app, ["slots"])

        assert result.exit_code == 0
        lines = result.stdout.split()
        assert lines[0] == "07:00"
        assert lines[-1] == "19:00"

    def test_custom_grid(self):
        result = runner.invoke(app, ["slots", "--start", "8", "--end", "10", "--slot", "30"])

        assert result.exit_code == 0
        assert result.stdout.split() == ["08:00", "08:30", "09:00", "09:30"]

    def test_invalid_range(self):
        result = runner.invoke(app, ["slots", "--start", "18", "--end", "8"])
        assert result.exit_code == 1


class TestTokenCommand:
    def test_issues_access_token(self):
        result = runner.invoke(app, ["token", "owner-1"])

        assert result.exit_code == 0
        claims = decode_token(result.stdout.strip())
        assert claims["sub"] == "owner-1"
        assert claims["type"] == "access"


class TestDayCommand:
    def test_invalid_date(self):
        result = runner.invoke(app, ["day", "--owner", "owner-1", "--date", "10/01/2024"])
        assert result.exit_code == 1
        assert "Invalid date" in result.stdout

    def test_owner_required(self):
        result = runner.invoke(app, ["day"])
        assert result.exit_code != 0


async def _seed_day(url: str) -> None:
    engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        repo = AppointmentRepository(session)
        await repo.upsert_appointment(
            OWNER_ID, make_appt(date(2024, 1, 10), "09:00", "11:00", patient_id="p-1")
        )
        await session.commit()
    await engine.dispose()


@pytest.fixture
def agenda_db(tmp_path, monkeypatch):
    """Point the CLI at a seeded SQLite file."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'agenda.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    _clear_caches()
    asyncio.run(_seed_day(url))
    yield url
    _clear_caches()


def _clear_caches():
    get_settings.cache_clear()
    database._get_engine.cache_clear()
    database.get_session_factory.cache_clear()


class TestDayCommandRendering:
    def test_renders_seeded_day(self, agenda_db):
        result = runner.invoke(app, ["day", "--owner", OWNER_ID, "--date", "2024-01-10"])

        assert result.exit_code == 0, result.stdout
        assert "Agenda 2024-01-10" in result.stdout
        assert "p-1" in result.stdout
        assert "11:00" in result.stdout
        assert "continuation" in result.stdout

    def test_other_owner_sees_free_day(self, agenda_db):
        result = runner.invoke(app, ["day", "--owner", "someone-else", "--date", "2024-01-10"])

        assert result.exit_code == 0
        assert "p-1" not in result.stdout
        assert "start" not in result.stdout


class TestLogging:
    def test_noisy_loggers_capped_at_warning(self):
        import logging

        from psipro.main import NOISY_LOGGERS, setup_logging

        setup_logging("DEBUG")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level >= logging.WARNING
