"""Common fixtures for integration tests."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

import ci_status.infrastructure.database.session as session_module
from ci_status.core.domain.enums import BuildStatus
from ci_status.infrastructure.database.init_db import create_tables
from ci_status.infrastructure.database.repositories.build_repository import SqlBuildRepository
from ci_status.infrastructure.database.repositories.project_repository import SqlProjectRepository
from ci_status.settings import get_settings


@pytest.fixture
def settings_env(tmp_path, monkeypatch):
    """Point settings at a temporary SQLite database and log directory."""
    db_path = tmp_path / "ci_status.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("APP_URL", "https://ci.example.com/")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_FORMAT", "%(levelname)s %(message)s")
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path / "config"))

    get_settings.cache_clear()
    session_module._engine = None
    session_module._async_session_maker = None

    yield tmp_path

    get_settings.cache_clear()
    session_module._engine = None
    session_module._async_session_maker = None


@pytest_asyncio.fixture
async def db_session(settings_env):
    """Create tables in the temporary database and yield a session."""
    await create_tables()

    async with session_module.get_session_maker()() as session:
        yield session
        await session.rollback()

    await session_module.close_db_connections()


@pytest_asyncio.fixture
async def seeded(db_session):
    """
    Seed one project with builds on two branches.

    master: 1 failed, 2 success, 3 running, 4 running
    feature: 5 new
    """
    project_repository = SqlProjectRepository(db_session)
    build_repository = SqlBuildRepository(db_session)

    project = await project_repository.create_project("PHPCI")
    finished_at = datetime(2024, 1, 5, 10, 0, 0, tzinfo=timezone.utc)

    builds = [
        await build_repository.create_build(project.id, "master", BuildStatus.FAILED, finished_at=finished_at),
        await build_repository.create_build(project.id, "master", BuildStatus.SUCCESS, finished_at=finished_at),
        await build_repository.create_build(project.id, "master", BuildStatus.RUNNING),
        await build_repository.create_build(project.id, "master", BuildStatus.RUNNING),
        await build_repository.create_build(project.id, "feature", BuildStatus.NEW),
    ]
    await db_session.commit()

    return {
        "project": project,
        "builds": builds,
        "project_repository": project_repository,
        "build_repository": build_repository,
    }
