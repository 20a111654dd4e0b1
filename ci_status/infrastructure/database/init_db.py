"""Database initialization utilities."""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlalchemy import func, select, text

from ci_status.core.domain.enums import BuildStatus
from ci_status.core.exceptions import ConfigurationException
from ci_status.core.services.builds.models import BuildModel
from ci_status.core.services.projects.models import ProjectModel
from ci_status.infrastructure.database.connection import Base
from ci_status.infrastructure.database.repositories.build_repository import SqlBuildRepository
from ci_status.infrastructure.database.repositories.project_repository import SqlProjectRepository
from ci_status.infrastructure.database.session import get_engine, get_session_maker
from ci_status.settings import get_settings

logger = logging.getLogger(__name__)


async def init_database() -> None:
    """Create database tables and load seed data from YAML files."""
    try:
        await create_tables()
        logger.info("Database tables created")

        await load_yaml_data()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def create_tables() -> None:
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def load_yaml_data() -> int:
    """
    Load projects and builds from YAML files into an empty database.

    Returns:
        Number of builds loaded
    """
    settings = get_settings()
    projects_path = Path(settings.config_dir) / settings.projects_config_file
    builds_path = Path(settings.config_dir) / settings.builds_config_file

    session_maker = get_session_maker()

    async with session_maker() as session:
        try:
            project_repo = SqlProjectRepository(session)
            build_repo = SqlBuildRepository(session)

            if await project_repo.get_all_projects():
                logger.info("Database already contains projects, skipping YAML import")
                return 0

            if not projects_path.exists():
                logger.warning(f"Projects YAML file not found: {projects_path}")
                return 0

            logger.info(f"Loading projects from {projects_path}")
            projects_by_title = {}
            for project_data in _read_section(projects_path, "projects"):
                if not project_data.get("title"):
                    raise ConfigurationException("projects", f"project without title: {project_data}")
                project = await project_repo.create_project(
                    title=project_data["title"],
                    default_branch=project_data.get("default_branch", "master"),
                )
                projects_by_title[project.title] = project

            builds_loaded = 0
            if builds_path.exists():
                logger.info(f"Loading builds from {builds_path}")
                for build_data in _read_section(builds_path, "builds"):
                    project = projects_by_title.get(build_data.get("project"))
                    if project is None:
                        raise ConfigurationException(
                            "builds", f"unknown project '{build_data.get('project')}'"
                        )
                    try:
                        status = BuildStatus(build_data.get("status", BuildStatus.NEW.value))
                    except ValueError as e:
                        raise ConfigurationException("builds", str(e)) from e

                    await build_repo.create_build(
                        project_id=project.id,
                        branch=build_data.get("branch", project.default_branch),
                        status=status,
                        commit_id=build_data.get("commit_id"),
                        created_at=build_data.get("created_at"),
                        started_at=build_data.get("started_at"),
                        finished_at=build_data.get("finished_at"),
                    )
                    builds_loaded += 1

            await session.commit()
            logger.info(f"Loaded {len(projects_by_title)} projects and {builds_loaded} builds")
            return builds_loaded

        except Exception:
            await session.rollback()
            raise


def _read_section(path: Path, key: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    items = data.get(key, [])
    if not isinstance(items, list):
        raise ConfigurationException(key, f"'{key}' in {path} must be a list")
    return items


async def check_database_health() -> bool:
    """
    Check database connectivity.

    Returns:
        True if a trivial query succeeds
    """
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def get_database_info() -> Dict[str, Any]:
    """
    Get row counts of the application tables.

    Returns:
        Mapping with a "tables" entry of table name to row count
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        projects = await session.scalar(select(func.count()).select_from(ProjectModel))
        builds = await session.scalar(select(func.count()).select_from(BuildModel))

    return {"tables": {"projects": projects, "builds": builds}}
