"""Command line interface for the CI status service."""

import asyncio
import json
import sys

import click

from ci_status.core.services.intermediate_build_service import IntermediateBuildService
from ci_status.core.services.project_status_service import ProjectStatusService
from ci_status.core.exceptions import DomainException
from ci_status.infrastructure.database.init_db import (
    init_database,
    check_database_health,
    get_database_info,
    load_yaml_data,
)
from ci_status.infrastructure.database.repositories.build_repository import SqlBuildRepository
from ci_status.infrastructure.database.repositories.project_repository import SqlProjectRepository
from ci_status.infrastructure.database.session import close_db_connections, get_session_maker
from ci_status.utils.logging import setup_logging
from ci_status.settings import get_settings


def run(coro):
    """Run a coroutine and release database connections afterwards."""
    async def runner():
        try:
            return await coro
        finally:
            await close_db_connections()

    return asyncio.run(runner())


@click.group()
def cli():
    """CI build status CLI."""
    setup_logging()


@cli.command()
def init_db():
    """Create database tables and load seed data from YAML files."""
    click.echo("Initializing database...")
    run(init_database())
    click.echo("Database initialized successfully!")


@cli.command()
def load_yaml():
    """Load seed projects and builds from YAML files."""
    click.echo("Loading data from YAML files...")
    count = run(load_yaml_data())
    click.echo(f"Loaded {count} builds.")


@cli.command()
def check_db():
    """Check database connectivity and health."""
    click.echo("Checking database health...")

    async def check():
        is_healthy = await check_database_health()
        if is_healthy:
            click.echo("✓ Database connection is healthy")

            info = await get_database_info()
            click.echo("\nDatabase statistics:")
            for table, count in info["tables"].items():
                click.echo(f"  - {table}: {count} records")
        else:
            click.echo("✗ Database connection failed")
            return 1
        return 0

    sys.exit(run(check()))


@cli.command()
@click.argument("project_id", type=int)
@click.option("--branch", "-b", default=None, help="Report a single branch")
def status(project_id: int, branch: str):
    """Print status records of a project as JSON."""
    settings = get_settings()

    async def report():
        async with get_session_maker()() as session:
            service = ProjectStatusService(
                SqlProjectRepository(session),
                SqlBuildRepository(session),
                base_url=settings.app_url,
            )
            if branch:
                return await service.get_branch_status(project_id, branch)
            return await service.get_project_status(project_id)

    try:
        records = run(report())
    except DomainException as e:
        raise click.ClickException(e.message)

    click.echo(json.dumps(records, indent=2))


@cli.command()
@click.argument("build_ids", nargs=-1, type=int, required=True)
def skip_intermediate(build_ids):
    """Keep the newest of the given builds per branch, skip the rest."""

    async def collapse():
        async with get_session_maker()() as session:
            build_repository = SqlBuildRepository(session, commit_on_save=True)
            service = IntermediateBuildService(build_repository)
            return await service.skip_intermediate_builds(build_ids)

    try:
        result = run(collapse())
    except DomainException as e:
        raise click.ClickException(e.message)

    for branch, build in sorted(result.survivors.items()):
        click.echo(f"{branch}: build {build.id}")
    for build in result.skipped:
        click.echo(f"  skipped build {build.id} ({build.branch})")
    for failure in result.failures:
        click.echo(f"✗ build {failure.build.id} ({failure.build.branch}): {failure.error}", err=True)

    if result.has_failures:
        sys.exit(1)


@cli.command()
def show_config():
    """Display current configuration settings."""
    settings = get_settings()

    click.echo("Current configuration:")
    click.echo(f"  Environment: {settings.environment}")
    click.echo(f"  Debug: {settings.debug}")
    click.echo(f"  Database URL: {settings.database_url}")
    click.echo(f"  App URL: {settings.app_url or '(not set)'}")
    click.echo(f"  Log level: {settings.log_level}")
    click.echo(f"  Projects config: {settings.config_dir}/{settings.projects_config_file}")
    click.echo(f"  Builds config: {settings.config_dir}/{settings.builds_config_file}")


if __name__ == "__main__":
    cli()
