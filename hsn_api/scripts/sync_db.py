"""
Database sync command.

Creates (or alters) the tables of every project that has models::

    hsn-db-sync                    # create missing tables, add missing columns
    hsn-db-sync --project hsnweb   # only one project
    hsn-db-sync --force            # DROP and recreate the tables (destroys data)
"""

import asyncio
import json
import sys
from typing import Dict, List, Optional, Sequence, Tuple

import click

from hsn_api.core.database import DatabaseError, DatabaseManager, ProjectStatus, SyncOptions
from hsn_api.core.logging_config import get_logger, setup_logging
from hsn_api.projects import PROJECTS, ProjectModule

logger = get_logger(__name__)

FORCE_GRACE_SECONDS = 3


async def sync_databases(
    manager: DatabaseManager,
    projects: Sequence[ProjectModule],
    options: SyncOptions,
) -> Dict[str, ProjectStatus]:
    """
    Initialize, register and sync every project, then return the status snapshot.

    Connections are left open; the caller closes them.
    """
    for project in projects:
        logger.info(f"[{project.name}] Syncing database (alter={options.alter}, force={options.force})...")
        await manager.init_project(project.name)
        project.init_models(manager)
        await manager.sync_project(project.name, options)
    return manager.get_status()


async def run_sync(
    projects: Sequence[ProjectModule],
    options: SyncOptions,
    env: Optional[str] = None,
    manager: Optional[DatabaseManager] = None,
) -> Tuple[bool, Dict[str, ProjectStatus]]:
    """Sync the projects and always close every connection afterwards."""
    manager = manager or DatabaseManager(default_env=env)
    try:
        status = await sync_databases(manager, projects, options)
        return True, status
    except DatabaseError as e:
        logger.error(f"Database sync failed: {e}", exc_info=True)
        return False, manager.get_status()
    finally:
        await manager.close_all()


def _select_projects(names: Sequence[str]) -> List[ProjectModule]:
    with_models = [project for project in PROJECTS if project.has_models]
    if not names:
        return with_models
    known = {project.name: project for project in with_models}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise click.BadParameter(
            f"unknown project(s) or project without models: {', '.join(unknown)}", param_hint="--project"
        )
    return [known[name] for name in names]


@click.command()
@click.option("--force", is_flag=True, help="Drop and recreate all tables. ALL DATA WILL BE LOST.")
@click.option("--project", "project_names", multiple=True, help="Project to sync (repeatable). Defaults to all.")
@click.option("--env", type=click.Choice(["local", "prod"]), default=None, help="Database environment (DB_ENV).")
@click.option("--yes", is_flag=True, help="Do not wait before a forced sync.")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
)
def main(force: bool, project_names: Tuple[str, ...], env: Optional[str], yes: bool, log_level: str) -> None:
    """Synchronize the project database schemas."""
    setup_logging(log_level=log_level, log_format="simple", enable_file=False)
    projects = _select_projects(project_names)

    if force:
        click.secho("WARNING: --force will DROP and recreate all tables. ALL DATA WILL BE LOST!", fg="yellow", err=True)
        if not yes:
            click.echo(f"Press Ctrl+C within {FORCE_GRACE_SECONDS} seconds to cancel...", err=True)
            asyncio.run(asyncio.sleep(FORCE_GRACE_SECONDS))

    options = SyncOptions(alter=not force, force=force)
    ok, status = asyncio.run(run_sync(projects, options, env=env))

    click.echo(json.dumps({name: snapshot.model_dump() for name, snapshot in status.items()}, indent=2))
    if not ok:
        click.secho("Database sync failed.", fg="red", err=True)
        sys.exit(1)
    click.secho("Database sync completed successfully.", fg="green")


if __name__ == "__main__":
    main()
