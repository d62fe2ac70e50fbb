"""Command-line interface for GroupAccess.

This module provides the CLI commands for managing groups, roles and
permissions.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar

import click

from groupaccess import __version__
from groupaccess.core.config import get_settings
from groupaccess.core.logging import configure_logging, get_logger
from groupaccess.domain.exceptions import GroupAccessError

T = TypeVar("T")


def _run(operation: Callable[..., Awaitable[T]]) -> T:
    """Run an operation against a fresh group access service and commit.

    Domain errors are reported on stderr and exit with status 1.
    """
    from groupaccess.application.services import GroupAccessService
    from groupaccess.infrastructure.persistence.database import (
        close_database,
        get_db_manager,
    )

    async def execute() -> T:
        try:
            async with get_db_manager().session() as session:
                service = await GroupAccessService.create(session)
                result = await operation(service)
                await session.commit()
                return result
        finally:
            await close_database()

    try:
        return asyncio.run(execute())
    except GroupAccessError as e:
        get_logger(__name__).error("Command failed", error=e.message)
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="GroupAccess")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides GROUPACCESS_LOG_LEVEL)",
)
def cli(log_level: str | None) -> None:
    """GroupAccess - Group-scoped access control."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command("init-db")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all database tables. Use this only in development.
    In production, use migrations instead.
    """
    from groupaccess.infrastructure.persistence.database import (
        close_database,
        init_database,
    )

    settings = get_settings()

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await close_database()

    asyncio.run(initialize())


@cli.command("add-group")
@click.argument("entity_type")
@click.argument("bundle")
def add_group(entity_type: str, bundle: str) -> None:
    """Register ENTITY_TYPE BUNDLE as a group and create its default roles."""

    async def add(service):
        await service.registry.add_group(entity_type, bundle)
        return await service.roles.load_by_properties(
            group_type=entity_type, group_bundle=bundle
        )

    roles = _run(add)
    click.echo(f"Group {entity_type}:{bundle} added with roles:")
    for role in roles:
        click.echo(f"  {role.id}")


@cli.command("remove-group")
@click.argument("entity_type")
@click.argument("bundle")
def remove_group(entity_type: str, bundle: str) -> None:
    """Remove ENTITY_TYPE BUNDLE from the groups and delete its roles."""

    async def remove(service):
        if not service.registry.is_group(entity_type, bundle):
            return False
        await service.registry.remove_group(entity_type, bundle)
        return True

    if _run(remove):
        click.echo(f"Group {entity_type}:{bundle} removed.")
    else:
        click.echo(f"{entity_type}:{bundle} is not a group.")


@cli.command("list-groups")
@click.option("--entity-type", default=None, help="Only list groups of this entity type")
def list_groups(entity_type: str | None) -> None:
    """List the registered groups."""

    async def list_all(service):
        if entity_type:
            return {entity_type: service.registry.get_groups_for_entity_type(entity_type)}
        return service.registry.get_all_group_bundles()

    groups = _run(list_all)
    if not any(groups.values()):
        click.echo("No groups registered.")
        return
    for group_type, bundles in sorted(groups.items()):
        for bundle in bundles:
            click.echo(f"{group_type}:{bundle}")


@cli.command("list-roles")
@click.argument("entity_type")
@click.argument("bundle")
def list_roles(entity_type: str, bundle: str) -> None:
    """List the roles of the ENTITY_TYPE BUNDLE group."""

    async def list_all(service):
        return await service.roles.load_by_properties(
            group_type=entity_type, group_bundle=bundle
        )

    roles = _run(list_all)
    if not roles:
        click.echo(f"No roles found for {entity_type}:{bundle}.")
        return
    for role in roles:
        scope = f" (group {role.group_id})" if role.group_id else ""
        click.echo(f"{role.id} [{role.role_type}]{scope}")
        for permission in sorted(role.permissions):
            click.echo(f"    {permission}")


@cli.command("list-permissions")
@click.argument("entity_type")
@click.argument("bundle")
@click.option("--role", "role_name", default=None, help="Only list the defaults of this role")
def list_permissions(entity_type: str, bundle: str, role_name: str | None) -> None:
    """List the permissions available to the ENTITY_TYPE BUNDLE group."""

    async def list_all(service):
        if role_name:
            return await service.catalog.filter_by_default_role(entity_type, bundle, role_name)
        return await service.catalog.get_permissions(entity_type, bundle)

    permissions = _run(list_all)
    for name in sorted(permissions):
        permission = permissions[name]
        flags = []
        if permission.is_restricted:
            flags.append("restricted")
        if permission.applies_to_owner_only:
            flags.append("own")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{name}{suffix}")


@cli.command("info")
def info() -> None:
    """Display GroupAccess configuration."""
    settings = get_settings()

    click.echo(f"""
GroupAccess v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Access:
  Superuser ID: {settings.superuser_id}
  Owner access: {settings.group_manager_full_access}
  Settings key: {settings.settings_config_key}.{settings.groups_config_key}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `groupaccess` command is run
    or when using `python -m groupaccess`.
    """
    cli()


if __name__ == "__main__":
    main()
