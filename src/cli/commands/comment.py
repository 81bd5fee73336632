"""PostgreSQL comment management commands.

This module provides the `comment` subcommands that reconcile the comments
declared in config.yaml against a PostgreSQL server.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from src.cli.shared.console import console, with_error_handling
from src.infra.constants import DEFAULT_PATHS, CommentObjectType

if TYPE_CHECKING:
    from src.infra.postgres import (
        CommentResource,
        DbSettings,
        PostgresComment,
        ResourceData,
    )


ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to config.yaml"),
]


def _load(config_path: Path) -> tuple["DbSettings", list["ResourceData"]]:
    """Load connection settings and the host-side state of declared comments."""
    from dotenv import load_dotenv

    from src.app.runtime.config.config_loader import load_config
    from src.infra.postgres import DbSettings, ResourceData

    load_dotenv(DEFAULT_PATHS.env_file)
    if not config_path.exists():
        raise FileNotFoundError(f"Could not find config.yaml at {config_path}")

    config = load_config(file_path=config_path)
    settings = DbSettings.load(config.database)
    states = [ResourceData(declared.model_dump(mode="json")) for declared in config.comments]
    return settings, states


def _resources(states: list["ResourceData"]) -> list["CommentResource"]:
    from src.infra.postgres import CommentResource

    return [CommentResource.from_resource_data(state) for state in states]


def _plan_action(
    controller: "PostgresComment", resource: "CommentResource"
) -> tuple[str, str]:
    """Work out what apply would do for a resource.

    Returns:
        Tuple of (action, observed comment)
    """
    observed = controller.read(resource.model_copy())
    if observed.comment == resource.comment:
        return "no-op", observed.comment
    if not observed.comment:
        return "create", observed.comment
    return "update", observed.comment


def _resource_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Declared")
    table.add_column("Observed")
    table.add_column("Action")
    return table


# ---------------------------------------------------------------------------
# Typer App
# ---------------------------------------------------------------------------

comment_app = typer.Typer(
    name="comment",
    help="Manage comments on PostgreSQL databases, roles and tables.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@comment_app.command()
@with_error_handling
def plan(config: ConfigOption = DEFAULT_PATHS.config_yaml) -> None:
    """Show the changes apply would make, without making them."""
    from src.infra.postgres import PostgresComment, PostgresConnection

    settings, states = _load(config)
    resources = _resources(states)
    table = _resource_table("Comment Plan")

    with PostgresConnection(settings.ensure_password()) as conn:
        controller = PostgresComment(conn)
        for resource in resources:
            action, observed = _plan_action(controller, resource)
            style = "dim" if action == "no-op" else "yellow"
            table.add_row(
                resource.resource_id,
                resource.object_type.value,
                resource.comment,
                observed,
                f"[{style}]{action}[/{style}]",
            )

    console.print(table)


@comment_app.command()
@with_error_handling
def apply(config: ConfigOption = DEFAULT_PATHS.config_yaml) -> None:
    """Set every declared comment that is missing or has drifted."""
    from src.infra.postgres import PostgresComment, PostgresConnection

    settings, states = _load(config)
    resources = _resources(states)
    console.print_header("Applying PostgreSQL comments")

    changed = 0
    with PostgresConnection(settings.ensure_password()) as conn:
        controller = PostgresComment(conn)
        for state, resource in zip(states, resources):
            if controller.exists(resource):
                resource.id = resource.resource_id
                resource.to_resource_data(state)
                console.print(f"[dim]  {state.id} is up to date[/dim]")
                continue

            action, _ = _plan_action(controller, resource)
            if action == "no-op":
                # An empty declared comment on an object without one
                continue
            if action == "create":
                controller.create(resource)
            else:
                controller.update(resource)
            resource.to_resource_data(state)
            changed += 1
            console.ok(
                f"{action.capitalize()}d comment on "
                f"{state.get('object_type')} {state.id}"
            )

    console.info(f"{changed} comment(s) changed, {len(states) - changed} unchanged")


@comment_app.command()
@with_error_handling
def destroy(
    config: ConfigOption = DEFAULT_PATHS.config_yaml,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Clear every declared comment."""
    from src.infra.postgres import PostgresComment, PostgresConnection

    settings, states = _load(config)
    resources = _resources(states)
    if not resources:
        console.info("No comments declared")
        return

    ids = "\n".join(f"  • {r.resource_id}" for r in resources)
    if not console.confirm_action(
        f"Clear {len(resources)} PostgreSQL comment(s)",
        details=ids,
        force=force,
    ):
        console.print("[dim]Destroy cancelled.[/dim]")
        raise typer.Exit(0)

    with PostgresConnection(settings.ensure_password()) as conn:
        controller = PostgresComment(conn)
        for resource in resources:
            resource_id = resource.resource_id
            controller.delete(resource)
            console.ok(f"Cleared comment on {resource.object_type.value} {resource_id}")


@comment_app.command()
@with_error_handling
def show(
    resource_id: Annotated[
        str, typer.Argument(help="Comment id in the form <database>.<object_name>")
    ],
    object_type: Annotated[
        CommentObjectType,
        typer.Option("--type", "-t", help="Object type of the commented object"),
    ],
    config: ConfigOption = DEFAULT_PATHS.config_yaml,
) -> None:
    """Import an existing comment by id and print its state."""
    from src.infra.postgres import PostgresComment, PostgresConnection, ResourceData

    settings, _ = _load(config)

    with PostgresConnection(settings.ensure_password()) as conn:
        resource = PostgresComment(conn).import_state(resource_id, object_type)
    state = resource.to_resource_data(ResourceData())

    table = Table(title=f"Comment {state.id}")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", style="green")
    for name, value in state.attributes.items():
        table.add_row(name, value or "[dim](none)[/dim]")
    console.print(table)


@comment_app.command()
@with_error_handling
def status(config: ConfigOption = DEFAULT_PATHS.config_yaml) -> None:
    """Check connectivity and comment support on the configured server."""
    from src.infra.postgres import Feature, PostgresConnection

    settings, states = _load(config)

    with PostgresConnection(settings.ensure_password()) as conn:
        success, msg = conn.test_connection()
        if not success:
            console.handle_error("Cannot connect to PostgreSQL", msg)

        table = Table(title="PostgreSQL Status")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Host", f"{settings.host}:{settings.port}")
        table.add_row("Server Version", conn.version)
        table.add_row(
            "Comments Supported",
            "yes" if conn.feature_supported(Feature.COMMENT) else "[red]no[/red]",
        )
        table.add_row("Declared Comments", str(len(states)))

    console.print(table)
