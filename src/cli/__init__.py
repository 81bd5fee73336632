"""Main CLI application module.

This module provides the main entry point for the pgcomment CLI, which
manages comments on PostgreSQL databases, roles and tables declared in
config.yaml.

Command Groups:
- comment: plan, apply, destroy, show and status
"""

import typer

from .commands import comment_app

# Create the main CLI application
app = typer.Typer(
    help="🗒️  pgcomment CLI - Declarative PostgreSQL comments",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(comment_app, name="comment")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
