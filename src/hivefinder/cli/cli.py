"""CLI application for catalog dataset discovery."""

import typer

from hivefinder.cli.commands.hive import hive_app

app = typer.Typer(
    help="hivefinder - catalog dataset discovery",
    no_args_is_help=True,
)

app.add_typer(hive_app, name="hive")


if __name__ == "__main__":
    app()
