from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from hivefinder.cli.common.context import FinderAppContext, build_finder_context
from hivefinder.cli.common.exits import die, exit_from_exc, warn_exit
from hivefinder.cli.common.logs import setup_logging
from hivefinder.cli.common.options import (
    ProfileOpt,
    PropertiesOpt,
    SetOpt,
    VerboseOpt,
)
from hivefinder.cli.common.output import out
from hivefinder.core.events import DATASET_ERROR
from hivefinder.core.finder import DatasetDiscoveryError
from hivefinder.core.hive import DbAndTable

hive_app = typer.Typer(
    help="Discover Hive datasets in the catalog.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@hive_app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    properties: Path | None = PropertiesOpt,
    set_: list[str] = SetOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize dataset finder context."""
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_finder_context(profile, properties, set_)


@hive_app.command("tables")
def tables(ctx: typer.Context):
    """List the tables accepted by the whitelist/blacklist."""
    appctx: FinderAppContext = ctx.obj

    try:
        with out.status("Listing catalog tables..."):
            found = appctx.finder.get_tables()
    except DatasetDiscoveryError as exc:
        exit_from_exc(exc, message=escape(str(exc)), code=1)

    if not found:
        warn_exit("No tables found.")

    out.header("Tables")
    out.info(f"Tables: {len(found)}")
    out.tables_table(found, title="Accepted tables")


@hive_app.command("datasets")
def datasets(ctx: typer.Context):
    """Create a dataset for every accepted table and report failures."""
    appctx: FinderAppContext = ctx.obj

    try:
        with out.status("Discovering datasets..."):
            found = appctx.finder.find_datasets()
    except DatasetDiscoveryError as exc:
        exit_from_exc(exc, message=escape(str(exc)), code=1)

    failures = appctx.events.named(DATASET_ERROR)

    if found:
        out.header("Datasets")
        out.info(f"Datasets: {len(found)}")
        out.datasets_table(found, title="Datasets")
    else:
        out.warn("No datasets found.")

    if failures:
        out.failures_table(failures, title="Failed datasets")
        die(f"Failed to create {len(failures)} dataset(s).", code=1)

    out.success(f"Discovered {len(found)} dataset(s).")


@hive_app.command("config")
def config(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table in the form db.table"),
):
    """Show the resolved config of one dataset."""
    appctx: FinderAppContext = ctx.obj

    try:
        db_and_table = DbAndTable.parse(table)
    except ValueError as exc:
        exit_from_exc(exc, message=escape(str(exc)), code=2)

    try:
        resolved = appctx.finder.resolve_config(db_and_table)
    except Exception as exc:  # noqa: BLE001
        exit_from_exc(
            exc,
            message=escape(f"Failed to resolve config for {db_and_table}: {exc}"),
            code=1,
        )

    if not resolved:
        warn_exit(f"No config for {db_and_table}.")

    out.header(f"Config for {db_and_table}")
    out.config_table(resolved, title=str(db_and_table))
