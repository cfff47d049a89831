"""Common CLI options for the CLI."""

import typer

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    help="Databricks CLI profile (from ~/.databrickscfg)",
)

PropertiesOpt = typer.Option(
    None,
    "--properties",
    "-f",
    help="Job properties file (key=value lines)",
    exists=True,
    dir_okay=False,
    readable=True,
)

SetOpt = typer.Option(
    [],
    "--set",
    "-D",
    help="Property override (key=value). This is reusable.",
    show_default=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)
