"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def tables_table(self, tables: Iterable[Any], title: str = "Tables") -> None:
        """Render accepted tables (objects with `.db` and `.table`)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok")
        t.add_column("Table")

        for item in tables:
            t.add_row(escape(str(item.db)), escape(str(item.table)))

        console.print(t)

    def datasets_table(self, datasets: Iterable[Any], title: str = "Datasets") -> None:
        """
        Render discovered datasets.

        Expects objects with `.urn`, `.table` (with `.table_type`,
        `.data_source_format`) and `.table_location`.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Dataset", style="ok")
        t.add_column("Type", style="meta")
        t.add_column("Format", style="meta")
        t.add_column("Location")

        for d in datasets:
            table = getattr(d, "table", None)
            t.add_row(
                escape(str(d.urn)),
                escape(str(getattr(table, "table_type", "") or "")),
                escape(str(getattr(table, "data_source_format", "") or "")),
                escape(str(getattr(d, "table_location", "") or "")),
            )

        console.print(t)

    def failures_table(self, events: Iterable[Any], title: str = "Failures") -> None:
        """Render DatasetError events (objects with a `.metadata` mapping)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Dataset", style="err")
        t.add_column("Error")

        for e in events:
            t.add_row(
                escape(str(e.metadata.get("datasetUrn", ""))),
                escape(str(e.metadata.get("FailureContext", ""))),
            )

        console.print(t)

    def config_table(self, config: Mapping[str, str], title: str = "Config") -> None:
        """Render a resolved dataset config, sorted by key."""
        t = Table(title=title, show_lines=False)
        t.add_column("Key", style="meta")
        t.add_column("Value")

        for key in sorted(config):
            t.add_row(escape(key), escape(str(config[key])))

        console.print(t)


out = Out()
