"""Core domain models for catalog tables.

These models represent catalog entities in a simple, immutable form.
They are intentionally free of Databricks SDK types and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True, order=True)
class DbAndTable:
    """A database/table pair found in the catalog."""

    db: str
    table: str

    def __str__(self) -> str:
        return f"{self.db}.{self.table}"

    @classmethod
    def parse(cls, value: str) -> DbAndTable:
        """Split `db.table` into a DbAndTable."""
        parts = value.strip().split(".")
        if len(parts) != 2 or not all(parts):
            raise ValueError("Table must be in the form `db.table`.")
        return cls(db=parts[0], table=parts[1])


@dataclass(frozen=True)
class HiveTable:
    """Lightweight representation of catalog table metadata."""

    db: str
    name: str
    table_type: str | None = None
    data_source_format: str | None = None
    storage_location: str | None = None
    owner: str | None = None
    properties: Mapping[str, str] = field(default_factory=dict)
    columns: tuple[str, ...] = ()

    @property
    def db_and_table(self) -> DbAndTable:
        return DbAndTable(self.db, self.name)
