"""Whitelist/blacklist matching for catalog databases and tables.

A spec is a comma-separated list of tokens of the form ``db`` or
``db.table1|table2``. ``*`` matches any sequence of characters and names are
matched in full, case-insensitively by default. A token without a table part
selects every table of the matching databases.

The blacklist always wins over the whitelist. An empty whitelist accepts
everything that is not blacklisted.

Selectors are pure, side-effect-free objects built once from configuration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

WHITELIST = "whitelist"
BLACKLIST = "blacklist"


def _compile(pattern: str, ignore_case: bool) -> re.Pattern:
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern.replace("*", ".*"), flags)
    except re.error as exc:
        raise ValueError(f"Invalid pattern '{pattern}': {exc}") from exc


@dataclass(frozen=True)
class _Rule:
    """One token: a database pattern plus optional table patterns."""

    db: re.Pattern
    tables: tuple[re.Pattern, ...] = ()

    def matches_db(self, db: str) -> bool:
        return bool(self.db.fullmatch(db))

    def matches_table(self, table: str) -> bool:
        if not self.tables:
            return True
        return any(p.fullmatch(table) for p in self.tables)


def parse_rules(spec: str, *, ignore_case: bool = True) -> tuple[_Rule, ...]:
    """
    Parse a whitelist/blacklist spec into rules.

    Raises:
        ValueError: If a token has more than one ``.`` or a pattern does not
                    compile.
    """
    rules: list[_Rule] = []
    for token in (t.strip() for t in (spec or "").split(",")):
        if not token:
            continue
        parts = [p.strip() for p in token.split(".") if p.strip()]
        if len(parts) > 2:
            raise ValueError(f"Invalid token '{token}' (expected db or db.table).")
        db_pattern = _compile(parts[0], ignore_case)
        table_patterns: tuple[re.Pattern, ...] = ()
        if len(parts) == 2:
            names = [name.strip() for name in parts[1].split("|") if name.strip()]
            # A bare `*` covers every table, same as a database-only token.
            if "*" not in names:
                table_patterns = tuple(_compile(name, ignore_case) for name in names)
        rules.append(_Rule(db=db_pattern, tables=table_patterns))
    return tuple(rules)


@dataclass(frozen=True)
class WhitelistBlacklist:
    """
    Inclusion/exclusion policy for databases and tables.

    Attributes:
        whitelist: Raw inclusion spec. Empty means "everything".
        blacklist: Raw exclusion spec.
        ignore_case: Match names case-insensitively.
    """

    whitelist: str = ""
    blacklist: str = ""
    ignore_case: bool = True
    _include: tuple[_Rule, ...] = field(init=False, repr=False, compare=False)
    _exclude: tuple[_Rule, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_include", parse_rules(self.whitelist, ignore_case=self.ignore_case)
        )
        object.__setattr__(
            self, "_exclude", parse_rules(self.blacklist, ignore_case=self.ignore_case)
        )

    @classmethod
    def from_config(
        cls, config: Mapping[str, str], *, ignore_case: bool = True
    ) -> WhitelistBlacklist:
        """Build from a mapping holding ``whitelist`` and ``blacklist`` keys."""
        return cls(
            whitelist=config.get(WHITELIST, ""),
            blacklist=config.get(BLACKLIST, ""),
            ignore_case=ignore_case,
        )

    def accept_db(self, db: str) -> bool:
        """Return True if any table of ``db`` may be accepted."""
        if self._include and not any(r.matches_db(db) for r in self._include):
            return False
        # Only blacklist tokens without table patterns exclude a whole database.
        return not any(r.matches_db(db) and not r.tables for r in self._exclude)

    def accept_table(self, db: str, table: str) -> bool:
        """Return True if ``db.table`` is whitelisted and not blacklisted."""
        if self._include and not any(
            r.matches_db(db) and r.matches_table(table) for r in self._include
        ):
            return False
        return not any(
            r.matches_db(db) and r.matches_table(table) for r in self._exclude
        )
