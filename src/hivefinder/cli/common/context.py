"""Application context management for the CLI."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rich.markup import escape

from hivefinder.cli.common.exits import die
from hivefinder.core.events import CollectingEventSubmitter
from hivefinder.core.finder import HiveDatasetFinder
from hivefinder.core.pool import PROFILE_KEY
from hivefinder.core.properties import load_properties, parse_assignment


@dataclass
class FinderAppContext:
    """Application context holding job properties, the finder and its event sink."""

    profile: str | None
    properties: dict[str, str]
    finder: HiveDatasetFinder
    events: CollectingEventSubmitter


def build_properties(
    properties_file: Path | None,
    overrides: Iterable[str],
    profile: str | None = None,
) -> dict[str, str]:
    """Merge the properties file, `--set` overrides and the profile (in that order)."""
    props: dict[str, str] = {}
    if properties_file is not None:
        props.update(load_properties(properties_file))
    for item in overrides:
        key, value = parse_assignment(item)
        props[key] = value
    if profile:
        props[PROFILE_KEY] = profile
    return props


def build_finder_context(
    profile: str | None,
    properties_file: Path | None,
    overrides: Iterable[str],
) -> FinderAppContext:
    """Build and return the application context for discovery commands.

    Args:
        profile: Optional Databricks profile name to use for authentication.
        properties_file: Optional job properties file.
        overrides: `key=value` property overrides.

    Returns:
        FinderAppContext: Application context with a configured finder.
    """
    try:
        props = build_properties(properties_file, overrides, profile)
        events = CollectingEventSubmitter()
        finder = HiveDatasetFinder(None, props, event_submitter=events)
    except (OSError, ValueError) as exc:
        die(escape(str(exc)), code=2)
    return FinderAppContext(
        profile=profile, properties=props, finder=finder, events=events
    )
