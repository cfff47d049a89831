"""Event sinks for dataset discovery.

The finder reports one event per candidate table: ``DatasetFound`` when a
dataset was created, ``DatasetError`` when creating it failed. Sinks are
optional; ``NoOpEventSubmitter`` is used when none is given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

DATASET_FOUND = "DatasetFound"
DATASET_ERROR = "DatasetError"
DATASET_URN_KEY = "datasetUrn"
FAILURE_CONTEXT_KEY = "FailureContext"


class EventSubmitter(Protocol):
    """Interface for reporting discovery events."""

    def submit(self, name: str, **metadata: str) -> None:
        ...


class NoOpEventSubmitter:
    """Drops every event."""

    def submit(self, name: str, **metadata: str) -> None:
        return None


@dataclass(frozen=True)
class Event:
    """A submitted event."""

    name: str
    metadata: dict[str, str]


@dataclass
class CollectingEventSubmitter:
    """Keeps events in memory, in submission order."""

    events: list[Event] = field(default_factory=list)

    def submit(self, name: str, **metadata: str) -> None:
        self.events.append(Event(name=name, metadata=dict(metadata)))

    def named(self, name: str) -> list[Event]:
        return [e for e in self.events if e.name == name]
