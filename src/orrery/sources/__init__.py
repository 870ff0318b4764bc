"""Data sources feeding snapshots to the layout engine."""

from orrery.sources.base import EntityRelationshipSource, SourceError, TimeWindow
from orrery.sources.http import HttpSource
from orrery.sources.loader import SnapshotLoader
from orrery.sources.memory import InMemorySource

__all__ = [
    "EntityRelationshipSource",
    "SourceError",
    "TimeWindow",
    "HttpSource",
    "InMemorySource",
    "SnapshotLoader",
]
