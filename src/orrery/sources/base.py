"""Data source boundary: where entities and relationships come from."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from orrery.models import Entity, Relationship

OPEN_END = datetime.max


class SourceError(Exception):
    """A data source could not deliver a snapshot."""


@dataclass(frozen=True)
class TimeWindow:
    """Requested time window; ``start`` None means everything up to ``end``."""

    end: datetime
    start: datetime | None = None

    def overlaps(self, rel: Relationship) -> bool:
        """Check whether a relationship's validity interval meets the window."""
        if rel.start_time is not None and _naive(rel.start_time) > _naive(self.end):
            return False
        if self.start is None:
            return True
        rel_end = rel.end_time if rel.end_time is not None else OPEN_END
        return _naive(rel_end) >= _naive(self.start)

    def to_params(self) -> dict[str, str]:
        """Query parameters for an HTTP store."""
        params = {"end": self.end.isoformat()}
        if self.start is not None:
            params["start"] = self.start.isoformat()
        return params


def _naive(value: datetime) -> datetime:
    # Aware timestamps compare as naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@runtime_checkable
class EntityRelationshipSource(Protocol):
    """Supplies snapshots to the engine."""

    def list_entities(self) -> list[Entity]:
        ...

    def list_relationships(self, window: TimeWindow) -> list[Relationship]:
        ...
