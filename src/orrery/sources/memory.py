"""In-memory data source for tests, scripts and the layout API."""

from collections.abc import Iterable

from orrery.models import Entity, Relationship
from orrery.sources.base import TimeWindow


class InMemorySource:
    """Serves a fixed set of entities and relationships."""

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        relationships: Iterable[Relationship] = (),
    ) -> None:
        self.entities = list(entities)
        self.relationships = list(relationships)

    def list_entities(self) -> list[Entity]:
        return list(self.entities)

    def list_relationships(self, window: TimeWindow) -> list[Relationship]:
        return [rel for rel in self.relationships if window.overlaps(rel)]

    @classmethod
    def from_dict(cls, data: dict) -> "InMemorySource":
        """Build from ``{"entities": [...], "relationships": [...]}``."""
        return cls(
            entities=[Entity.from_dict(e) for e in data.get("entities", [])],
            relationships=[Relationship.from_dict(r) for r in data.get("relationships", [])],
        )
