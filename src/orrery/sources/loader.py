"""Asynchronous snapshot loading with last-write-wins semantics."""

import asyncio
import logging
from concurrent.futures import Executor

from orrery.layout.engine import LayoutSnapshot
from orrery.models import Entity, Relationship
from orrery.sources.base import EntityRelationshipSource, SourceError, TimeWindow
from orrery.view.graph_view import GraphView

logger = logging.getLogger(__name__)


class SnapshotLoader:
    """
    Fetches snapshots off the event loop and hands them to a GraphView.

    Each ``load`` call takes a new request generation. When a fetch
    completes after a newer request was issued its result is discarded,
    so the view always shows the most recently requested window.
    """

    def __init__(
        self,
        source: EntityRelationshipSource,
        view: GraphView,
        executor: Executor | None = None,
    ) -> None:
        self.source = source
        self.view = view
        self._executor = executor
        self._generation = 0

    @property
    def generation(self) -> int:
        """Generation of the most recent request."""
        return self._generation

    def _fetch(self, window: TimeWindow) -> tuple[list[Entity], list[Relationship]]:
        entities = self.source.list_entities()
        relationships = self.source.list_relationships(window)
        return entities, relationships

    async def load(self, window: TimeWindow) -> LayoutSnapshot | None:
        """
        Fetch the window and publish it to the view.

        Returns the new snapshot, or None when a newer request superseded
        this one. SourceError propagates after logging; the view keeps
        its current snapshot.
        """
        self._generation += 1
        generation = self._generation

        loop = asyncio.get_running_loop()
        try:
            entities, relationships = await loop.run_in_executor(self._executor, self._fetch, window)
        except SourceError as e:
            logger.error(f"Snapshot load {generation} failed: {e}")
            raise

        if generation != self._generation:
            logger.debug(f"Discarding stale snapshot {generation} (latest is {self._generation})")
            return None

        snapshot = self.view.set_data(entities, relationships)
        logger.info(
            f"Loaded snapshot {generation}: {len(snapshot.entities)} entities, "
            f"{len(snapshot.relationships)} relationships"
        )
        return snapshot
