"""Layout pipeline: characteristics -> clusters -> seeding -> relaxation."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from orrery.config import settings
from orrery.layout.characteristics import extract_characteristics
from orrery.layout.clustering import ClusterAssignment, assign_clusters, compute_centroids
from orrery.layout.relaxation import ForceRelaxation
from orrery.layout.seeding import seed_layout
from orrery.layout.state import SpatialState
from orrery.models import Characteristics, Entity, Relationship

logger = logging.getLogger(__name__)


@dataclass
class LayoutSnapshot:
    """A complete, immutable-by-convention layout of one data snapshot."""

    generation: int
    entities: dict[int, Entity] = field(default_factory=dict)  # insertion = snapshot order
    relationships: list[Relationship] = field(default_factory=list)  # kept edges only
    dropped_relationships: int = 0
    characteristics: dict[int, Characteristics] = field(default_factory=dict)
    clusters: ClusterAssignment = field(default_factory=ClusterAssignment)
    centroids: dict[int, np.ndarray] = field(default_factory=dict)
    spatial: SpatialState = field(default_factory=SpatialState.empty)
    duration_ms: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.entities

    def position(self, entity_id: int) -> np.ndarray | None:
        """Position of an entity, or None when it is not in the snapshot."""
        return self.spatial.position(entity_id)

    def to_dict(self) -> dict:
        """Serialize nodes, links and clusters for transport."""
        nodes = []
        for entity_id, entity in self.entities.items():
            x, y, z = (float(v) for v in self.spatial.position(entity_id))
            chars = self.characteristics[entity_id]
            nodes.append({
                "id": entity_id,
                "name": entity.name,
                "x": x,
                "y": y,
                "z": z,
                "cluster": self.clusters.cluster_of[entity_id],
                "cluster_key": chars.cluster_key,
                "characteristics": chars.to_dict(),
            })
        return {
            "generation": self.generation,
            "nodes": nodes,
            "links": [rel.to_dict() for rel in self.relationships],
            "clusters": self.clusters.to_dict()["clusters"],
            "dropped_links": self.dropped_relationships,
        }


class LayoutEngine:
    """Runs the full layout pipeline for each snapshot.

    Every call to ``compute`` rebuilds all derived state from scratch;
    nothing carries over between snapshots.
    """

    def __init__(
        self,
        relaxation: ForceRelaxation | None = None,
        iterations: int | None = None,
        seed: int | None = None,
    ) -> None:
        self.relaxation = relaxation or ForceRelaxation()
        self.iterations = iterations if iterations is not None else settings.relax_iterations
        self._rng = np.random.default_rng(seed if seed is not None else settings.layout_seed)
        self._generation = 0

    @staticmethod
    def _unique_entities(entities: Iterable[Entity]) -> dict[int, Entity]:
        unique: dict[int, Entity] = {}
        for entity in entities:
            if entity.id in unique:
                logger.warning(f"Duplicate entity id {entity.id} ignored")
                continue
            unique[entity.id] = entity
        return unique

    @staticmethod
    def _valid_edges(
        relationships: Iterable[Relationship], known: dict[int, Entity]
    ) -> tuple[list[Relationship], int]:
        kept: list[Relationship] = []
        dropped = 0
        for rel in relationships:
            if rel.source_id in known and rel.target_id in known:
                kept.append(rel)
            else:
                dropped += 1
                logger.debug(
                    f"Dropping relationship {rel.id}: endpoint missing "
                    f"({rel.source_id} -> {rel.target_id})"
                )
        return kept, dropped

    def compute(
        self,
        entities: Iterable[Entity],
        relationships: Iterable[Relationship],
        iterations: int | None = None,
    ) -> LayoutSnapshot:
        """
        Lay out one snapshot.

        Args:
            entities: Snapshot entities
            relationships: Snapshot relationships (dangling ones are dropped)
            iterations: Override for the relaxation iteration count

        Returns:
            LayoutSnapshot with positions for exactly the snapshot's entities
        """
        started = time.perf_counter()
        self._generation += 1

        known = self._unique_entities(entities)
        edges, dropped = self._valid_edges(relationships, known)
        ordered = list(known.values())

        characteristics = extract_characteristics(ordered, edges)
        clusters = assign_clusters(ordered, characteristics)
        spatial = seed_layout([e.id for e in ordered], clusters, rng=self._rng)
        self.relaxation.relax(
            spatial, edges, clusters, iterations if iterations is not None else self.iterations
        )

        snapshot = LayoutSnapshot(
            generation=self._generation,
            entities=known,
            relationships=edges,
            dropped_relationships=dropped,
            characteristics=characteristics,
            clusters=clusters,
            centroids=compute_centroids(clusters, spatial),
            spatial=spatial,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        logger.info(
            f"Layout #{snapshot.generation}: {len(known)} entities, {len(edges)} edges "
            f"({dropped} dropped), {clusters.cluster_count} clusters in {snapshot.duration_ms:.1f}ms"
        )
        return snapshot

    def empty(self) -> LayoutSnapshot:
        """A snapshot with nothing in it (used by clear)."""
        self._generation += 1
        return LayoutSnapshot(generation=self._generation)
