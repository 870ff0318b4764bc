"""Cluster assignment by composite characteristic key."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from orrery.layout.state import SpatialState
from orrery.models import Characteristics, Entity

logger = logging.getLogger(__name__)


@dataclass
class ClusterAssignment:
    """Result of clustering one snapshot.

    Cluster ids come from a fresh counter on every run and are not stable
    across snapshots; ``keys`` holds the composite key, which is.
    """

    cluster_of: dict[int, int] = field(default_factory=dict)  # entity_id -> cluster_id
    keys: dict[int, str] = field(default_factory=dict)  # cluster_id -> composite key
    members: dict[int, list[int]] = field(default_factory=dict)  # cluster_id -> entity ids

    @property
    def cluster_count(self) -> int:
        return len(self.keys)

    def cluster_ids(self) -> list[int]:
        """Cluster ids in allocation (first-seen) order."""
        return list(self.keys)

    def same_cluster(self, a: int, b: int) -> bool:
        """Check whether two entities share a cluster."""
        cluster_a = self.cluster_of.get(a)
        return cluster_a is not None and cluster_a == self.cluster_of.get(b)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "clusters": [
                {"id": cid, "key": key, "members": list(self.members.get(cid, []))}
                for cid, key in self.keys.items()
            ],
        }


def assign_clusters(
    entities: Sequence[Entity],
    characteristics: dict[int, Characteristics],
) -> ClusterAssignment:
    """
    Group entities sharing (faction, dominant type, degree bucket).

    The first entity to present a new key allocates the next id, starting
    at 0; later entities with the same key join that cluster.
    """
    assignment = ClusterAssignment()
    key_to_id: dict[str, int] = {}

    for entity in entities:
        if entity.id in assignment.cluster_of:
            continue
        chars = characteristics.get(entity.id)
        if chars is None:
            continue

        key = chars.cluster_key
        cluster_id = key_to_id.get(key)
        if cluster_id is None:
            cluster_id = len(key_to_id)
            key_to_id[key] = cluster_id
            assignment.keys[cluster_id] = key
            assignment.members[cluster_id] = []

        assignment.cluster_of[entity.id] = cluster_id
        assignment.members[cluster_id].append(entity.id)

    logger.debug(
        f"Assigned {len(assignment.cluster_of)} entities to {assignment.cluster_count} clusters"
    )
    return assignment


def compute_centroids(
    assignment: ClusterAssignment,
    state: SpatialState | None,
) -> dict[int, np.ndarray]:
    """Mean member position per cluster; the origin when nothing is placed yet."""
    centroids: dict[int, np.ndarray] = {}
    for cluster_id, members in assignment.members.items():
        rows = [] if state is None else [state.index[m] for m in members if m in state.index]
        if rows:
            centroids[cluster_id] = state.positions[rows].mean(axis=0)
        else:
            centroids[cluster_id] = np.zeros(3)
    return centroids
