"""Initial placement: cluster seeds on a sphere, members scattered around them.

Cluster seed points follow a golden-angle (Fibonacci) distribution, so the
macro structure is reproducible. Member offsets are random inside a small
sphere around their seed.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from orrery.config import settings
from orrery.layout.clustering import ClusterAssignment
from orrery.layout.state import SpatialState

logger = logging.getLogger(__name__)


def seed_radius(cluster_count: int, min_radius: float | None = None, per_cluster: float | None = None) -> float:
    """Radius of the sphere holding the cluster seed points."""
    min_radius = min_radius if min_radius is not None else settings.seed_min_radius
    per_cluster = per_cluster if per_cluster is not None else settings.seed_radius_per_cluster
    return max(min_radius, math.cbrt(max(1, cluster_count)) * per_cluster)


def cluster_seed_points(
    cluster_ids: Sequence[int],
    radius: float,
    golden_ratio: float | None = None,
) -> dict[int, np.ndarray]:
    """
    Place the i-th cluster on a sphere of ``radius``.

    theta = acos(2i/G - 1), phi = 2*pi*i*golden_ratio.
    """
    golden_ratio = golden_ratio if golden_ratio is not None else settings.seed_golden_ratio
    count = max(1, len(cluster_ids))
    points: dict[int, np.ndarray] = {}
    for i, cluster_id in enumerate(cluster_ids):
        theta = math.acos(2 * (i / count) - 1)
        phi = 2 * math.pi * i * golden_ratio
        points[cluster_id] = radius * np.array([
            math.sin(theta) * math.cos(phi),
            math.sin(theta) * math.sin(phi),
            math.cos(theta),
        ])
    return points


def scatter_offset(rng: np.random.Generator, spread: float) -> np.ndarray:
    """Random offset inside a sphere of radius ``spread``."""
    angle1 = rng.random() * math.pi * 2
    angle2 = rng.random() * math.pi
    r = rng.random() * spread
    return np.array([
        r * math.sin(angle2) * math.cos(angle1),
        r * math.sin(angle2) * math.sin(angle1),
        r * math.cos(angle2),
    ])


def seed_layout(
    entity_ids: Sequence[int],
    assignment: ClusterAssignment,
    rng: np.random.Generator | None = None,
    spread: float | None = None,
) -> SpatialState:
    """
    Seed positions for every entity; velocities start at zero.

    Args:
        entity_ids: Entities in snapshot order
        assignment: Cluster assignment for those entities
        rng: Random generator for member jitter (default: settings.layout_seed)
        spread: Scatter radius around each cluster seed point

    Returns:
        A fresh SpatialState
    """
    if not entity_ids:
        return SpatialState.empty()

    rng = rng if rng is not None else np.random.default_rng(settings.layout_seed)
    spread = spread if spread is not None else settings.seed_spread

    cluster_ids = assignment.cluster_ids()
    radius = seed_radius(len(cluster_ids))
    seeds = cluster_seed_points(cluster_ids, radius)

    positions = np.zeros((len(entity_ids), 3))
    for row, entity_id in enumerate(entity_ids):
        cluster_id = assignment.cluster_of.get(entity_id)
        center = seeds.get(cluster_id, np.zeros(3)) if cluster_id is not None else np.zeros(3)
        positions[row] = center + scatter_offset(rng, spread)

    logger.debug(f"Seeded {len(entity_ids)} entities around {len(cluster_ids)} clusters (R={radius:.1f})")
    return SpatialState.from_positions(entity_ids, positions)
