"""Force-directed relaxation with cluster cohesion.

Each iteration:
1. Recompute cluster centroids from the current positions
2. For every entity, in snapshot order:
   a. Repulsion from every other entity: coef / d^2 (halved within a cluster)
   b. Attraction along each incident edge: d * edge_attraction
   c. Attraction toward its cluster centroid: d * cluster_attraction
   d. v = (v + F) * damping, p = p + v

Positions are written back entity by entity, so entities later in the
order already see the moved earlier ones within the same iteration.
"""

import logging
from collections.abc import Iterable

import numpy as np

from orrery.config import settings
from orrery.layout.clustering import ClusterAssignment, compute_centroids
from orrery.layout.state import SpatialState
from orrery.models import Relationship

logger = logging.getLogger(__name__)


class ForceRelaxation:
    """Bounded-iteration force simulation over a SpatialState."""

    def __init__(
        self,
        repulsion: float | None = None,
        same_cluster_factor: float | None = None,
        edge_attraction: float | None = None,
        cluster_attraction: float | None = None,
        damping: float | None = None,
        min_distance: float | None = None,
    ) -> None:
        self.repulsion = repulsion if repulsion is not None else settings.repulsion
        self.same_cluster_factor = (
            same_cluster_factor if same_cluster_factor is not None else settings.same_cluster_repulsion_factor
        )
        self.edge_attraction = edge_attraction if edge_attraction is not None else settings.edge_attraction
        self.cluster_attraction = (
            cluster_attraction if cluster_attraction is not None else settings.cluster_attraction
        )
        self.damping = damping if damping is not None else settings.damping
        self.min_distance = min_distance if min_distance is not None else settings.min_distance

    def _neighbour_rows(self, state: SpatialState, edges: Iterable[Relationship]) -> list[np.ndarray]:
        """Row indices of edge neighbours per row; parallel edges repeat."""
        neighbours: list[list[int]] = [[] for _ in range(len(state))]
        for rel in edges:
            src = state.index.get(rel.source_id)
            dst = state.index.get(rel.target_id)
            if src is None or dst is None:
                continue
            neighbours[src].append(dst)
            if dst != src:
                neighbours[dst].append(src)
        return [np.asarray(rows, dtype=np.intp) for rows in neighbours]

    def net_force(
        self,
        row: int,
        state: SpatialState,
        labels: np.ndarray,
        neighbours: np.ndarray,
        centroid: np.ndarray | None,
    ) -> np.ndarray:
        """Sum of repulsion, edge and centroid forces acting on one row."""
        pos = state.positions
        here = pos[row]

        # Repulsion from every other entity
        away = here - pos
        dist = np.maximum(np.linalg.norm(away, axis=1), self.min_distance)
        coef = np.where(labels == labels[row], self.repulsion * self.same_cluster_factor, self.repulsion)
        magnitude = coef / (dist * dist)
        magnitude[row] = 0.0
        force = ((away / dist[:, None]) * magnitude[:, None]).sum(axis=0)

        # Edge attraction toward neighbours
        if neighbours.size:
            toward = pos[neighbours] - here
            edge_dist = np.maximum(np.linalg.norm(toward, axis=1), self.min_distance)
            pull = edge_dist * self.edge_attraction
            force += ((toward / edge_dist[:, None]) * pull[:, None]).sum(axis=0)

        # Cluster cohesion
        if centroid is not None:
            toward = centroid - here
            center_dist = max(float(np.linalg.norm(toward)), self.min_distance)
            force += (toward / center_dist) * (center_dist * self.cluster_attraction)

        return force

    def relax(
        self,
        state: SpatialState,
        edges: Iterable[Relationship],
        assignment: ClusterAssignment,
        iterations: int | None = None,
    ) -> SpatialState:
        """
        Run the simulation in place.

        Args:
            state: Positions/velocities to update
            edges: Relationships; ones with unknown endpoints are ignored
            assignment: Cluster assignment for the entities in ``state``
            iterations: Number of iterations (default: settings.relax_iterations)

        Returns:
            The same ``state`` object, updated
        """
        iterations = iterations if iterations is not None else settings.relax_iterations
        if len(state) == 0 or iterations <= 0:
            return state

        neighbours = self._neighbour_rows(state, edges)
        # Unclustered entities get unique negative labels so they never match
        labels = np.array(
            [assignment.cluster_of.get(eid, -1 - row) for row, eid in enumerate(state.ids)],
            dtype=np.int64,
        )

        for iteration in range(iterations):
            centroids = compute_centroids(assignment, state)

            for row, entity_id in enumerate(state.ids):
                cluster_id = assignment.cluster_of.get(entity_id)
                centroid = centroids.get(cluster_id) if cluster_id is not None else None
                force = self.net_force(row, state, labels, neighbours[row], centroid)

                state.velocities[row] = (state.velocities[row] + force) * self.damping
                state.positions[row] += state.velocities[row]

            if logger.isEnabledFor(logging.DEBUG) and (iteration + 1) % 25 == 0:
                speed = float(np.linalg.norm(state.velocities, axis=1).max())
                logger.debug(f"Iteration {iteration + 1}/{iterations}: max speed {speed:.4f}")

        return state
