"""Arena-style spatial state: positions and velocities keyed by entity id."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np


@dataclass
class SpatialState:
    """
    Positions and velocities for one snapshot.

    Rows of ``positions`` / ``velocities`` follow ``ids``; ``index`` maps
    an entity id to its row. Rebuilt wholesale per snapshot, never patched.
    """

    ids: list[int]
    positions: np.ndarray  # (n, 3)
    velocities: np.ndarray  # (n, 3)
    index: dict[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.index:
            self.index = {entity_id: row for row, entity_id in enumerate(self.ids)}

    @classmethod
    def empty(cls) -> "SpatialState":
        """Create a state with no entities."""
        return cls(ids=[], positions=np.zeros((0, 3)), velocities=np.zeros((0, 3)))

    @classmethod
    def from_positions(
        cls,
        ids: Sequence[int],
        positions: np.ndarray | Sequence[Sequence[float]],
        velocities: np.ndarray | Sequence[Sequence[float]] | None = None,
    ) -> "SpatialState":
        """Build a state from explicit coordinates (velocities default to 0)."""
        pos = np.asarray(positions, dtype=np.float64).reshape(len(ids), 3).copy()
        if velocities is None:
            vel = np.zeros_like(pos)
        else:
            vel = np.asarray(velocities, dtype=np.float64).reshape(len(ids), 3).copy()
        return cls(ids=list(ids), positions=pos, velocities=vel)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self.index

    def position(self, entity_id: int) -> np.ndarray | None:
        """Current position of an entity (a view into the arena)."""
        row = self.index.get(entity_id)
        return None if row is None else self.positions[row]

    def velocity(self, entity_id: int) -> np.ndarray | None:
        """Current velocity of an entity."""
        row = self.index.get(entity_id)
        return None if row is None else self.velocities[row]

    def positions_dict(self) -> dict[int, tuple[float, float, float]]:
        """Copy positions out as plain tuples."""
        return {
            entity_id: (float(p[0]), float(p[1]), float(p[2]))
            for entity_id, p in zip(self.ids, self.positions)
        }

    def copy(self) -> "SpatialState":
        """Deep copy of the arena."""
        return SpatialState(
            ids=list(self.ids),
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            index=dict(self.index),
        )
