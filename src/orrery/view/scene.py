"""Scene backend contract and a headless in-memory implementation."""

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np

from orrery.view.camera import Camera
from orrery.view.styles import EdgeAppearance, NodeAppearance

logger = logging.getLogger(__name__)


@dataclass
class NodeVisual:
    """Rendered proxy of an entity."""

    entity_id: int
    position: np.ndarray
    appearance: NodeAppearance

    @property
    def hit_radius(self) -> float:
        return self.appearance.geometry.hit_radius * self.appearance.scale


@dataclass
class EdgeVisual:
    """Rendered proxy of a relationship."""

    relationship_id: int | str
    source_id: int
    target_id: int
    start: np.ndarray
    end: np.ndarray
    appearance: EdgeAppearance


@runtime_checkable
class SceneBackend(Protocol):
    """What the engine needs from a graphics backend."""

    def add_node(self, entity_id: int, position: np.ndarray, appearance: NodeAppearance) -> NodeVisual:
        ...

    def add_edge(
        self,
        relationship_id: int | str,
        source: NodeVisual,
        target: NodeVisual,
        appearance: EdgeAppearance,
    ) -> EdgeVisual:
        ...

    def set_node_appearance(self, entity_id: int, appearance: NodeAppearance) -> None:
        ...

    def clear(self) -> None:
        ...

    def draw(self, camera: Camera) -> None:
        ...


@dataclass
class InMemoryScene:
    """Headless backend that keeps visuals in dictionaries.

    Used by tests, the API and any consumer that renders elsewhere.
    """

    nodes: dict[int, NodeVisual] = field(default_factory=dict)
    edges: dict[int | str, EdgeVisual] = field(default_factory=dict)
    frames_drawn: int = 0
    last_pose: tuple[np.ndarray, np.ndarray] | None = None

    def add_node(self, entity_id: int, position: np.ndarray, appearance: NodeAppearance) -> NodeVisual:
        visual = NodeVisual(
            entity_id=entity_id,
            position=np.asarray(position, dtype=np.float64).copy(),
            appearance=appearance,
        )
        self.nodes[entity_id] = visual
        return visual

    def add_edge(
        self,
        relationship_id: int | str,
        source: NodeVisual,
        target: NodeVisual,
        appearance: EdgeAppearance,
    ) -> EdgeVisual:
        visual = EdgeVisual(
            relationship_id=relationship_id,
            source_id=source.entity_id,
            target_id=target.entity_id,
            start=source.position.copy(),
            end=target.position.copy(),
            appearance=appearance,
        )
        self.edges[relationship_id] = visual
        return visual

    def set_node_appearance(self, entity_id: int, appearance: NodeAppearance) -> None:
        visual = self.nodes.get(entity_id)
        if visual is not None:
            visual.appearance = appearance

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()

    def draw(self, camera: Camera) -> None:
        self.frames_drawn += 1
        self.last_pose = (camera.target.copy(), camera.position.copy())
