"""Interactive graph view: layout snapshot + scene + camera + interaction."""

import logging
from collections.abc import Callable, Iterable

import numpy as np

from orrery.config import settings
from orrery.layout.engine import LayoutEngine, LayoutSnapshot
from orrery.models import Entity, Relationship
from orrery.view.camera import Camera, CameraTransition, Framing, Viewport, frame_all, frame_entity, monotonic_ms
from orrery.view.interaction import InteractionController, NodeState
from orrery.view.picking import pick
from orrery.view.scene import EdgeVisual, InMemoryScene, NodeVisual, SceneBackend
from orrery.view.styles import edge_appearance, node_appearance

logger = logging.getLogger(__name__)

EntityCallback = Callable[[Entity], None]

PAN_KEYS: dict[str, tuple[float, float]] = {
    "arrowleft": (-1.0, 0.0),
    "a": (-1.0, 0.0),
    "arrowright": (1.0, 0.0),
    "d": (1.0, 0.0),
    "arrowup": (0.0, 1.0),
    "w": (0.0, 1.0),
    "arrowdown": (0.0, -1.0),
    "s": (0.0, -1.0),
}
ZOOM_IN_KEYS = ("q", "pageup")
ZOOM_OUT_KEYS = ("e", "pagedown")
RESET_KEY = "r"
FOCUS_KEY = " "


class GraphView:
    """
    Public surface of the engine.

    ``set_data`` runs the whole layout pipeline synchronously, rebuilds
    every visual and publishes the result as ``snapshot`` in one reference
    swap. Pointer and keyboard handlers run in the caller's turn and never
    touch layout state; focus requests only move the camera.
    """

    def __init__(
        self,
        engine: LayoutEngine | None = None,
        scene: SceneBackend | None = None,
        viewport: Viewport | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.engine = engine or LayoutEngine()
        self.scene = scene if scene is not None else InMemoryScene()
        self.viewport = viewport or Viewport(width=1280, height=720)
        self.camera = Camera(aspect=self.viewport.aspect)
        self.interaction = InteractionController(apply=self.scene.set_node_appearance)
        self.snapshot: LayoutSnapshot = self.engine.empty()
        self.transition: CameraTransition | None = None
        self.nodes: dict[int, NodeVisual] = {}
        self.edges: dict[int | str, EdgeVisual] = {}

        self._clock = clock
        self._keys: set[str] = set()
        self._timed_highlights: dict[int, float] = {}  # entity_id -> expiry (ms)
        self._click_callbacks: list[EntityCallback] = []
        self._hover_callbacks: list[EntityCallback] = []

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def set_data(self, entities: Iterable[Entity], relationships: Iterable[Relationship]) -> LayoutSnapshot:
        """Replace the snapshot, lay it out and rebuild the scene."""
        snapshot = self.engine.compute(entities, relationships)
        self._rebuild_scene(snapshot)
        self.snapshot = snapshot
        self.frame_all()
        return snapshot

    def clear_graph(self) -> None:
        """Drop every visual and all layout state."""
        empty = self.engine.empty()
        self._rebuild_scene(empty)
        self.snapshot = empty

    def _rebuild_scene(self, snapshot: LayoutSnapshot) -> None:
        self.scene.clear()
        self.transition = None
        self._timed_highlights.clear()

        nodes: dict[int, NodeVisual] = {}
        for entity_id in snapshot.entities:
            appearance = node_appearance(snapshot.characteristics[entity_id])
            nodes[entity_id] = self.scene.add_node(entity_id, snapshot.position(entity_id), appearance)

        edges: dict[int | str, EdgeVisual] = {}
        for rel in snapshot.relationships:
            source = nodes.get(rel.source_id)
            target = nodes.get(rel.target_id)
            if source is None or target is None:
                continue
            edges[rel.id] = self.scene.add_edge(rel.id, source, target, edge_appearance(rel))

        self.nodes = nodes
        self.edges = edges
        self.interaction.reset({entity_id: node.appearance for entity_id, node in nodes.items()})

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_entity_clicked(self, callback: EntityCallback) -> None:
        self._click_callbacks.append(callback)

    def on_entity_hovered(self, callback: EntityCallback) -> None:
        self._hover_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def frame_all(self) -> Framing | None:
        """Jump the camera to frame the whole graph (no-op when empty)."""
        framing = frame_all(self.snapshot.spatial.positions)
        if framing is None:
            return None
        self.transition = None
        self.camera.set_pose(framing.target, framing.eye)
        return framing

    def focus_on_entity(self, entity_id: int) -> bool:
        """Start (or restart) a framing transition toward one entity."""
        position = self.snapshot.position(entity_id)
        if position is None:
            logger.debug(f"Focus ignored for unknown entity {entity_id}")
            return False
        self.transition = frame_entity(position, self.camera.target, self.camera.position, self._clock())
        return True

    def highlight_entity(self, entity_id: int, on: bool = True) -> bool:
        """External temporary emphasis, independent of hover and selection."""
        self._timed_highlights.pop(entity_id, None)
        return self.interaction.highlight(entity_id, on)

    def reveal_entity(self, entity_id: int, duration_ms: float | None = None) -> bool:
        """Highlight and focus an entity; the highlight expires on its own."""
        if not self.interaction.highlight(entity_id, True):
            return False
        duration_ms = duration_ms if duration_ms is not None else settings.reveal_highlight_ms
        self._timed_highlights[entity_id] = self._clock() + duration_ms
        self.focus_on_entity(entity_id)
        return True

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def resize(self, width: float, height: float) -> None:
        self.viewport = Viewport(width=width, height=height, left=self.viewport.left, top=self.viewport.top)
        self.camera.aspect = self.viewport.aspect

    def pick(self, x: float, y: float) -> int | None:
        """Entity under a pointer position, or None."""
        if not self.nodes:
            return None
        return pick(x, y, self.viewport, self.camera, self.nodes.values())

    def pointer_move(self, x: float, y: float) -> int | None:
        """Update hover state; notifies observers when a new node is entered."""
        entity_id = self.pick(x, y)
        if self.interaction.hover(entity_id) and entity_id is not None:
            entity = self.snapshot.entities[entity_id]
            for callback in self._hover_callbacks:
                callback(entity)
        return entity_id

    def pointer_click(self, x: float, y: float, click_count: int = 1) -> int | None:
        """Select the node under the pointer (empty space deselects).

        A double click also focuses the camera on the node.
        """
        entity_id = self.pick(x, y)
        self.interaction.click(entity_id)
        if entity_id is None:
            return None

        if click_count >= 2:
            self.focus_on_entity(entity_id)
        entity = self.snapshot.entities[entity_id]
        for callback in self._click_callbacks:
            callback(entity)
        return entity_id

    def node_state(self, entity_id: int) -> NodeState | None:
        return self.interaction.state(entity_id)

    # ------------------------------------------------------------------
    # Keyboard input
    # ------------------------------------------------------------------

    def key_down(self, key: str) -> None:
        key = key.lower()
        if key == RESET_KEY:
            self.frame_all()
        elif key == FOCUS_KEY and self.interaction.selected_id is not None:
            self.focus_on_entity(self.interaction.selected_id)
        self._keys.add(key)

    def key_up(self, key: str) -> None:
        self._keys.discard(key.lower())

    def _apply_held_keys(self) -> None:
        dx = dy = 0.0
        for key in self._keys:
            step = PAN_KEYS.get(key)
            if step is not None:
                dx += step[0] * settings.pan_speed
                dy += step[1] * settings.pan_speed
        if dx or dy:
            self.camera.pan(dx, dy)
        if any(k in self._keys for k in ZOOM_IN_KEYS):
            self.camera.dolly(settings.zoom_in_factor)
        if any(k in self._keys for k in ZOOM_OUT_KEYS):
            self.camera.dolly(settings.zoom_out_factor)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self, now_ms: float | None = None) -> None:
        """Advance camera animation, held keys and timed highlights."""
        now_ms = now_ms if now_ms is not None else self._clock()

        if self.transition is not None:
            target, eye = self.transition.sample(now_ms)
            self.camera.set_pose(target, eye)
            if self.transition.finished(now_ms):
                self.transition = None

        if self._keys:
            self._apply_held_keys()

        expired = [eid for eid, until in self._timed_highlights.items() if until <= now_ms]
        for entity_id in expired:
            del self._timed_highlights[entity_id]
            self.interaction.highlight(entity_id, False)

    def draw(self) -> None:
        self.scene.draw(self.camera)

    def positions(self) -> dict[int, np.ndarray]:
        """Current entity positions keyed by id."""
        spatial = self.snapshot.spatial
        return {entity_id: spatial.positions[row] for entity_id, row in spatial.index.items()}
