"""Hover / selection / highlight state machine for nodes.

Every node carries an explicit NodeState:

    IDLE <-> HOVERED          pointer enter / leave
    IDLE | HOVERED -> SELECTED  click on the node
    SELECTED -> IDLE           click elsewhere (node or empty space)

A selected node that is also under the pointer stays SELECTED; the hover
reference still points at it. Highlight is an independent flag set from
outside. The displayed appearance is always recomputed from the node's
base appearance, so leaving any state restores the original exactly.
"""

import logging
from collections.abc import Callable
from enum import Enum

from orrery.config import settings
from orrery.view.styles import NodeAppearance, scale_rgb

logger = logging.getLogger(__name__)

AppearanceSink = Callable[[int, NodeAppearance], None]


class NodeState(str, Enum):
    """Interaction state of one node."""

    IDLE = "idle"
    HOVERED = "hovered"
    SELECTED = "selected"


class InteractionController:
    """Tracks node states and pushes the resulting appearance to a sink."""

    def __init__(self, apply: AppearanceSink | None = None) -> None:
        self._apply = apply
        self._base: dict[int, NodeAppearance] = {}
        self._states: dict[int, NodeState] = {}
        self._highlighted: set[int] = set()
        self.hovered_id: int | None = None
        self.selected_id: int | None = None

    def reset(self, base_appearances: dict[int, NodeAppearance]) -> None:
        """Forget all state and adopt a new set of nodes."""
        self._base = dict(base_appearances)
        self._states = {entity_id: NodeState.IDLE for entity_id in self._base}
        self._highlighted.clear()
        self.hovered_id = None
        self.selected_id = None

    def state(self, entity_id: int) -> NodeState | None:
        return self._states.get(entity_id)

    def is_highlighted(self, entity_id: int) -> bool:
        return entity_id in self._highlighted

    def base_appearance(self, entity_id: int) -> NodeAppearance | None:
        return self._base.get(entity_id)

    def appearance(self, entity_id: int) -> NodeAppearance | None:
        """Appearance a node should currently show."""
        base = self._base.get(entity_id)
        if base is None:
            return None

        current = base
        if self._states.get(entity_id) == NodeState.SELECTED:
            current = current.with_changes(color=tuple(settings.selected_color))
        if entity_id == self.hovered_id:
            current = current.with_changes(
                emissive=scale_rgb(current.color, settings.hover_emissive),
                scale=base.scale * settings.hover_scale,
            )
        if entity_id in self._highlighted:
            current = current.with_changes(
                emissive=scale_rgb(current.color, settings.highlight_emissive),
                scale=base.scale * settings.highlight_scale,
            )
        return current

    def _refresh(self, entity_id: int | None) -> None:
        if entity_id is None or self._apply is None:
            return
        appearance = self.appearance(entity_id)
        if appearance is not None:
            self._apply(entity_id, appearance)

    def _settle(self, entity_id: int | None) -> None:
        """Recompute the state tag of a node after a reference moved."""
        if entity_id is None or entity_id not in self._states:
            return
        if entity_id == self.selected_id:
            self._states[entity_id] = NodeState.SELECTED
        elif entity_id == self.hovered_id:
            self._states[entity_id] = NodeState.HOVERED
        else:
            self._states[entity_id] = NodeState.IDLE
        self._refresh(entity_id)

    def hover(self, entity_id: int | None) -> bool:
        """Move the hover reference; returns True when a new node became hovered."""
        if entity_id is not None and entity_id not in self._base:
            entity_id = None
        if entity_id == self.hovered_id:
            return False

        previous, self.hovered_id = self.hovered_id, entity_id
        self._settle(previous)
        self._settle(entity_id)
        return entity_id is not None

    def click(self, entity_id: int | None) -> int | None:
        """Select a node, or clear the selection when ``entity_id`` is None.

        Returns the selected id after the click.
        """
        if entity_id is not None and entity_id not in self._base:
            entity_id = None

        previous, self.selected_id = self.selected_id, entity_id
        if previous != entity_id:
            self._settle(previous)
        self._settle(entity_id)
        return self.selected_id

    def highlight(self, entity_id: int, on: bool = True) -> bool:
        """Toggle the external highlight; returns False for unknown ids."""
        if entity_id not in self._base:
            logger.debug(f"Highlight ignored for unknown entity {entity_id}")
            return False
        if on:
            self._highlighted.add(entity_id)
        else:
            self._highlighted.discard(entity_id)
        self._refresh(entity_id)
        return True
