"""Camera, picking, interaction and scene management for the 3D graph view."""

from orrery.view.camera import (
    Camera,
    CameraTransition,
    Framing,
    Ray,
    Viewport,
    ease_in_out,
    frame_all,
    frame_entity,
)
from orrery.view.graph_view import GraphView
from orrery.view.interaction import InteractionController, NodeState
from orrery.view.loop import FrameLoop
from orrery.view.picking import intersect_sphere, pick
from orrery.view.scene import EdgeVisual, InMemoryScene, NodeVisual, SceneBackend
from orrery.view.styles import EdgeAppearance, GeometryKind, NodeAppearance, edge_appearance, node_appearance

__all__ = [
    # Camera
    "Camera",
    "CameraTransition",
    "Framing",
    "Ray",
    "Viewport",
    "ease_in_out",
    "frame_all",
    "frame_entity",
    # Picking / interaction
    "pick",
    "intersect_sphere",
    "InteractionController",
    "NodeState",
    # Scene
    "SceneBackend",
    "InMemoryScene",
    "NodeVisual",
    "EdgeVisual",
    "NodeAppearance",
    "EdgeAppearance",
    "GeometryKind",
    "node_appearance",
    "edge_appearance",
    # Facade
    "GraphView",
    "FrameLoop",
]
