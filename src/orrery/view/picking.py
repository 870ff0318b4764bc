"""Pointer-to-node picking by ray casting."""

import math
from collections.abc import Iterable

import numpy as np

from orrery.view.camera import Camera, Ray, Viewport
from orrery.view.scene import NodeVisual


def intersect_sphere(ray: Ray, center: np.ndarray, radius: float) -> float | None:
    """Distance along the ray to the first hit with a sphere, if any.

    A ray starting inside the sphere hits its far side.
    """
    oc = ray.origin - center
    b = float(np.dot(oc, ray.direction))
    c = float(np.dot(oc, oc)) - radius * radius
    disc = b * b - c
    if disc < 0:
        return None
    root = math.sqrt(disc)
    near = -b - root
    if near >= 0:
        return near
    far = -b + root
    return far if far >= 0 else None


def cast(ray: Ray, nodes: Iterable[NodeVisual]) -> list[tuple[float, int]]:
    """All (distance, entity_id) hits along the ray, nearest first."""
    hits = []
    for node in nodes:
        t = intersect_sphere(ray, node.position, node.hit_radius)
        if t is not None:
            hits.append((t, node.entity_id))
    hits.sort(key=lambda hit: hit[0])
    return hits


def pick(
    pointer_x: float,
    pointer_y: float,
    viewport: Viewport,
    camera: Camera,
    nodes: Iterable[NodeVisual],
) -> int | None:
    """
    Nearest node under the pointer.

    Args:
        pointer_x: Pointer x in pixels
        pointer_y: Pointer y in pixels
        viewport: Screen rectangle of the canvas
        camera: Camera the scene is viewed through
        nodes: Candidate node visuals

    Returns:
        Entity id of the nearest intersected node, or None
    """
    ndc_x, ndc_y = viewport.to_ndc(pointer_x, pointer_y)
    hits = cast(camera.ray_from_ndc(ndc_x, ndc_y), nodes)
    return hits[0][1] if hits else None
