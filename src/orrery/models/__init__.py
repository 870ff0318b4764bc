"""Orrery data models."""

from orrery.models.characteristics import (
    CLASSIFICATIONS,
    RELATIONSHIP_TYPES,
    Characteristics,
    DegreeBucket,
)
from orrery.models.entity import Entity, Relationship

__all__ = [
    "Entity",
    "Relationship",
    "Characteristics",
    "DegreeBucket",
    "RELATIONSHIP_TYPES",
    "CLASSIFICATIONS",
]
