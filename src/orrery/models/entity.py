"""Entity and relationship records supplied by the data source."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Keys lifted out of the raw record; everything else lands in attributes
_ENTITY_CORE_KEYS = ("id", "name")


def parse_datetime(value: Any) -> datetime | None:
    """Parse datetime from ISO strings or native datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    # fromisoformat() before 3.11 rejects the trailing Z that JSON stores emit
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_label(value: Any) -> str | None:
    """Coerce a type or classification label to a non-empty string, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return str(value) or None


def parse_strength(value: Any) -> float | None:
    """Coerce a strength value to a finite float, or None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        strength = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(strength):
        return None
    return strength


@dataclass
class Entity:
    """
    A person or record in the visualized network.

    Owned by the data source. The engine reads it and keys all derived
    state by ``id``; it never writes to it.
    """

    id: int
    name: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def faction(self) -> str | None:
        """Faction the entity belongs to, if any."""
        return self.attributes.get("faction") or None

    @property
    def risk_level(self) -> str | None:
        """Risk level label (low, medium, high, critical)."""
        return self.attributes.get("risk_level") or None

    @property
    def email_domain(self) -> str | None:
        """Domain part of the entity's email address."""
        domain = self.attributes.get("email_domain")
        if domain:
            return str(domain)
        email = self.attributes.get("email")
        if email and "@" in str(email):
            return str(email).split("@", 1)[1] or None
        return None

    def to_dict(self) -> dict:
        """Convert to a flat dictionary."""
        return {"id": self.id, "name": self.name, **self.attributes}

    @classmethod
    def from_dict(cls, data: dict) -> "Entity":
        """Create from a flat record; unknown keys become attributes."""
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            attributes={k: v for k, v in data.items() if k not in _ENTITY_CORE_KEYS},
        )


@dataclass
class Relationship:
    """
    A typed, weighted, time-bounded edge between two entities.

    Example: 12 --family--> 40 (strength: 0.8, 2021-03-01 .. open)
    """

    id: int | str
    source_id: int
    target_id: int
    strength: float | None = None  # 0.0 - 1.0, None when the source omits it
    relationship_type: str | None = None  # family, rival, associate, ...
    classification: str | None = None  # intra_faction, inter_faction, civil, ...

    # Validity interval (end None = still active)
    start_time: datetime | None = None
    end_time: datetime | None = None

    # Display names resolved by the source
    source_name: str | None = None
    target_name: str | None = None

    def touches(self, entity_id: int) -> bool:
        """Check whether the entity is one of the endpoints."""
        return self.source_id == entity_id or self.target_id == entity_id

    def other_end(self, entity_id: int) -> int:
        """Return the endpoint opposite to ``entity_id``."""
        return self.target_id if self.source_id == entity_id else self.source_id

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "strength": self.strength,
            "relationship_type": self.relationship_type,
            "classification": self.classification,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "source_name": self.source_name,
            "target_name": self.target_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Relationship":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            source_id=int(data["source_id"]),
            target_id=int(data["target_id"]),
            strength=parse_strength(data.get("strength")),
            relationship_type=parse_label(data.get("relationship_type")),
            classification=parse_label(data.get("classification")),
            start_time=parse_datetime(data.get("start_time")),
            end_time=parse_datetime(data.get("end_time")),
            source_name=data.get("source_name"),
            target_name=data.get("target_name"),
        )
