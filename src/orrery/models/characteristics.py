"""Derived per-entity characteristics used for clustering and styling."""

from dataclasses import dataclass, field
from enum import Enum

# Fixed enumeration; its order is the tie-break order for the dominant type
RELATIONSHIP_TYPES: tuple[str, ...] = (
    "family",
    "criminal_partner",
    "suspicious_contact",
    "acquaintance",
    "associate",
    "leadership",
    "subordinate",
    "rival",
    "unknown",
)

CLASSIFICATIONS: tuple[str, ...] = (
    "intra_faction",
    "inter_faction",
    "faction_civil",
    "civil",
    "normal",
)

UNKNOWN_TYPE = "unknown"
NO_FACTION = "none"
DEFAULT_RISK = "low"
UNKNOWN_DOMAIN = "unknown"


class DegreeBucket(str, Enum):
    """Coarse degree category."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def for_degree(cls, degree: int, medium_at: int = 3, high_at: int = 7) -> "DegreeBucket":
        """Bucket a degree using the given thresholds."""
        if degree < medium_at:
            return cls.LOW
        if degree < high_at:
            return cls.MEDIUM
        return cls.HIGH


@dataclass
class Characteristics:
    """Descriptive features of one entity, rebuilt on every snapshot."""

    entity_id: int
    dominant_type: str
    avg_strength: float
    degree: int
    degree_bucket: DegreeBucket
    faction: str = NO_FACTION
    risk_level: str = DEFAULT_RISK
    email_domain: str = UNKNOWN_DOMAIN

    type_counts: dict[str, int] = field(default_factory=dict)
    classification_counts: dict[str, int] = field(default_factory=dict)
    intra_faction_count: int = 0

    @property
    def cluster_key(self) -> str:
        """Composite key shared by entities that belong in one cluster."""
        return f"{self.faction}_{self.dominant_type}_{self.degree_bucket.value}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "entity_id": self.entity_id,
            "dominant_type": self.dominant_type,
            "avg_strength": self.avg_strength,
            "degree": self.degree,
            "degree_bucket": self.degree_bucket.value,
            "faction": self.faction,
            "risk_level": self.risk_level,
            "email_domain": self.email_domain,
            "type_counts": dict(self.type_counts),
            "classification_counts": dict(self.classification_counts),
            "intra_faction_count": self.intra_faction_count,
        }
