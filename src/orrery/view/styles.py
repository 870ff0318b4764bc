"""Visual appearance of nodes and edges, derived from characteristics."""

import colorsys
from dataclasses import dataclass, replace
from enum import Enum

from orrery.models import Characteristics, Relationship
from orrery.models.characteristics import NO_FACTION
from orrery.models.entity import parse_label

RGB = tuple[float, float, float]


def hex_to_rgb(value: int) -> RGB:
    """0xRRGGBB -> (r, g, b) in [0, 1]."""
    return ((value >> 16 & 0xFF) / 255.0, (value >> 8 & 0xFF) / 255.0, (value & 0xFF) / 255.0)


def scale_rgb(color: RGB, factor: float) -> RGB:
    """Multiply every channel, clamped to [0, 1]."""
    return tuple(min(1.0, max(0.0, c * factor)) for c in color)  # type: ignore[return-value]


def mix_rgb(a: RGB, b: RGB, t: float) -> RGB:
    """Linear blend from a (t=0) to b (t=1)."""
    t = min(max(t, 0.0), 1.0)
    return tuple(x + (y - x) * t for x, y in zip(a, b))  # type: ignore[return-value]


def name_hash(text: str) -> int:
    """Sum of code points; stable across processes unlike hash()."""
    return sum(ord(ch) for ch in text)


class GeometryKind(str, Enum):
    """Node primitive, chosen by degree bucket."""

    SPHERE = "sphere"
    BOX = "box"
    OCTAHEDRON = "octahedron"

    @property
    def hit_radius(self) -> float:
        """Bounding-sphere radius at scale 1, used for picking."""
        return _HIT_RADIUS[self]


_HIT_RADIUS = {
    GeometryKind.SPHERE: 0.8,
    GeometryKind.BOX: 0.6 * 3 ** 0.5,  # half-diagonal of a 1.2 cube
    GeometryKind.OCTAHEDRON: 1.0,
}

GEOMETRY_BY_BUCKET = {
    "low": GeometryKind.SPHERE,
    "medium": GeometryKind.BOX,
    "high": GeometryKind.OCTAHEDRON,
}

FACTION_PALETTE: tuple[int, ...] = (
    0xFF0000,
    0xFF6B00,
    0x9B59B6,
    0xE74C3C,
    0x3498DB,
    0x1ABC9C,
    0xF1C40F,
)
NO_FACTION_COLOR = 0x4A9EFF
# Factions coloured by dominant relationship type instead of the palette
UNAFFILIATED = (NO_FACTION, "civil")

TYPE_COLORS: dict[str, int] = {
    "family": 0x51CF66,
    "criminal_partner": 0xFF0000,
    "suspicious_contact": 0xFF6B00,
    "acquaintance": 0x4A9EFF,
    "associate": 0x9B59B6,
    "leadership": 0xE74C3C,
    "subordinate": 0x3498DB,
    "rival": 0xFF0000,
}

RISK_COLOR_MULTIPLIER = {"low": 1.0, "medium": 1.2, "high": 1.4, "critical": 1.6}
RISK_SIZE_BONUS = {"low": 0.0, "medium": 0.1, "high": 0.2, "critical": 0.3}
RISK_EMISSIVE = {"low": 0.1, "medium": 0.2, "high": 0.4, "critical": 0.6}

# classification -> (color, line width)
EDGE_STYLES: dict[str, tuple[int, float]] = {
    "intra_faction": (0xFF0000, 2.0),
    "inter_faction": (0xFF6B00, 2.0),
    "faction_civil": (0xFFD93D, 1.5),
    "civil": (0x4A9EFF, 1.0),
}
DEFAULT_EDGE_STYLE = (0x2A4A6A, 1.0)


@dataclass(frozen=True)
class NodeAppearance:
    """Material and transform of a node primitive."""

    color: RGB
    emissive: RGB
    scale: float = 1.0
    geometry: GeometryKind = GeometryKind.SPHERE
    metalness: float = 0.3
    roughness: float = 0.7

    def with_changes(self, **changes) -> "NodeAppearance":
        return replace(self, **changes)


@dataclass(frozen=True)
class EdgeAppearance:
    """Material of an edge line."""

    color: RGB
    opacity: float
    line_width: float = 1.0


def faction_color(faction: str) -> int:
    """Palette colour for a faction name."""
    return FACTION_PALETTE[name_hash(faction) % len(FACTION_PALETTE)]


def domain_tint(color: RGB, email_domain: str) -> RGB:
    """Shift lightness by -15..+14% depending on the email domain."""
    variation = (name_hash(email_domain) % 30) - 15
    h, l, s = colorsys.rgb_to_hls(*color)
    l = max(0.3, min(0.8, l + variation / 100))
    return colorsys.hls_to_rgb(h, l, s)


def node_appearance(chars: Characteristics) -> NodeAppearance:
    """Base (un-highlighted) appearance of an entity's node."""
    if chars.faction and chars.faction not in UNAFFILIATED:
        base = faction_color(chars.faction)
    else:
        base = TYPE_COLORS.get(chars.dominant_type, NO_FACTION_COLOR)

    multiplier = min(RISK_COLOR_MULTIPLIER.get(chars.risk_level, 1.0), 1.5)
    color = domain_tint(scale_rgb(hex_to_rgb(base), multiplier), chars.email_domain)

    critical = chars.risk_level == "critical"
    return NodeAppearance(
        color=color,
        emissive=scale_rgb(color, RISK_EMISSIVE.get(chars.risk_level, 0.2)),
        scale=0.7 + (chars.degree / 15) * 0.5 + RISK_SIZE_BONUS.get(chars.risk_level, 0.0),
        geometry=GEOMETRY_BY_BUCKET.get(chars.degree_bucket.value, GeometryKind.SPHERE),
        metalness=0.8 if critical else 0.3,
        roughness=0.2 if critical else 0.7,
    )


def edge_appearance(rel: Relationship) -> EdgeAppearance:
    """Appearance of a relationship line."""
    classification = parse_label(rel.classification) or "normal"
    base, width = EDGE_STYLES.get(classification, DEFAULT_EDGE_STYLE)
    # Zero strength draws at full intensity, like a missing one
    intensity = rel.strength or 1.0
    intensity = min(max(intensity, 0.0), 1.0)

    full = hex_to_rgb(base)
    opacity = 0.3 + intensity * 0.4
    if classification in ("intra_faction", "inter_faction"):
        opacity = min(0.9, opacity + 0.2)
    return EdgeAppearance(
        color=mix_rgb(scale_rgb(full, 0.5), full, intensity),
        opacity=opacity,
        line_width=width,
    )
