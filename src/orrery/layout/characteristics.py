"""Characteristic extraction from relationship membership."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from orrery.config import settings
from orrery.models import CLASSIFICATIONS, RELATIONSHIP_TYPES, Characteristics, DegreeBucket, Entity, Relationship
from orrery.models.characteristics import DEFAULT_RISK, NO_FACTION, UNKNOWN_DOMAIN, UNKNOWN_TYPE
from orrery.models.entity import parse_label

logger = logging.getLogger(__name__)


def dominant_type(type_counts: dict[str, int]) -> str:
    """Pick the most frequent relationship type.

    Ties go to the type that comes first in ``type_counts`` iteration
    order, which callers build as the fixed enumeration followed by
    unrecognised types in first-seen order. An empty or all-zero count
    map yields ``unknown``.
    """
    best_type = UNKNOWN_TYPE
    best_count = 0
    for rel_type, count in type_counts.items():
        if count > best_count:
            best_type, best_count = rel_type, count
    return best_type


def _incident_edges(
    entities: Sequence[Entity], relationships: Iterable[Relationship]
) -> dict[int, list[Relationship]]:
    """Group relationships by endpoint, preserving relationship order."""
    incident: dict[int, list[Relationship]] = defaultdict(list)
    known = {e.id for e in entities}
    for rel in relationships:
        if rel.source_id in known:
            incident[rel.source_id].append(rel)
        # A self-loop is one incident edge, not two
        if rel.target_id in known and rel.target_id != rel.source_id:
            incident[rel.target_id].append(rel)
    return incident


def extract_characteristics(
    entities: Sequence[Entity],
    relationships: Iterable[Relationship],
    default_strength: float | None = None,
    medium_at: int | None = None,
    high_at: int | None = None,
) -> dict[int, Characteristics]:
    """
    Derive per-entity characteristics from incident relationships.

    Args:
        entities: Snapshot entities (first record wins on duplicate ids)
        relationships: Snapshot relationships
        default_strength: Strength used when a relationship has none
        medium_at: Degree threshold for the medium bucket
        high_at: Degree threshold for the high bucket

    Returns:
        Mapping entity_id -> Characteristics for every entity
    """
    default_strength = default_strength if default_strength is not None else settings.default_strength
    medium_at = medium_at if medium_at is not None else settings.degree_medium_threshold
    high_at = high_at if high_at is not None else settings.degree_high_threshold

    incident = _incident_edges(entities, relationships)
    result: dict[int, Characteristics] = {}

    for entity in entities:
        if entity.id in result:
            continue

        type_counts = {t: 0 for t in RELATIONSHIP_TYPES}
        classification_counts = {c: 0 for c in CLASSIFICATIONS}
        total_strength = 0.0
        intra_faction = 0

        edges = incident.get(entity.id, [])
        for rel in edges:
            total_strength += rel.strength if rel.strength is not None else default_strength

            rel_type = parse_label(rel.relationship_type) or UNKNOWN_TYPE
            type_counts[rel_type] = type_counts.get(rel_type, 0) + 1

            classification = parse_label(rel.classification) or "normal"
            classification_counts[classification] = classification_counts.get(classification, 0) + 1
            if classification == "intra_faction":
                intra_faction += 1

        degree = len(edges)
        result[entity.id] = Characteristics(
            entity_id=entity.id,
            dominant_type=dominant_type(type_counts),
            avg_strength=total_strength / degree if degree else 0.0,
            degree=degree,
            degree_bucket=DegreeBucket.for_degree(degree, medium_at, high_at),
            faction=str(entity.faction) if entity.faction else NO_FACTION,
            risk_level=str(entity.risk_level) if entity.risk_level else DEFAULT_RISK,
            email_domain=entity.email_domain or UNKNOWN_DOMAIN,
            type_counts=type_counts,
            classification_counts=classification_counts,
            intra_faction_count=intra_faction,
        )

    logger.debug(f"Extracted characteristics for {len(result)} entities")
    return result
