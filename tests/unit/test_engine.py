"""Unit tests for the layout pipeline."""

import logging

import numpy as np
import pytest

from orrery.layout import LayoutEngine
from orrery.layout.seeding import seed_radius
from orrery.models import Entity, Relationship


@pytest.fixture
def path_snapshot() -> tuple[list[Entity], list[Relationship]]:
    """Five entities on a 4-edge path, split across two factions."""
    entities = [
        Entity(id=i, name=f"p{i}", attributes={"faction": "north" if i <= 3 else "south"})
        for i in range(1, 6)
    ]
    relationships = [
        Relationship(id=100 + i, source_id=i, target_id=i + 1, strength=0.6, relationship_type="associate")
        for i in range(1, 5)
    ]
    return entities, relationships


class TestLayoutEngine:
    """Tests for LayoutEngine.compute."""

    def test_spatial_keys_match_entities(self, engine: LayoutEngine, sample_entities, sample_relationships) -> None:
        """Test no extra and no missing positions."""
        snapshot = engine.compute(sample_entities, sample_relationships)
        ids = {e.id for e in sample_entities}
        assert set(snapshot.spatial.index) == ids
        assert set(snapshot.characteristics) == ids
        assert set(snapshot.clusters.cluster_of) == ids

    def test_dangling_edges_dropped(self, engine: LayoutEngine, sample_entities, sample_relationships) -> None:
        """Test that edges to missing entities are silently dropped."""
        dangling = Relationship(id=999, source_id=1, target_id=404, relationship_type="family")
        snapshot = engine.compute(sample_entities, [*sample_relationships, dangling])

        assert snapshot.dropped_relationships == 1
        assert 999 not in {r.id for r in snapshot.relationships}
        # Dropped edges do not count toward degree
        assert snapshot.characteristics[1].degree == 1

    def test_duplicate_entity_first_wins(self, engine: LayoutEngine, caplog: pytest.LogCaptureFixture) -> None:
        """Test duplicate ids."""
        entities = [
            Entity(id=1, name="first", attributes={"faction": "north"}),
            Entity(id=1, name="second", attributes={"faction": "south"}),
        ]
        with caplog.at_level(logging.WARNING):
            snapshot = engine.compute(entities, [])

        assert len(snapshot.spatial) == 1
        assert snapshot.entities[1].name == "first"
        assert snapshot.characteristics[1].faction == "north"
        assert "Duplicate entity id 1" in caplog.text

    def test_empty_snapshot(self, engine: LayoutEngine) -> None:
        """Test that an empty snapshot is not an error."""
        snapshot = engine.compute([], [])
        assert snapshot.is_empty
        assert snapshot.clusters.cluster_count == 0
        assert snapshot.position(1) is None
        assert snapshot.to_dict()["nodes"] == []

    def test_only_dangling_edges(self, engine: LayoutEngine) -> None:
        """Test edges without any entities."""
        snapshot = engine.compute([], [Relationship(id=1, source_id=1, target_id=2)])
        assert snapshot.is_empty
        assert snapshot.dropped_relationships == 1

    def test_generation_increases(self, engine: LayoutEngine) -> None:
        """Test that every run gets a new generation."""
        first = engine.compute([], [])
        second = engine.compute([], [])
        third = engine.empty()
        assert first.generation < second.generation < third.generation

    def test_all_positions_finite(self, engine: LayoutEngine) -> None:
        """Test degenerate inputs do not produce NaN."""
        entities = [Entity(id=i, name=str(i)) for i in range(10)]
        snapshot = engine.compute(entities, [])
        assert np.isfinite(snapshot.spatial.positions).all()

    def test_to_dict(self, engine: LayoutEngine, sample_entities, sample_relationships) -> None:
        """Test the transport format."""
        data = engine.compute(sample_entities, sample_relationships).to_dict()
        assert {n["id"] for n in data["nodes"]} == {1, 2, 3, 4, 5}
        node = data["nodes"][0]
        assert {"x", "y", "z", "cluster", "cluster_key", "characteristics"} <= set(node)
        assert len(data["links"]) == 4
        assert data["dropped_links"] == 0


class TestEndToEnd:
    """Full pipeline scenario."""

    def test_path_in_two_clusters_stays_bounded(self, path_snapshot) -> None:
        """Test cluster count and bounded layout after 100 iterations."""
        entities, relationships = path_snapshot
        engine = LayoutEngine(seed=2024, iterations=100)
        snapshot = engine.compute(entities, relationships)

        assert len(set(snapshot.clusters.cluster_of.values())) == 2
        assert snapshot.clusters.same_cluster(1, 2)
        assert snapshot.clusters.same_cluster(4, 5)
        assert not snapshot.clusters.same_cluster(3, 4)

        radius = seed_radius(2)
        norms = np.linalg.norm(snapshot.spatial.positions, axis=1)
        assert np.isfinite(norms).all()
        assert norms.max() <= 50 * radius

    def test_centroids_follow_members(self, path_snapshot) -> None:
        """Test published centroids match the final positions."""
        entities, relationships = path_snapshot
        snapshot = LayoutEngine(seed=7).compute(entities, relationships)
        for cluster_id, members in snapshot.clusters.members.items():
            expected = np.mean([snapshot.position(m) for m in members], axis=0)
            np.testing.assert_allclose(snapshot.centroids[cluster_id], expected)

    def test_same_seed_reproducible(self, path_snapshot) -> None:
        """Test deterministic output with a fixed seed."""
        entities, relationships = path_snapshot
        a = LayoutEngine(seed=11).compute(entities, relationships)
        b = LayoutEngine(seed=11).compute(entities, relationships)
        np.testing.assert_allclose(a.spatial.positions, b.spatial.positions)
