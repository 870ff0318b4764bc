"""Graph layout and clustering engine.

Provides:
- Characteristic extraction (dominant type, degree bucket, ...)
- Cluster assignment by composite characteristic key
- Spherical seeding of clusters and members
- Force relaxation with cluster cohesion
"""

from orrery.layout.characteristics import dominant_type, extract_characteristics
from orrery.layout.clustering import ClusterAssignment, assign_clusters, compute_centroids
from orrery.layout.engine import LayoutEngine, LayoutSnapshot
from orrery.layout.relaxation import ForceRelaxation
from orrery.layout.seeding import cluster_seed_points, seed_layout, seed_radius
from orrery.layout.state import SpatialState

__all__ = [
    # Characteristics
    "extract_characteristics",
    "dominant_type",
    # Clustering
    "ClusterAssignment",
    "assign_clusters",
    "compute_centroids",
    # Seeding
    "seed_layout",
    "seed_radius",
    "cluster_seed_points",
    # Relaxation
    "ForceRelaxation",
    # Orchestration
    "SpatialState",
    "LayoutEngine",
    "LayoutSnapshot",
]
