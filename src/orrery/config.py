"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment presets."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORRERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Characteristics
    degree_medium_threshold: int = Field(
        default=3,
        description="Degree at which an entity leaves the 'low' bucket"
    )
    degree_high_threshold: int = Field(
        default=7,
        description="Degree at which an entity enters the 'high' bucket"
    )
    default_strength: float = 0.5  # Used when a relationship has no strength

    # Spatial seeding
    seed_min_radius: float = 20.0
    seed_radius_per_cluster: float = 8.0  # Multiplied by cbrt(cluster count)
    seed_golden_ratio: float = 0.618
    seed_spread: float = Field(
        default=5.0,
        description="Radius of the scatter sphere around a cluster seed point"
    )
    layout_seed: int | None = Field(
        default=None,
        description="Random seed for member jitter (None = non-deterministic)"
    )

    # Force relaxation
    relax_iterations: int = 100
    repulsion: float = 80.0
    same_cluster_repulsion_factor: float = 0.5
    edge_attraction: float = 0.01
    cluster_attraction: float = 0.05
    damping: float = 0.9
    min_distance: float = 0.1

    # Camera
    camera_fov: float = 75.0
    camera_near: float = 0.1
    camera_far: float = 10000.0
    frame_padding: float = 1.5  # distance = max extent * padding
    focus_min_distance: float = 30.0
    focus_distance_factor: float = 0.6
    focus_duration_ms: float = 1000.0

    # Interaction
    hover_scale: float = 1.5
    hover_emissive: float = 0.5
    highlight_scale: float = 2.0
    highlight_emissive: float = 0.8
    selected_color: tuple[float, float, float] = (1.0, 0.667, 0.0)
    reveal_highlight_ms: float = Field(
        default=3000.0,
        description="How long reveal_entity keeps its highlight on"
    )

    # Keyboard navigation
    pan_speed: float = 2.0
    zoom_in_factor: float = 0.95
    zoom_out_factor: float = 1.05

    # Frame loop
    frame_rate: float = 60.0

    # External data source (temporal store)
    source_base_url: str = "http://localhost:3000/api"
    source_timeout: float = 10.0
    source_max_retries: int = 2

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        layout_seed=42,
        api_debug=True,
    )


def get_prod_settings() -> Settings:
    """Get production environment settings."""
    return Settings(
        source_max_retries=4,
        source_timeout=30.0,
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        layout_seed=1234,
        source_base_url="http://testserver/api",
        source_max_retries=0,
    )


# Global settings instance
settings = Settings()
