"""
EventSentinel Configuration
===========================

This module handles configuration loading for the venue simulation engine.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SENTINEL_AGENT_COUNT     -> simulation.agent_count
    SENTINEL_TICK_INTERVAL   -> simulation.tick_interval_seconds
    SENTINEL_SEED            -> simulation.random_seed
    SENTINEL_LAYOUT_PATH     -> venue.layout_path
    SENTINEL_EVICTION_POLICY -> predictions.eviction_policy
    SENTINEL_PORT            -> server.port
    SENTINEL_LOG_LEVEL       -> logging.level
    PORT                     -> server.port (Cloud Run)

Example:
    from event_sentinel.config import settings

    print(settings.simulation.agent_count)
    print(settings.predictions.cooldown_seconds)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AgentConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="event-sentinel", description="Service name")
    version: str = Field(default="v0.1.0", description="Protocol version")


class SimulationConfig(BaseModel):
    """Population and tick timing configuration."""

    agent_count: int = Field(
        default=150,
        ge=1,
        description="Number of agents seeded at startup",
    )
    tick_interval_seconds: float = Field(
        default=0.8,
        gt=0,
        description="Wall-clock (and simulated) seconds per tick",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the random source (None = nondeterministic)",
    )
    step_size: float = Field(
        default=8.0,
        gt=0,
        description="Distance an agent walks per tick (plane units)",
    )
    log_every_n_ticks: int = Field(
        default=50,
        ge=1,
        description="Emit a tick summary log line every N ticks",
    )


class MotionConfig(BaseModel):
    """Probabilities driving the per-agent motion state machine."""

    idle_onset_probability: float = Field(default=0.03, ge=0, le=1.0)
    idle_ticks_min: int = Field(default=3, ge=1)
    idle_ticks_max: int = Field(default=10, ge=1)
    halftime_concourse_bias: float = Field(
        default=0.5,
        ge=0,
        le=1.0,
        description="Chance an arriving agent heads to the concourse at halftime",
    )
    purchase_probability: float = Field(default=0.04, ge=0, le=1.0)
    halftime_purchase_probability: float = Field(default=0.12, ge=0, le=1.0)
    alcohol_probability: float = Field(default=0.4, ge=0, le=1.0)
    heavy_alcohol_probability: float = Field(default=0.7, ge=0, le=1.0)
    alcohol_cap: int = Field(
        default=8,
        ge=0,
        description="Maximum alcohol purchases per session",
    )
    relapse_probability: float = Field(default=0.005, ge=0, le=1.0)
    rushing_bias: float = Field(
        default=0.3,
        ge=0,
        le=1.0,
        description="Chance a behavior relapse lands on 'rushing' instead of 'normal'",
    )

    @model_validator(mode="after")
    def validate_idle_range(self) -> "MotionConfig":
        """Idle duration is drawn from [idle_ticks_min, idle_ticks_max]."""
        if self.idle_ticks_min > self.idle_ticks_max:
            raise ValueError("idle_ticks_min must be <= idle_ticks_max")
        return self


class TierThresholds(BaseModel):
    """Score boundaries for risk tiers (inclusive lower bounds)."""

    medium: int = Field(default=25, ge=0, le=100)
    high: int = Field(default=45, ge=0, le=100)
    critical: int = Field(default=70, ge=0, le=100)


class ScoringConfig(BaseModel):
    """Risk scorer configuration."""

    tiers: TierThresholds = Field(default_factory=TierThresholds)
    high_risk_listing_score: int = Field(
        default=45,
        ge=0,
        le=100,
        description="Score from which an agent appears in the high-risk listing",
    )


class PredictionConfig(BaseModel):
    """Prediction generator and live queue configuration."""

    score_gate: int = Field(default=40, ge=0, le=100)
    sampling_probability: float = Field(default=0.04, ge=0, le=1.0)
    escalated_score: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Score from which high-risk patterns are chosen",
    )
    cooldown_seconds: float = Field(default=10.0, ge=0)
    max_live: int = Field(default=5, ge=1)
    eviction_policy: str = Field(
        default="insertion",
        description="Queue overflow policy: 'insertion' or 'priority'",
    )

    @field_validator("eviction_policy")
    @classmethod
    def validate_policy(cls, v: str) -> str:
        """Only the two documented eviction policies are accepted."""
        if v not in ("insertion", "priority"):
            raise ValueError("eviction_policy must be 'insertion' or 'priority'")
        return v


class VenueConfig(BaseModel):
    """Venue layout configuration."""

    layout_path: Optional[str] = Field(
        default=None,
        description="Path to venue layout JSON (None = bundled stadium layout)",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class ObservabilityConfig(BaseModel):
    """Operator feed and analytics configuration."""

    log_capacity: int = Field(
        default=40,
        ge=1,
        description="Number of operator log entries retained",
    )
    heatmap_resolution: int = Field(
        default=16,
        ge=4,
        le=128,
        description="Resolution of the risk heatmap (NxN grid)",
    )
    proximity_radius: float = Field(
        default=40.0,
        gt=0,
        description="Distance under which two agents are linked as a group",
    )


class Settings(BaseModel):
    """
    Main settings class for EventSentinel.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    agent: AgentConfig = Field(default_factory=AgentConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    motion: MotionConfig = Field(default_factory=MotionConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    predictions: PredictionConfig = Field(default_factory=PredictionConfig)
    venue: VenueConfig = Field(default_factory=VenueConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Simulation settings
    if env_count := os.environ.get("SENTINEL_AGENT_COUNT"):
        config_data.setdefault("simulation", {})["agent_count"] = int(env_count)
    if env_interval := os.environ.get("SENTINEL_TICK_INTERVAL"):
        config_data.setdefault("simulation", {})["tick_interval_seconds"] = float(env_interval)
    if env_seed := os.environ.get("SENTINEL_SEED"):
        config_data.setdefault("simulation", {})["random_seed"] = int(env_seed)

    # Venue settings
    if env_layout := os.environ.get("SENTINEL_LAYOUT_PATH"):
        config_data.setdefault("venue", {})["layout_path"] = env_layout

    # Prediction settings
    if env_policy := os.environ.get("SENTINEL_EVICTION_POLICY"):
        config_data.setdefault("predictions", {})["eviction_policy"] = env_policy

    # Server settings (Cloud Run uses PORT env var)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("SENTINEL_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("SENTINEL_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
