"""
Engine configuration management for the SDC Engine
Defaults for risk estimation, generalization, noise and resource limits
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class EngineConfig(BaseSettings):
    """Disclosure-control engine configuration settings"""

    # Resource limits
    max_rows: int = Field(default=1_000_000, gt=0, description="Reject tables above this row count")
    strict_columns: bool = Field(
        default=False,
        description="Reject quasi-identifier/sensitive columns absent from every record"
    )

    # Risk estimation settings
    default_k_threshold: int = Field(default=3, ge=1, description="k used for risk recommendations")
    population_multiplier: int = Field(default=50, gt=0, description="Population = sample * multiplier")
    min_population_size: int = Field(default=100_000, ge=0, description="Floor for the assumed population")

    # Generalization settings
    generalization_bucket_width: int = Field(default=10, gt=0)
    mask_token: str = Field(default="*")

    # Differential Privacy settings
    dp_sensitivity: float = Field(default=1.0, gt=0, description="Per-column query sensitivity")
    dp_information_loss_factor: float = Field(
        default=0.1,
        ge=0,
        description="Heuristic information loss = factor / epsilon"
    )

    # Synthetic data settings
    synthetic_information_loss: float = Field(default=0.2, ge=0, le=1, description="Placeholder loss signal")
    synthetic_jitter: float = Field(default=0.1, ge=0, le=1, description="Numeric values scaled by 1 +/- jitter")

    # Environment-specific overrides
    debug_mode: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = {"env_prefix": "SDC_ENGINE_", "case_sensitive": False}


# Global configuration instance
engine_config = EngineConfig()


def get_engine_config() -> EngineConfig:
    """Get the global engine configuration instance"""
    return engine_config


def update_engine_config(**kwargs) -> EngineConfig:
    """Update engine configuration with new values"""
    global engine_config
    for key, value in kwargs.items():
        if hasattr(engine_config, key):
            setattr(engine_config, key, value)
    return engine_config
