"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Impact weights default to the values the core ships with (DEFAULT_WEIGHTS)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Seed paths optional: None means the JSON files bundled in portfolio/data
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio.core.impact_score import ImpactWeights


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Seed data
    experiences_seed_path: str | None = None
    projects_seed_path: str | None = None

    # CV sync
    cv_pdf_url: str = "/cv/portfolio-cv.pdf"
    snapshot_max_records: int | None = Field(None, ge=1)

    # Impact scoring
    impact_roi_weight: float = 3.0
    impact_cost_savings_divisor: float = 100.0
    impact_metric_base: float = 20.0
    impact_improvement_weight: float = 2.0
    impact_capability_base: float = 30.0
    impact_accuracy_weight: float = 1.5
    impact_featured_bonus: float = 150.0
    impact_advanced_tech_bonus: float = 25.0

    def impact_weights(self) -> ImpactWeights:
        return ImpactWeights(
            roi_weight=self.impact_roi_weight,
            cost_savings_divisor=self.impact_cost_savings_divisor,
            metric_base=self.impact_metric_base,
            improvement_weight=self.impact_improvement_weight,
            capability_base=self.impact_capability_base,
            accuracy_weight=self.impact_accuracy_weight,
            featured_bonus=self.impact_featured_bonus,
            advanced_tech_bonus=self.impact_advanced_tech_bonus,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
