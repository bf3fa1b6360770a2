"""
DrawCast Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "DrawCast"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # ── Draw outcome cascade ─────────────────────────────────────────────
    success_disaster_ratio: float = Field(
        default=1.2, alias="SUCCESS_DISASTER_RATIO",
        description="Year cost / activity budget ratio that flags a success disaster",
    )
    days_per_hunt: int = Field(default=6, alias="DAYS_PER_HUNT")
    creep_check_points: int = Field(default=5, alias="CREEP_CHECK_POINTS")

    # ── Budget / allocator ───────────────────────────────────────────────
    near_award_years: int = Field(default=2, alias="NEAR_AWARD_YEARS")
    default_award_lookahead: int = Field(
        default=10, alias="DEFAULT_AWARD_LOOKAHEAD",
        description="Years ahead assumed for positions with no scheduled hunt",
    )

    # ── Liquidity ────────────────────────────────────────────────────────
    liquidity_critical_ratio: float = Field(
        default=0.25, alias="LIQUIDITY_CRITICAL_RATIO",
        description="Deficit / float limit ratio above which a bottleneck is critical",
    )

    # ── Group draws ──────────────────────────────────────────────────────
    group_loss_warning: float = Field(default=0.5, alias="GROUP_LOSS_WARNING")
    party_spread_warning: int = Field(default=3, alias="PARTY_SPREAD_WARNING")

    # ── Operational ──────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")


settings = Settings()
