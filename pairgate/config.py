"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - interest_limit is one value for every tier; tiers only select TTL windows
    - Founding tokens come from the environment in production; the defaults are
      the prototype pool

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - TTLs configured in hours, converted to timedelta in free_limits() / premium_limits()
    - FOUNDING_TOKENS is a JSON list, like CORS_ORIGINS
"""

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from pairgate.core.tier_limits import TierLimits


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Volume limit (shared by every tier)
    interest_limit: int = 5

    # Dual-confirmation windows
    free_message_ttl_hours: float = 72
    free_rsvp_ttl_hours: float = 48
    premium_message_ttl_hours: float = 168
    premium_rsvp_ttl_hours: float = 96

    # Expiration sweeper
    sweep_interval_seconds: float = 5.0

    # Founding access
    founding_cap: int = 30
    founding_tokens: list[str] = ["fc_a1b2c3", "fc_d4e5f6", "fc_g7h8i9"]
    founding_enforce_tenure: bool = False
    founding_tenure_days: int = 30
    founding_notice_seconds: float = 8.0

    # Lounges
    lounge_response_visibility_days: int = 7

    # Places: IANA zone that presence slot boundaries (18:00, 03:00) are read in
    local_timezone: str = "UTC"

    # Geography: JSON file with {"places": ..., "adjacency": ...}; None = built-in graph
    region_graph_path: str | None = None

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "text"

    def free_limits(self) -> TierLimits:
        return TierLimits(
            interest_limit=self.interest_limit,
            message_ttl=timedelta(hours=self.free_message_ttl_hours),
            rsvp_ttl=timedelta(hours=self.free_rsvp_ttl_hours),
        )

    def premium_limits(self) -> TierLimits:
        return TierLimits(
            interest_limit=self.interest_limit,
            message_ttl=timedelta(hours=self.premium_message_ttl_hours),
            rsvp_ttl=timedelta(hours=self.premium_rsvp_ttl_hours),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
