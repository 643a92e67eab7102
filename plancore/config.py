"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    database_url: str
    app_env: str = "dev"
    log_level: str = "INFO"

    # Historical pace lookup
    hr_tolerance_bpm: int = 10
    history_sample_limit: int = 10

    # Generic recreational-runner pace (6:00/km)
    fallback_pace_sec_per_km: float = 360.0

    # Athlete history stats
    stats_sample_limit: int = 50
    stats_min_workouts: int = 3

    default_weekly_goal_km: int = 20

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
    },
}


def get_database_url() -> str:
    """Resolve database URL from the DATABASE_URL env var or a local SQLite default."""
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    return "sqlite:///plancore.db"


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        hr_tolerance_bpm=int(os.getenv("HR_TOLERANCE_BPM", "10")),
        history_sample_limit=int(os.getenv("HISTORY_SAMPLE_LIMIT", "10")),
        fallback_pace_sec_per_km=float(os.getenv("FALLBACK_PACE_SEC_PER_KM", "360")),
        stats_sample_limit=int(os.getenv("STATS_SAMPLE_LIMIT", "50")),
        stats_min_workouts=int(os.getenv("STATS_MIN_WORKOUTS", "3")),
        default_weekly_goal_km=int(os.getenv("DEFAULT_WEEKLY_GOAL_KM", "20")),
    )
