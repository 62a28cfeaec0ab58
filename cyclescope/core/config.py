"""
Settings and environment management module for the Cycle Scope service.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access

Environment Variables:
- APP_NAME: Display name used by the API root endpoint
- LOG_LEVEL: Root logging level (default: INFO)
- CORS_ORIGINS: Allowed browser origins for the dashboard frontend
- DEFAULT_STRICT_TOLERANCE / DEFAULT_NORMAL_TOLERANCE / DEFAULT_LOOSE_TOLERANCE:
  Tolerance tiers used when a validation request does not carry its own
- ACCURACY_TARGET: Accuracy below which a validation report recommends fixes
- MIN_COMPANIES_FOR_COVERAGE: Companies needed before coverage is considered sufficient
- DEFAULT_PERFORMANCE_SCORE: Performance score used when no benchmark run is supplied
- TRANSITION_WINDOW: Periods per rolling window for phase-transition tracking
- RATIO_PERIOD_DAYS: Days per statement period when converting to daily sales
- BENCHMARK_BATCH_SIZE: Detections per batch in the performance benchmark

The phase decision table and indicator thresholds are deliberately absent:
they are fixed rules, not deployment settings.

Usage:
    from cyclescope.core.config import get_settings

    settings = get_settings()
    window = settings.transition_window
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Name reported by the API root endpoint.
        log_level: Logging level name for logging.basicConfig.
        cors_origins: Origins allowed by the CORS middleware.
        default_strict_tolerance: Strict tolerance tier (relative deviation).
        default_normal_tolerance: Normal tolerance tier (relative deviation).
        default_loose_tolerance: Loose tolerance tier (relative deviation).
        accuracy_target: Minimum overall accuracy for a clean validation report.
        min_companies_for_coverage: Companies required for sufficient coverage.
        default_performance_score: Performance score (0-100) assumed without benchmarks.
        transition_window: Rolling window size for phase-transition tracking.
        ratio_period_days: Days per statement period for the day-count ratios.
        benchmark_batch_size: Number of detections timed in the batch benchmark.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    app_name: str = 'Cycle Scope API'
    log_level: str = 'INFO'

    # Next.js dashboard dev servers
    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]

    # =========================================================================
    # Validation defaults
    # =========================================================================

    # 0.1% / 1% / 5% relative deviation
    default_strict_tolerance: float = 0.001
    default_normal_tolerance: float = 0.01
    default_loose_tolerance: float = 0.05

    # Reports recommend accuracy work below this overall accuracy
    accuracy_target: float = 0.99

    # Reports recommend broader coverage below this many validated companies
    min_companies_for_coverage: int = 2

    # Performance share of the report score when no benchmark result is given
    default_performance_score: float = 85.0

    # =========================================================================
    # Cycle detection
    # =========================================================================

    # Periods per rolling window when tracking phase transitions.
    # Four periods give each window a recent part (3) and an older part (1)
    # to compare; shorter windows always read as a stable trend.
    transition_window: int = 4

    benchmark_batch_size: int = 100

    # =========================================================================
    # Ratio calculation
    # =========================================================================

    # Annual statements; use 90 for quarterly feeds
    ratio_period_days: int = 365


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
