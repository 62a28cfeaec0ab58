"""
Enumeration definitions for the Cycle Scope service.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models, so API responses carry the plain string
values the dashboard charts map onto their phase color bands.
"""

from enum import Enum


class CompanyType(str, Enum):
    """
    Company type driving the finance/non-finance branches of the analyzer.

    - finance: Banks and NBFCs (NIM-based, higher typical growth)
    - non_finance: Manufacturing, FMCG, services
    """
    FINANCE = "finance"
    NON_FINANCE = "non_finance"


class CyclePhase(str, Enum):
    """
    Business-cycle phase of a company.

    The dashboard renders each phase as one color band.
    """
    EXPANSION = "expansion"
    CONTRACTION = "contraction"
    TRANSITION = "transition"
    STABLE = "stable"


class PhaseStrength(str, Enum):
    """Strength of the detected phase."""
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class TrendDirection(str, Enum):
    """
    Direction of a recent-vs-older comparison.

    - accelerating: Recent window above the older window beyond the band
    - stable: Within the hysteresis band
    - declining: Recent window below the older window beyond the band
    """
    ACCELERATING = "accelerating"
    STABLE = "stable"
    DECLINING = "declining"


class OverallTrend(str, Enum):
    """Long-run revenue direction."""
    UPWARD = "upward"
    DOWNWARD = "downward"
    STABLE = "stable"


class RiskLevel(str, Enum):
    """Risk level derived from volatility and overall trend."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(str, Enum):
    """Severity attached to validation failures and errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ValidationErrorType(str, Enum):
    """
    Structural validation problems.

    - missing_metric: An expected metric has no actual value
    - impossible_ratio_value: The actual value is outside any plausible range
    """
    MISSING_METRIC = "missing_metric"
    IMPOSSIBLE_RATIO_VALUE = "impossible_ratio_value"
