"""
Calculation Accuracy Validation Service

Compares a map of computed ratios against expected benchmark ratios under
tiered tolerances.

Per-metric rules:
- A missing (absent, None or non-finite) actual value is a critical `missing_metric`
  error and is excluded from deviation accounting
- Deviation is relative (|actual - expected| / |expected|), or absolute when
  the expected value is zero
- ROE, net profit margin and operating profit margin are judged against the
  strict tolerance (failure severity high); everything else against the
  normal tolerance (severity medium)
- Near-exact matches (deviation <= 1%) are never judged against a tolerance
  tighter than 1%
- Impossible values are flagged regardless of tolerance: margins below -50%,
  ROE outside [-50%, 100%], any ratio outside [-1, 10], or a deviation above
  50%. A failure on such a metric is escalated to critical severity.

The entry point is async so it can be awaited uniformly alongside the other
validation entry points; it performs no I/O.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional

from cyclescope.models.enums import Severity, ValidationErrorType
from cyclescope.models.schemas import (
    AccuracyResult,
    DetailedError,
    Tolerances,
    ValidationError,
    ValidationFailure,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Metric Categories
# =============================================================================

STRICT_METRICS = frozenset({"roe", "netProfitMargin", "operatingProfitMargin"})

SECTOR_METRICS = frozenset({"operatingProfitMargin", "currentRatio", "workingCapitalDays"})
FINANCIAL_SERVICES_METRICS = frozenset({"netInterestMargin", "costToIncomeRatio", "loanGrowthRate"})

# Deviation at or below which the effective tolerance is at least this value
NEAR_EXACT_DEVIATION: float = 0.01

# Sanity bounds for impossible values
MIN_MARGIN: float = -0.5
ROE_BOUNDS = (-0.5, 1.0)
RATIO_BOUNDS = (-1.0, 10.0)
MAX_PLAUSIBLE_DEVIATION: float = 0.5


def calculate_deviation(actual: float, expected: float) -> float:
    """
    Relative deviation, or absolute deviation when expected is zero.

    Args:
        actual: Computed value
        expected: Benchmark value

    Returns:
        Non-negative deviation
    """
    if abs(expected) > 0:
        return abs(actual - expected) / abs(expected)
    return abs(actual - expected)


def select_tolerance(metric: str, deviation: float, tolerances: Tolerances) -> float:
    """
    Effective tolerance for a metric.

    Args:
        metric: Metric name
        deviation: Raw deviation of the metric
        tolerances: Tolerance tiers

    Returns:
        Strict tolerance for strict-tier metrics, normal otherwise, widened to
        at least 1% for near-exact matches
    """
    tolerance = tolerances.strict if metric in STRICT_METRICS else tolerances.normal
    if deviation <= NEAR_EXACT_DEVIATION:
        tolerance = max(tolerance, NEAR_EXACT_DEVIATION)
    return tolerance


def is_impossible_value(metric: str, actual: float, deviation: float) -> bool:
    """
    Whether an actual value is implausible regardless of tolerance.

    Args:
        metric: Metric name
        actual: Computed value
        deviation: Deviation from the expected value

    Returns:
        True for a margin below -50%, ROE outside [-50%, 100%], any ratio
        outside [-1, 10], or a deviation above 50%
    """
    negative_margin = "margin" in metric.lower() and actual < MIN_MARGIN
    extreme_roe = metric == "roe" and not (ROE_BOUNDS[0] <= actual <= ROE_BOUNDS[1])
    impossible_ratio = not (RATIO_BOUNDS[0] <= actual <= RATIO_BOUNDS[1])
    unrealistic = deviation > MAX_PLAUSIBLE_DEVIATION
    return negative_margin or extreme_roe or impossible_ratio or unrealistic


def generate_recommendation(metric: str, expected: float, actual: float, deviation: float) -> str:
    """
    Remediation hint for a failed validation, tiered by deviation.

    Args:
        metric: Metric name
        expected: Benchmark value
        actual: Computed value
        deviation: Deviation

    Returns:
        Human-readable recommendation
    """
    if deviation > 0.5:
        return f"Critical deviation in {metric}. Review calculation logic immediately."
    elif deviation > 0.1:
        return f"Significant deviation in {metric}. Check input data and calculation parameters."
    elif deviation > 0.05:
        return f"Moderate deviation in {metric}. Verify data source accuracy."
    else:
        return f"Minor deviation in {metric}. Within acceptable range but monitor closely."


def _category_accuracy(passes: int, expected_ratios: Mapping[str, float], members: Optional[frozenset]) -> Optional[float]:
    """Share of a category's expected metrics that passed; None without passes."""
    if passes == 0:
        return None
    if members is None:
        excluded = SECTOR_METRICS | FINANCIAL_SERVICES_METRICS
        count = sum(1 for metric in expected_ratios if metric not in excluded)
    else:
        count = sum(1 for metric in expected_ratios if metric in members)
    return min(1.0, passes / max(1, count))


async def validate_calculation_accuracy(
    actual_ratios: Mapping[str, Optional[float]],
    expected_ratios: Mapping[str, float],
    tolerances: Tolerances
) -> AccuracyResult:
    """
    Validate computed ratios against expected ratios.

    Args:
        actual_ratios: Computed ratios by metric name; None, NaN and infinity
            mean missing
        expected_ratios: Benchmark ratios by metric name
        tolerances: Tolerance tiers

    Returns:
        AccuracyResult with overall accuracy, failures, critical errors,
        detailed errors and deviation statistics
    """
    failed_validations: List[ValidationFailure] = []
    critical_errors: List[ValidationError] = []
    detailed_errors: List[DetailedError] = []

    total_deviation = 0.0
    validated_count = 0
    strict_passed = 0
    category_passes: Dict[str, int] = {"sector": 0, "financial": 0, "operational": 0}

    for metric, expected in expected_ratios.items():
        actual = actual_ratios.get(metric)

        if actual is None or not math.isfinite(actual):
            critical_errors.append(ValidationError(
                type=ValidationErrorType.MISSING_METRIC,
                message=f"Missing metric: {metric}",
                severity=Severity.CRITICAL,
                affectedMetrics=[metric],
            ))
            continue

        deviation = calculate_deviation(actual, expected)
        total_deviation += deviation
        validated_count += 1

        tolerance = select_tolerance(metric, deviation, tolerances)
        severity = Severity.HIGH if metric in STRICT_METRICS else Severity.MEDIUM

        if is_impossible_value(metric, actual, deviation):
            severity = Severity.CRITICAL
            critical_errors.append(ValidationError(
                type=ValidationErrorType.IMPOSSIBLE_RATIO_VALUE,
                message=f"Impossible ratio value for {metric}: {actual} (expected: {expected})",
                severity=Severity.CRITICAL,
                affectedMetrics=[metric],
            ))

        # Strict pass rate ignores the tolerance actually applied
        if deviation <= tolerances.strict:
            strict_passed += 1

        passed = deviation <= tolerance
        if passed:
            if metric in SECTOR_METRICS:
                category_passes["sector"] += 1
            elif metric in FINANCIAL_SERVICES_METRICS:
                category_passes["financial"] += 1
            else:
                category_passes["operational"] += 1
        else:
            failed_validations.append(ValidationFailure(
                metric=metric,
                expected=expected,
                actual=actual,
                deviation=deviation,
                tolerance=tolerance,
                severity=severity,
            ))
            detailed_errors.append(DetailedError(
                metric=metric,
                expected=expected,
                actual=actual,
                deviation=deviation,
                severity=severity,
                recommendation=generate_recommendation(metric, expected, actual, deviation),
            ))

        logger.debug(f"{metric}: expected={expected} actual={actual} deviation={deviation:.4f} tolerance={tolerance}")

    if validated_count > 0:
        overall_accuracy = (validated_count - len(failed_validations)) / validated_count
        average_deviation = total_deviation / validated_count
        strict_rate = strict_passed / validated_count
    else:
        overall_accuracy = 0.0
        average_deviation = 1.0
        strict_rate = 0.0

    if critical_errors:
        logger.warning(f"Accuracy validation found {len(critical_errors)} critical error(s)")

    return AccuracyResult(
        overallAccuracy=overall_accuracy,
        failedValidations=failed_validations,
        strictTolerancePassed=strict_rate,
        averageDeviation=average_deviation,
        validatedCount=validated_count,
        sectorSpecificAccuracy=_category_accuracy(category_passes["sector"], expected_ratios, SECTOR_METRICS),
        operationalRatiosAccuracy=_category_accuracy(category_passes["operational"], expected_ratios, None),
        financialServicesAccuracy=_category_accuracy(
            category_passes["financial"], expected_ratios, FINANCIAL_SERVICES_METRICS
        ),
        criticalErrors=critical_errors,
        detailedErrors=detailed_errors,
    )


__all__ = [
    "validate_calculation_accuracy",
    "calculate_deviation",
    "select_tolerance",
    "is_impossible_value",
    "generate_recommendation",
    "STRICT_METRICS",
]
