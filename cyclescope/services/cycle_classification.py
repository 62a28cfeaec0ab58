"""
Cycle Phase Classifier Service

Determines the discrete business-cycle phase of a company from its indicator
scores. The indicators are blended into a composite score:

    composite = 0.4 * growth + 0.3 * efficiency + 0.3 * sector_specific

and the composite plus the revenue growth trend are run through an ordered
decision table. The first matching row wins:

    | # | Condition                              | Phase       | Strength | Conf |
    |---|----------------------------------------|-------------|----------|------|
    | 1 | composite >= 75 and accelerating       | expansion   | strong   | 0.90 |
    | 2 | composite >= 65 and not declining      | expansion   | moderate | 0.80 |
    | 3 | composite >= 55                        | expansion   | weak     | 0.75 |
    | 4 | composite < 35 and declining           | contraction | moderate | 0.80 |
    | 5 | composite < 45                         | transition  | weak     | 0.60 |
    | 6 | otherwise                              | stable      | moderate | 0.70 |

The table is kept as an explicit list of rows so each threshold can be audited
and tested at its exact boundary.

Duration in phase is an approximation (min(periods, 3)), not a run-length
count of consecutive periods in the same phase.
"""

import logging
from typing import Callable, List, NamedTuple, Sequence, Tuple

import numpy as np

from cyclescope.models.enums import CompanyType, CyclePhase, PhaseStrength, TrendDirection
from cyclescope.models.schemas import (
    CycleClassification,
    CycleConfidence,
    CycleIndicators,
    HistoricalDataPoint,
)
from cyclescope.services.cycle_indicators import analyze_cycle_indicators, growth_rates_of


logger = logging.getLogger(__name__)


# =============================================================================
# Composite Weights
# =============================================================================

GROWTH_WEIGHT: float = 0.4
EFFICIENCY_WEIGHT: float = 0.3
SECTOR_WEIGHT: float = 0.3

MAX_DURATION_IN_PHASE: int = 3


class PhaseRule(NamedTuple):
    """One row of the phase decision table."""
    matches: Callable[[float, TrendDirection], bool]
    phase: CyclePhase
    strength: PhaseStrength
    confidence: float


# Ordered; first match wins
PHASE_DECISION_TABLE: List[PhaseRule] = [
    PhaseRule(
        lambda composite, trend: composite >= 75 and trend == TrendDirection.ACCELERATING,
        CyclePhase.EXPANSION, PhaseStrength.STRONG, 0.90,
    ),
    PhaseRule(
        lambda composite, trend: composite >= 65 and trend != TrendDirection.DECLINING,
        CyclePhase.EXPANSION, PhaseStrength.MODERATE, 0.80,
    ),
    PhaseRule(
        lambda composite, trend: composite >= 55,
        CyclePhase.EXPANSION, PhaseStrength.WEAK, 0.75,
    ),
    PhaseRule(
        lambda composite, trend: composite < 35 and trend == TrendDirection.DECLINING,
        CyclePhase.CONTRACTION, PhaseStrength.MODERATE, 0.80,
    ),
    PhaseRule(
        lambda composite, trend: composite < 45,
        CyclePhase.TRANSITION, PhaseStrength.WEAK, 0.60,
    ),
    PhaseRule(
        lambda composite, trend: True,
        CyclePhase.STABLE, PhaseStrength.MODERATE, 0.70,
    ),
]


def calculate_composite_score(indicators: CycleIndicators) -> float:
    """
    Weighted composite of growth, efficiency and sector-specific scores.

    Args:
        indicators: Indicator scores

    Returns:
        Composite score in [0, 100]
    """
    return (
        indicators.growthScore * GROWTH_WEIGHT
        + indicators.efficiencyScore * EFFICIENCY_WEIGHT
        + indicators.sectorSpecificScore * SECTOR_WEIGHT
    )


def phase_from_composite(
    composite: float,
    trend: TrendDirection
) -> Tuple[CyclePhase, PhaseStrength, float]:
    """
    Run the phase decision table.

    Args:
        composite: Composite score
        trend: Revenue growth trend

    Returns:
        Tuple of (phase, strength, confidence) from the first matching row
    """
    trend = TrendDirection(trend)
    for rule in PHASE_DECISION_TABLE:
        if rule.matches(composite, trend):
            return rule.phase, rule.strength, rule.confidence
    # The last row always matches
    raise AssertionError("phase decision table has no fallback row")


def calculate_sustainability_score(indicators: CycleIndicators) -> float:
    """
    Sustainability: base 0.6, bonuses for stable margins and strong scores.

    Args:
        indicators: Indicator scores

    Returns:
        Score capped at 1.0
    """
    score = 0.6
    if indicators.marginStability > 0.8:
        score += 0.2
    if indicators.growthScore > 70:
        score += 0.1
    if indicators.efficiencyScore > 70:
        score += 0.1
    return min(1.0, score)


def classify_indicators(indicators: CycleIndicators, periods: int) -> CycleClassification:
    """
    Classify already computed indicators.

    Args:
        indicators: Indicator scores
        periods: Number of periods the indicators were computed from

    Returns:
        CycleClassification
    """
    composite = calculate_composite_score(indicators)
    phase, strength, confidence = phase_from_composite(composite, indicators.revenueGrowthTrend)

    return CycleClassification(
        currentPhase=phase,
        phaseStrength=strength,
        confidence=confidence,
        durationInPhase=min(periods, MAX_DURATION_IN_PHASE),
        sustainabilityScore=calculate_sustainability_score(indicators),
        compositeScore=composite,
    )


def classify_cycle_phase(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType
) -> CycleClassification:
    """
    Classify the current cycle phase of a history.

    Args:
        data: Historical periods, most recent first
        company_type: finance or non_finance

    Returns:
        CycleClassification with phase, strength, confidence, duration and
        sustainability
    """
    indicators = analyze_cycle_indicators(data, company_type)
    classification = classify_indicators(indicators, len(data))

    logger.debug(
        f"Composite {classification.compositeScore:.2f} -> "
        f"{classification.currentPhase.value}/{classification.phaseStrength.value}"
    )
    return classification


def calculate_cycle_confidence(
    data: Sequence[HistoricalDataPoint],
    detected_phase: CyclePhase
) -> CycleConfidence:
    """
    Confidence breakdown for a detection.

    - Data quality: base 0.6, +0.1 for >= 5 periods, +0.1 for >= 8 periods,
      +0.2 when every period has positive revenue
    - Pattern consistency: 1 - 10 * variance(revenue growth), floored at 0
    - Sector alignment: fixed 0.8
    - Overall: 0.4 * quality + 0.4 * consistency + 0.2 * alignment

    Args:
        data: Historical periods, most recent first
        detected_phase: Phase the breakdown refers to

    Returns:
        CycleConfidence with every component in [0, 1]
    """
    data_quality = 0.6
    if len(data) >= 5:
        data_quality += 0.1
    if len(data) >= 8:
        data_quality += 0.1
    if data and all(point.revenue > 0 for point in data):
        data_quality += 0.2
    data_quality = min(1.0, data_quality)

    if data:
        growth_rates = np.asarray(growth_rates_of(data), dtype=np.float64)
        variance = float(np.var(growth_rates))
        consistency = max(0.0, min(1.0, 1.0 - variance * 10))
    else:
        consistency = 0.0

    sector_alignment = 0.8
    overall = data_quality * 0.4 + consistency * 0.4 + sector_alignment * 0.2

    logger.debug(f"Confidence for {CyclePhase(detected_phase).value}: overall={overall:.3f}")

    return CycleConfidence(
        overallConfidence=min(1.0, overall),
        dataQuality=data_quality,
        patternConsistency=consistency,
        sectorAlignment=sector_alignment,
    )


__all__ = [
    "classify_cycle_phase",
    "classify_indicators",
    "calculate_composite_score",
    "phase_from_composite",
    "calculate_sustainability_score",
    "calculate_cycle_confidence",
    "PHASE_DECISION_TABLE",
    "PhaseRule",
]
