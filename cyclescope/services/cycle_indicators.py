"""
Cycle Indicator Analyzer Service

Converts a short, most-recent-first history of per-period financial figures
into normalized indicator scores:

- Growth: average revenue growth tiers plus the recent-vs-older growth trend
- Efficiency: operating margin stability and margin trend
- Liquidity: current ratio adjustment for non-finance companies
- Sector fit: bank-typical growth for finance companies, steady growth with
  stable margins for everyone else

Every branch has a floor or a default, so the analyzer always returns a
complete, clamped CycleIndicators record. Histories shorter than two periods
get fixed neutral defaults.

Trend windows:
    The series is split into a "recent" window (first min(3, n) periods) and
    an "older" remainder. When there is no remainder the older mean equals the
    recent mean, which yields a stable trend.

Dependencies:
    - numpy: mean and population variance over the small series
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from cyclescope.models.enums import CompanyType, TrendDirection
from cyclescope.models.schemas import CycleIndicators, HistoricalDataPoint


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

RECENT_WINDOW: int = 3

# Hysteresis bands for the recent-vs-older comparison
GROWTH_TREND_BAND: float = 0.002     # fraction of revenue growth
MARGIN_TREND_BAND: float = 0.5       # operating margin percentage points
NIM_TREND_BAND: float = 0.05         # NIM percentage points
WORKING_CAPITAL_BAND: float = 2.0    # cash conversion cycle days

BASE_LIQUIDITY_SCORE: float = 70.0
BASE_SECTOR_SCORE: float = 70.0


def default_indicators() -> CycleIndicators:
    """
    Neutral indicators for histories with fewer than two periods.

    Returns:
        CycleIndicators with growth 30, efficiency 50, liquidity 50, sector 50,
        margin stability 0.5 and every trend stable.
    """
    return CycleIndicators(
        growthScore=30.0,
        revenueGrowthTrend=TrendDirection.STABLE,
        profitGrowthTrend=TrendDirection.STABLE,
        efficiencyScore=50.0,
        marginStability=0.5,
        marginTrend=TrendDirection.STABLE,
        liquidityScore=50.0,
        sectorSpecificScore=50.0,
    )


# =============================================================================
# Statistical Helpers
# =============================================================================


def _clamp(score: float, low: float = 0.0, high: float = 100.0) -> float:
    return float(min(high, max(low, score)))


def _mean(values: Sequence[float]) -> float:
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def split_windows(values: Sequence[float]) -> Tuple[List[float], List[float]]:
    """
    Split a most-recent-first series into recent and older windows.

    Args:
        values: Series ordered most recent first

    Returns:
        Tuple of (recent, older) where recent holds the first min(3, n) values
    """
    cut = min(RECENT_WINDOW, len(values))
    return list(values[:cut]), list(values[cut:])


def compare_windows(values: Sequence[float], band: float) -> TrendDirection:
    """
    Classify a series as accelerating, stable or declining.

    The recent window mean is compared with the older window mean; a
    difference inside +/- band is stable.

    Args:
        values: Series ordered most recent first (at least one value)
        band: Hysteresis band in the units of the series

    Returns:
        TrendDirection
    """
    recent, older = split_windows(values)
    recent_avg = _mean(recent)
    older_avg = _mean(older) if older else recent_avg

    if recent_avg > older_avg + band:
        return TrendDirection.ACCELERATING
    if recent_avg < older_avg - band:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def calculate_margin_stability(margins: Sequence[float]) -> float:
    """
    Margin stability as 1 - variance / mean^2, floored at 0.

    Uses the population variance. A zero mean is perfectly stable only when
    the variance is zero as well.

    Args:
        margins: Operating margins in percentage points

    Returns:
        Stability in [0, 1]; 1 means perfectly stable
    """
    values = np.asarray(margins, dtype=np.float64)
    mean_val = float(np.mean(values))
    variance = float(np.var(values))  # Population variance (ddof=0)

    if mean_val == 0.0:
        return 1.0 if variance == 0.0 else 0.0

    return _clamp(1.0 - variance / (mean_val * mean_val), 0.0, 1.0)


def growth_rates_of(data: Sequence[HistoricalDataPoint]) -> List[float]:
    """Revenue growth per period, with missing or non-finite values read as 0."""
    return [
        point.revenue_growth if point.revenue_growth is not None and math.isfinite(point.revenue_growth) else 0.0
        for point in data
    ]


def _optional_series(data: Sequence[HistoricalDataPoint], field: str) -> Optional[List[float]]:
    """Return the field across all points, or None if any point lacks it."""
    values = [getattr(point, field) for point in data]
    if any(value is None for value in values):
        return None
    return [float(value) for value in values]


# =============================================================================
# Component Scores
# =============================================================================


def calculate_growth_score(avg_growth: float, trend: TrendDirection) -> float:
    """
    Growth score: base 50, tiers for average growth, +/-10 for the trend.

    Args:
        avg_growth: Mean revenue growth (fraction)
        trend: Revenue growth trend

    Returns:
        Score clamped to [0, 100]
    """
    score = 50.0
    if avg_growth > 0.08:
        score += 30
    elif avg_growth > 0.05:
        score += 20
    elif avg_growth > 0.02:
        score += 10

    if trend == TrendDirection.ACCELERATING:
        score += 10
    elif trend == TrendDirection.DECLINING:
        score -= 10

    return _clamp(score)


def calculate_efficiency_score(margin_stability: float, margin_trend: TrendDirection) -> float:
    """
    Efficiency score: base 60, stability tiers, margin trend adjustment.

    Args:
        margin_stability: Stability in [0, 1]
        margin_trend: Operating margin trend

    Returns:
        Score clamped to [0, 100]
    """
    score = 60.0
    if margin_stability > 0.8:
        score += 20
    elif margin_stability > 0.6:
        score += 10

    if margin_trend == TrendDirection.ACCELERATING:
        score += 10
    elif margin_trend == TrendDirection.DECLINING:
        score -= 15

    return _clamp(score)


def calculate_liquidity_score(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType
) -> float:
    """
    Liquidity score: 70 unless a non-finance history carries current ratios.

    Banks do not report a meaningful current ratio, so finance companies keep
    the baseline.

    Args:
        data: History, most recent first
        company_type: Company type

    Returns:
        Score clamped to [0, 100]
    """
    score = BASE_LIQUIDITY_SCORE
    if company_type == CompanyType.NON_FINANCE:
        current_ratios = _optional_series(data, "current_ratio")
        if current_ratios:
            avg_ratio = _mean(current_ratios)
            if avg_ratio >= 1.5:
                score += 10
            elif avg_ratio < 1.0:
                score -= 20
    return _clamp(score)


def calculate_sector_score(
    company_type: CompanyType,
    avg_growth: float,
    margin_stability: float
) -> float:
    """
    Sector-specific score: base 70 with sector bonus tiers.

    Finance companies are judged against bank-typical (higher) growth;
    non-finance companies earn a bonus only for growth above 6% together
    with margin stability above 0.7.

    Args:
        company_type: Company type
        avg_growth: Mean revenue growth (fraction)
        margin_stability: Stability in [0, 1]

    Returns:
        Score clamped to [0, 100]
    """
    score = BASE_SECTOR_SCORE
    if company_type == CompanyType.FINANCE:
        if avg_growth > 0.12:
            score += 15
        elif avg_growth > 0.08:
            score += 10
    elif company_type == CompanyType.NON_FINANCE:
        if avg_growth > 0.06 and margin_stability > 0.7:
            score += 15
    return _clamp(score)


# =============================================================================
# Main Entry Point
# =============================================================================


def analyze_cycle_indicators(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType
) -> CycleIndicators:
    """
    Analyze cycle indicators from a history.

    Args:
        data: Historical periods, most recent first. Must be a sequence;
            None is rejected immediately.
        company_type: finance or non_finance

    Returns:
        CycleIndicators with every score clamped to [0, 100] and margin
        stability in [0, 1]

    Raises:
        TypeError: If data is None
    """
    if data is None:
        raise TypeError("data must be a sequence of HistoricalDataPoint, not None")

    company_type = CompanyType(company_type)

    if len(data) < 2:
        logger.debug(f"History of {len(data)} period(s); returning neutral indicators")
        return default_indicators()

    # Growth indicators
    revenue_growths = growth_rates_of(data)
    avg_growth = _mean(revenue_growths)
    revenue_growth_trend = compare_windows(revenue_growths, GROWTH_TREND_BAND)
    growth_score = calculate_growth_score(avg_growth, revenue_growth_trend)

    profit_growths = _optional_series(data, "profit_growth")
    if profit_growths is not None:
        profit_growth_trend = compare_windows(profit_growths, GROWTH_TREND_BAND)
    else:
        profit_growth_trend = revenue_growth_trend

    # Efficiency indicators
    margins = [point.operating_margin for point in data]
    margin_stability = calculate_margin_stability(margins)
    margin_trend = compare_windows(margins, MARGIN_TREND_BAND)
    efficiency_score = calculate_efficiency_score(margin_stability, margin_trend)

    # Sector sub-indicators
    nim_trend = None
    working_capital_trend = None
    if company_type == CompanyType.FINANCE:
        nims = _optional_series(data, "nim")
        if nims is not None:
            nim_trend = compare_windows(nims, NIM_TREND_BAND)
    else:
        cycles = _optional_series(data, "cash_conversion_cycle")
        if cycles is not None:
            # A shrinking cash conversion cycle is an improvement
            working_capital_trend = compare_windows([-days for days in cycles], WORKING_CAPITAL_BAND)

    indicators = CycleIndicators(
        growthScore=growth_score,
        revenueGrowthTrend=revenue_growth_trend,
        profitGrowthTrend=profit_growth_trend,
        efficiencyScore=efficiency_score,
        marginStability=margin_stability,
        marginTrend=margin_trend,
        workingCapitalTrend=working_capital_trend,
        nimTrend=nim_trend,
        liquidityScore=calculate_liquidity_score(data, company_type),
        sectorSpecificScore=calculate_sector_score(company_type, avg_growth, margin_stability),
    )

    logger.debug(
        f"Indicators: growth={indicators.growthScore}, efficiency={indicators.efficiencyScore}, "
        f"sector={indicators.sectorSpecificScore}, trend={revenue_growth_trend.value}"
    )
    return indicators


__all__ = [
    "analyze_cycle_indicators",
    "default_indicators",
    "split_windows",
    "compare_windows",
    "calculate_margin_stability",
    "growth_rates_of",
    "calculate_growth_score",
    "calculate_efficiency_score",
    "calculate_liquidity_score",
    "calculate_sector_score",
    "RECENT_WINDOW",
    "GROWTH_TREND_BAND",
    "MARGIN_TREND_BAND",
]
