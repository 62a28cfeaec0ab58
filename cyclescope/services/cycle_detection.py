"""
Cycle Detection Orchestrator Service

Facade that wires the indicator analyzer and the phase classifier together
with company metadata and produces the full CycleDetectionResult consumed by
the dashboard:

- Phase, strength and confidence from the classifier
- An independent data quality score for the input history
- Sector pattern annotations from a fixed lookup
- Long-run trends computed from the raw history (overall direction,
  volatility, risk level, predictability and phase transitions)
- A phase-conditioned narrative: outlook, risk factors and opportunities

Phase transitions:
    A rolling window of `transition_window` periods (default 4) slides over
    the history from the oldest periods to the newest. Each window is
    classified on its own and every change of phase between consecutive
    windows is reported as a PhaseTransition dated by the most recent period
    of the window that entered the new phase.

Every branch is total: the orchestrator never raises for well-typed input.
Company-scoped detection through a HistoricalDataSource raises only when the
source has no history at all for the company.

Usage:
    from cyclescope.services.cycle_detection import detect_cycle_phase

    result = detect_cycle_phase(CycleDetectionInput(
        historicalData=history,
        companyInfo=CompanyInfo(name="Emami Ltd", sector="FMCG", type="non_finance"),
        currentQuarter=history[0],
    ))
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from cyclescope.core.config import get_settings
from cyclescope.core.data_source import HistoricalDataSource
from cyclescope.core.exceptions import InsufficientHistoryError
from cyclescope.models.enums import (
    CompanyType,
    CyclePhase,
    OverallTrend,
    PhaseStrength,
    RiskLevel,
)
from cyclescope.models.schemas import (
    CompanyInfo,
    CycleDetectionInput,
    CycleDetectionResult,
    CycleTrends,
    HistoricalDataPoint,
    PhaseTransition,
    SectorPatterns,
)
from cyclescope.services.cycle_classification import (
    calculate_cycle_confidence,
    classify_cycle_phase,
    classify_indicators,
)
from cyclescope.services.cycle_indicators import analyze_cycle_indicators, growth_rates_of


logger = logging.getLogger(__name__)


# =============================================================================
# Narrative Rule Table
# =============================================================================


class Narrative(NamedTuple):
    outlook: str
    risk_factors: Tuple[str, ...]
    opportunities: Tuple[str, ...]


NARRATIVE_BY_PHASE: Dict[CyclePhase, Narrative] = {
    CyclePhase.EXPANSION: Narrative(
        "Strong growth momentum with positive cycle phase",
        (),
        ("Market expansion opportunities", "Investment in capacity"),
    ),
    CyclePhase.CONTRACTION: Narrative(
        "Challenging cycle phase requiring strategic adjustments",
        ("Revenue decline risk", "Margin pressure"),
        ("Cost optimization", "Market share gain during downturn"),
    ),
    CyclePhase.TRANSITION: Narrative(
        "Transitional phase with mixed signals",
        ("Uncertainty in business direction",),
        ("Strategic repositioning", "Operational improvements"),
    ),
    CyclePhase.STABLE: Narrative(
        "Stable business performance",
        (),
        (),
    ),
}

# Appended to the phase narrative for a specific (phase, strength)
EXTRA_OPPORTUNITIES: Dict[Tuple[CyclePhase, PhaseStrength], Tuple[str, ...]] = {
    (CyclePhase.EXPANSION, PhaseStrength.STRONG): ("Strategic acquisitions", "New product launches"),
}

TRANSITION_REASONS: Dict[CyclePhase, str] = {
    CyclePhase.EXPANSION: "Growth acceleration detected",
    CyclePhase.CONTRACTION: "Revenue decline detected",
    CyclePhase.TRANSITION: "Mixed growth and margin signals",
    CyclePhase.STABLE: "Growth normalised",
}


def build_narrative(
    phase: CyclePhase,
    strength: PhaseStrength
) -> Tuple[str, List[str], List[str]]:
    """
    Select outlook, risk factors and opportunities for a phase.

    Args:
        phase: Current phase
        strength: Phase strength

    Returns:
        Tuple of (outlook, risk_factors, opportunities)
    """
    narrative = NARRATIVE_BY_PHASE[CyclePhase(phase)]
    opportunities = list(narrative.opportunities)
    opportunities.extend(EXTRA_OPPORTUNITIES.get((CyclePhase(phase), PhaseStrength(strength)), ()))
    return narrative.outlook, list(narrative.risk_factors), opportunities


# =============================================================================
# Data Quality and Sector Patterns
# =============================================================================


def calculate_data_quality(data: Sequence[HistoricalDataPoint]) -> float:
    """
    Data quality of a history: base 0.7, +0.1 for >= 5 periods, +0.1 for
    >= 8 periods, +0.1 when every period has positive revenue.

    Args:
        data: Historical periods

    Returns:
        Quality in [0, 1]
    """
    quality = 0.7
    if len(data) >= 5:
        quality += 0.1
    if len(data) >= 8:
        quality += 0.1
    if all(point.revenue > 0 for point in data):
        quality += 0.1
    return min(1.0, quality)


def detect_sector_specific_patterns(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType,
    sector: str
) -> SectorPatterns:
    """
    Sector pattern annotations from a fixed lookup.

    Args:
        data: Historical periods (unused by the lookup; kept for callers that
            pass the full context)
        company_type: finance or non_finance
        sector: Sector label; 'FMCG' is matched case-insensitively

    Returns:
        SectorPatterns
    """
    company_type = CompanyType(company_type)

    if company_type == CompanyType.FINANCE:
        return SectorPatterns(
            sectorAlignment=0.8,
            nimStabilityPattern="stable_nim",
            leveragePattern="banking_typical",
            growthRatePattern="high_growth",
            regulatoryAlignment=0.8,
        )

    if (sector or "").strip().upper() == "FMCG":
        return SectorPatterns(
            sectorAlignment=0.85,
            workingCapitalCyclePattern="typical_fmcg",
            marginStabilityPattern="stable_margins",
            growthRatePattern="moderate_steady",
            seasonalityIndicator=0.4,
        )

    return SectorPatterns(
        sectorAlignment=0.75,
        workingCapitalCyclePattern="typical_manufacturing",
        marginStabilityPattern="stable_margins",
        growthRatePattern="moderate_steady",
    )


# =============================================================================
# Long-Run Trends
# =============================================================================


def default_trends() -> CycleTrends:
    """Trends for histories with fewer than three periods."""
    return CycleTrends(
        overallTrend=OverallTrend.STABLE,
        cycleDuration=1,
        volatility=0.2,
        phaseTransitions=[],
        sustainabilityScore=0.6,
        riskLevel=RiskLevel.MEDIUM,
        predictabilityScore=0.5,
    )


def detect_phase_transitions(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType = CompanyType.NON_FINANCE,
    window: Optional[int] = None
) -> List[PhaseTransition]:
    """
    Track consecutive phase changes over rolling windows.

    Windows are classified from the oldest to the newest. Histories with
    fewer than window + 1 periods produce no transitions.

    Args:
        data: Historical periods, most recent first
        company_type: finance or non_finance
        window: Periods per window (default from settings, at least 2)

    Returns:
        Transitions in chronological order
    """
    if window is None:
        window = get_settings().transition_window
    window = max(2, window)

    if len(data) < window + 1:
        return []

    transitions: List[PhaseTransition] = []
    previous_phase: Optional[CyclePhase] = None

    # start indexes the most recent period of each window; oldest window first
    for start in range(len(data) - window, -1, -1):
        window_data = data[start:start + window]
        phase = classify_cycle_phase(window_data, company_type).currentPhase

        if previous_phase is not None and phase != previous_phase:
            transitions.append(PhaseTransition(
                fromPhase=previous_phase,
                toPhase=phase,
                transitionYear=window_data[0].period,
                transitionReason=TRANSITION_REASONS[phase],
            ))
        previous_phase = phase

    return transitions


def analyze_cycle_trends(
    data: Sequence[HistoricalDataPoint],
    company_type: CompanyType = CompanyType.NON_FINANCE,
    window: Optional[int] = None
) -> CycleTrends:
    """
    Long-run trend statistics from the raw history.

    - Overall trend: the recent half (first n // 2 periods) against the older
      half; upward beyond +10%, downward beyond -10%. Earlier releases
      compared the halves the other way round and reported a growing
      company as downward.
    - Growth: missing or non-finite revenue growth reads as 0
    - Volatility: population stdev of revenue growth
    - Risk: low for calm upward histories, high for volatile (> 0.3) or
      downward ones, medium otherwise
    - Predictability: max(0.3, 1 - 2 * volatility)

    Args:
        data: Historical periods, most recent first
        company_type: Company type used when classifying transition windows
        window: Transition window size override

    Returns:
        CycleTrends
    """
    if len(data) < 3:
        return default_trends()

    revenues = np.asarray([point.revenue for point in data], dtype=np.float64)
    mid = len(revenues) // 2
    recent_avg = float(np.mean(revenues[:mid]))
    older_avg = float(np.mean(revenues[mid:]))

    overall_trend = OverallTrend.STABLE
    if recent_avg > older_avg * 1.1:
        overall_trend = OverallTrend.UPWARD
    elif recent_avg < older_avg * 0.9:
        overall_trend = OverallTrend.DOWNWARD

    growth_rates = np.asarray(growth_rates_of(data), dtype=np.float64)
    volatility = float(np.std(growth_rates))  # Population std (ddof=0)

    sustainability = 0.7
    if volatility < 0.1:
        sustainability += 0.1
    if overall_trend == OverallTrend.UPWARD:
        sustainability += 0.1

    risk_level = RiskLevel.MEDIUM
    if volatility < 0.1 and overall_trend == OverallTrend.UPWARD:
        risk_level = RiskLevel.LOW
    elif volatility > 0.3 or overall_trend == OverallTrend.DOWNWARD:
        risk_level = RiskLevel.HIGH

    return CycleTrends(
        overallTrend=overall_trend,
        cycleDuration=min(len(data), 4),
        volatility=volatility,
        phaseTransitions=detect_phase_transitions(data, company_type, window),
        sustainabilityScore=min(1.0, sustainability),
        riskLevel=risk_level,
        predictabilityScore=min(1.0, max(0.3, 1 - volatility * 2)),
    )


# =============================================================================
# Main Entry Points
# =============================================================================


def detect_cycle_phase(detection_input: CycleDetectionInput) -> CycleDetectionResult:
    """
    Detect the cycle phase of a company and build the full result.

    Args:
        detection_input: History, company metadata and current quarter

    Returns:
        CycleDetectionResult
    """
    history = detection_input.historicalData
    company = detection_input.companyInfo

    if len(history) < 2:
        logger.warning(
            f"{company.name}: only {len(history)} period(s) of history, using neutral indicators"
        )

    indicators = analyze_cycle_indicators(history, company.type)
    classification = classify_indicators(indicators, len(history))
    outlook, risk_factors, opportunities = build_narrative(
        classification.currentPhase, classification.phaseStrength
    )

    result = CycleDetectionResult(
        company=company.name,
        currentPhase=classification.currentPhase,
        phaseStrength=classification.phaseStrength,
        confidence=classification.confidence,
        dataQuality=calculate_data_quality(history),
        indicators=indicators,
        sectorPatterns=detect_sector_specific_patterns(history, company.type, company.sector),
        trends=analyze_cycle_trends(history, company.type),
        confidenceBreakdown=calculate_cycle_confidence(history, classification.currentPhase),
        outlook=outlook,
        riskFactors=risk_factors,
        opportunities=opportunities,
    )

    logger.info(
        f"Cycle detection for {company.name}: {result.currentPhase.value}/"
        f"{result.phaseStrength.value} (confidence {result.confidence:.2f}, "
        f"{len(history)} periods)"
    )
    return result


def detect_cycle_phase_for_company(
    source: HistoricalDataSource,
    company_id: str,
    company_info: CompanyInfo
) -> CycleDetectionResult:
    """
    Fetch a company's history from a data source and detect its phase.

    Args:
        source: Injected historical data source
        company_id: Identifier understood by the source
        company_info: Company metadata

    Returns:
        CycleDetectionResult

    Raises:
        UnknownCompanyError: If the source does not know the company
        InsufficientHistoryError: If the source returns no periods
    """
    history = source.get_history(company_id)
    if not history:
        raise InsufficientHistoryError(company_id)

    return detect_cycle_phase(CycleDetectionInput(
        historicalData=history,
        companyInfo=company_info,
        currentQuarter=history[0],
    ))


__all__ = [
    "detect_cycle_phase",
    "detect_cycle_phase_for_company",
    "calculate_data_quality",
    "detect_sector_specific_patterns",
    "analyze_cycle_trends",
    "detect_phase_transitions",
    "default_trends",
    "build_narrative",
    "NARRATIVE_BY_PHASE",
    "EXTRA_OPPORTUNITIES",
]
