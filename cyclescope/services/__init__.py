"""
Cycle Scope Services Module

Business logic for cycle detection and calculation validation. Every service
is stateless except ValidationFramework, whose instances accumulate targets
and results for one sequential validation run.

Services:
- cycle_indicators: Indicator scores from a financial history
- cycle_classification: Phase decision table and confidence breakdown
- cycle_detection: Orchestrator producing the full detection result
- ratios: Universal, non-finance and finance ratio sets from statements
- accuracy_validation: Actual vs expected ratio checks under tolerance tiers
- validation_framework: Target registry and production readiness report
- cross_source: Agreement and outliers across data sources
- benchmarks: Timing and memory benchmarks of the core calculations

All services are consumed by the API layer (cyclescope/api/).
"""

# =============================================================================
# Cycle Indicator Exports
# =============================================================================

from cyclescope.services.cycle_indicators import (
    analyze_cycle_indicators,
    default_indicators,
    calculate_margin_stability,
)

# =============================================================================
# Cycle Classification Exports
# =============================================================================

from cyclescope.services.cycle_classification import (
    classify_cycle_phase,
    classify_indicators,
    calculate_composite_score,
    phase_from_composite,
    calculate_cycle_confidence,
)

# =============================================================================
# Cycle Detection Exports
# =============================================================================

from cyclescope.services.cycle_detection import (
    detect_cycle_phase,
    detect_cycle_phase_for_company,
    calculate_data_quality,
    detect_sector_specific_patterns,
    analyze_cycle_trends,
    detect_phase_transitions,
)

# =============================================================================
# Ratio Calculation Exports
# =============================================================================

from cyclescope.services.ratios import (
    calculate_financial_ratios,
    ratio_map,
)

# =============================================================================
# Validation Exports
# =============================================================================

from cyclescope.services.accuracy_validation import (
    validate_calculation_accuracy,
    calculate_deviation,
    generate_recommendation,
)
from cyclescope.services.validation_framework import (
    ValidationFramework,
    create_validation_report,
)
from cyclescope.services.cross_source import validate_cross_data_sources
from cyclescope.services.benchmarks import validate_performance_benchmarks

__all__ = [
    # ----- Cycle Indicators -----
    'analyze_cycle_indicators',
    'default_indicators',
    'calculate_margin_stability',
    # ----- Cycle Classification -----
    'classify_cycle_phase',
    'classify_indicators',
    'calculate_composite_score',
    'phase_from_composite',
    'calculate_cycle_confidence',
    # ----- Cycle Detection -----
    'detect_cycle_phase',
    'detect_cycle_phase_for_company',
    'calculate_data_quality',
    'detect_sector_specific_patterns',
    'analyze_cycle_trends',
    'detect_phase_transitions',
    # ----- Ratio Calculation -----
    'calculate_financial_ratios',
    'ratio_map',
    # ----- Validation -----
    'validate_calculation_accuracy',
    'calculate_deviation',
    'generate_recommendation',
    'ValidationFramework',
    'create_validation_report',
    'validate_cross_data_sources',
    'validate_performance_benchmarks',
]
