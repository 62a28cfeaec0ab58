"""
Package initialization file for Cycle Scope models.

Exports all Pydantic schemas and enumerations from schemas.py and enums.py so
other modules can import data models without knowing the module layout.

Usage:
    from cyclescope.models import (
        CyclePhase,
        HistoricalDataPoint,
        CycleDetectionResult,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from cyclescope.models.enums import (
    CompanyType,
    CyclePhase,
    PhaseStrength,
    TrendDirection,
    OverallTrend,
    RiskLevel,
    Severity,
    ValidationErrorType,
)

# =============================================================================
# Schemas
# =============================================================================

from cyclescope.models.schemas import (
    # Input records
    HistoricalDataPoint,
    CompanyInfo,
    CycleDetectionInput,
    # Cycle detection results
    CycleIndicators,
    CycleClassification,
    CycleConfidence,
    SectorPatterns,
    PhaseTransition,
    CycleTrends,
    CycleDetectionResult,
    # Financial statements and ratios
    FinancialStatement,
    MarketData,
    UniversalRatios,
    NonFinanceRatios,
    FinanceRatios,
    FinancialRatios,
    # Accuracy validation
    Tolerances,
    ValidationTarget,
    ValidationFailure,
    ValidationError,
    DetailedError,
    AccuracyResult,
    ReportSummary,
    ValidationReport,
    PerformanceBenchmarks,
    BenchmarkResult,
    # Cross-source reconciliation
    CrossValidationSource,
    ConsensusSummary,
    CrossValidationResult,
    # API request bodies
    CycleSeriesRequest,
    RatioCalculationRequest,
    AccuracyValidationRequest,
    NamedValidationTarget,
    ValidationReportRequest,
)

__all__ = [
    # Enums
    'CompanyType',
    'CyclePhase',
    'PhaseStrength',
    'TrendDirection',
    'OverallTrend',
    'RiskLevel',
    'Severity',
    'ValidationErrorType',
    # Input records
    'HistoricalDataPoint',
    'CompanyInfo',
    'CycleDetectionInput',
    # Cycle detection results
    'CycleIndicators',
    'CycleClassification',
    'CycleConfidence',
    'SectorPatterns',
    'PhaseTransition',
    'CycleTrends',
    'CycleDetectionResult',
    # Financial statements and ratios
    'FinancialStatement',
    'MarketData',
    'UniversalRatios',
    'NonFinanceRatios',
    'FinanceRatios',
    'FinancialRatios',
    # Accuracy validation
    'Tolerances',
    'ValidationTarget',
    'ValidationFailure',
    'ValidationError',
    'DetailedError',
    'AccuracyResult',
    'ReportSummary',
    'ValidationReport',
    'PerformanceBenchmarks',
    'BenchmarkResult',
    # Cross-source reconciliation
    'CrossValidationSource',
    'ConsensusSummary',
    'CrossValidationResult',
    # API request bodies
    'CycleSeriesRequest',
    'RatioCalculationRequest',
    'AccuracyValidationRequest',
    'NamedValidationTarget',
    'ValidationReportRequest',
]
