"""
Pydantic models for the Cycle Scope service.

This module provides type-safe data validation and serialization for the
cycle detection and calculation validation contracts:

- Historical input records and company metadata
- Cycle indicators, classification, trends and the full detection result
- Financial statements and the ratio sets computed from them
- Accuracy validation targets and results
- Validation reports and performance benchmarks
- Cross-source reconciliation inputs and results
- API request bodies

Input financial records use the snake_case field names of the financial data
feed. Result models use the camelCase names read by the dashboard charts.

All models use Pydantic v2 syntax.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cyclescope.models.enums import (
    CompanyType,
    CyclePhase,
    OverallTrend,
    PhaseStrength,
    RiskLevel,
    Severity,
    TrendDirection,
    ValidationErrorType,
)


# =============================================================================
# Input Records
# =============================================================================


class HistoricalDataPoint(BaseModel):
    """
    One period's financial snapshot.

    Histories are ordered most recent first. `operating_margin` and
    `net_margin` are percentage points (23.0 means 23%); growth fields are
    fractions (0.064 means 6.4%). Records are frozen: the core only reads them.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "period": "2025",
                "revenue": 4776,
                "operating_profit": 1099,
                "operating_margin": 23.0,
                "revenue_growth": 0.064,
            }
        }
    )

    period: str = Field(..., description="Period label (e.g. '2025' or 'Q3FY25')")
    revenue: float = Field(..., description="Revenue for the period")
    operating_profit: float = Field(..., description="Operating profit for the period")
    net_profit: Optional[float] = Field(default=None, description="Net profit")
    operating_margin: float = Field(..., description="Operating margin in percentage points")
    net_margin: Optional[float] = Field(default=None, description="Net margin in percentage points")
    roe: Optional[float] = Field(default=None, description="Return on equity")
    current_ratio: Optional[float] = Field(default=None, description="Current ratio (non-finance)")
    debt_to_equity: Optional[float] = Field(default=None, description="Debt to equity")
    cash_conversion_cycle: Optional[float] = Field(
        default=None,
        description="Cash conversion cycle in days (non-finance)"
    )
    revenue_growth: float = Field(..., description="Revenue growth as a fraction")
    profit_growth: Optional[float] = Field(default=None, description="Profit growth as a fraction")
    market_cap: Optional[float] = Field(default=None, description="Market capitalisation")
    nim: Optional[float] = Field(default=None, description="Net interest margin (banks)")


class CompanyInfo(BaseModel):
    """Company metadata used to pick sector branches."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Company name")
    sector: str = Field(..., description="Sector label (e.g. 'FMCG', 'Banking')")
    type: CompanyType = Field(..., description="finance or non_finance")


class CycleDetectionInput(BaseModel):
    """Input of the cycle detection orchestrator."""
    historicalData: List[HistoricalDataPoint] = Field(
        ...,
        description="Historical periods, most recent first"
    )
    companyInfo: CompanyInfo
    currentQuarter: Optional[HistoricalDataPoint] = Field(
        default=None,
        description="Latest quarter snapshot, carried for consumers"
    )


# =============================================================================
# Cycle Detection Results
# =============================================================================


class CycleIndicators(BaseModel):
    """
    Normalized indicator scores derived from a history.

    Recomputed on every call; never cached.
    """
    growthScore: float = Field(..., ge=0.0, le=100.0)
    revenueGrowthTrend: TrendDirection
    profitGrowthTrend: TrendDirection
    efficiencyScore: float = Field(..., ge=0.0, le=100.0)
    marginStability: float = Field(..., ge=0.0, le=1.0, description="1 means perfectly stable margins")
    marginTrend: TrendDirection
    workingCapitalTrend: Optional[TrendDirection] = Field(
        default=None,
        description="Cash conversion cycle direction; accelerating means the cycle is shrinking"
    )
    nimTrend: Optional[TrendDirection] = Field(default=None, description="NIM direction (banks)")
    liquidityScore: float = Field(..., ge=0.0, le=100.0)
    sectorSpecificScore: float = Field(..., ge=0.0, le=100.0)


class CycleClassification(BaseModel):
    """Phase decision for a history."""
    currentPhase: CyclePhase
    phaseStrength: PhaseStrength
    confidence: float = Field(..., ge=0.0, le=1.0)
    durationInPhase: int = Field(
        ...,
        ge=0,
        description="Approximation: min(periods, 3), not a run-length count"
    )
    sustainabilityScore: float = Field(..., ge=0.0, le=1.0)
    compositeScore: float = Field(..., ge=0.0, le=100.0)


class CycleConfidence(BaseModel):
    """Breakdown of how much the detection can be trusted."""
    overallConfidence: float = Field(..., ge=0.0, le=1.0)
    dataQuality: float = Field(..., ge=0.0, le=1.0)
    patternConsistency: float = Field(..., ge=0.0, le=1.0)
    sectorAlignment: float = Field(..., ge=0.0, le=1.0)


class SectorPatterns(BaseModel):
    """Sector pattern annotations from a fixed lookup."""
    sectorAlignment: float = Field(..., ge=0.0, le=1.0)
    workingCapitalCyclePattern: Optional[str] = None
    marginStabilityPattern: Optional[str] = None
    growthRatePattern: Optional[str] = None
    seasonalityIndicator: Optional[float] = None
    nimStabilityPattern: Optional[str] = None
    leveragePattern: Optional[str] = None
    regulatoryAlignment: Optional[float] = None


class PhaseTransition(BaseModel):
    """A change of phase between two consecutive rolling windows."""
    fromPhase: CyclePhase
    toPhase: CyclePhase
    transitionYear: str = Field(..., description="Most recent period of the window entering the new phase")
    transitionReason: str


class CycleTrends(BaseModel):
    """Long-run statistics computed from the raw history."""
    overallTrend: OverallTrend
    cycleDuration: int = Field(..., ge=0)
    volatility: float = Field(..., ge=0.0, description="Population stdev of revenue growth")
    phaseTransitions: List[PhaseTransition] = Field(default_factory=list)
    sustainabilityScore: float = Field(..., ge=0.0, le=1.0)
    riskLevel: RiskLevel
    predictabilityScore: float = Field(..., ge=0.0, le=1.0)


class CycleDetectionResult(BaseModel):
    """
    Full output of the cycle detection orchestrator.

    The dashboard maps `currentPhase` onto its phase color bands and shows the
    indicator scores in the cycle indicators panel.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "company": "Emami Ltd",
                "currentPhase": "expansion",
                "phaseStrength": "moderate",
                "confidence": 0.8,
                "dataQuality": 0.8,
                "outlook": "Strong growth momentum with positive cycle phase",
            }
        }
    )

    company: Optional[str] = None
    currentPhase: CyclePhase
    phaseStrength: PhaseStrength
    confidence: float = Field(..., ge=0.0, le=1.0)
    dataQuality: float = Field(..., ge=0.0, le=1.0)
    indicators: CycleIndicators
    sectorPatterns: SectorPatterns
    trends: CycleTrends
    confidenceBreakdown: CycleConfidence
    outlook: str
    riskFactors: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)


# =============================================================================
# Financial Statements and Ratios
# =============================================================================


class FinancialStatement(BaseModel):
    """
    One period of statement lines for the ratio calculator.

    Statements are ordered most recent first and share one currency unit.
    Missing lines read as zero. The bank lines (`net_interest_income`,
    `operating_expenses`, `loans`, `deposits`) are estimated from revenue,
    net income, current assets and debt when a bank does not report them.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "period": "2025",
                "revenue": 4776,
                "net_income": 902.7,
                "operating_profit": 1084.2,
                "shareholders_equity": 3029,
                "total_assets": 4400,
                "current_assets": 2100,
                "current_liabilities": 1200,
            }
        }
    )

    period: str = Field(..., description="Period label (e.g. '2025')")
    revenue: float = Field(..., description="Revenue (sales) for the period")
    net_income: float = Field(..., description="Net income for the period")
    operating_profit: Optional[float] = Field(default=None, description="Operating profit (EBITDA proxy)")
    other_income: Optional[float] = Field(default=None, description="Non-operating income, added to EBIT")
    expenses: Optional[float] = Field(default=None, description="Operating expenses, used as cost of goods sold")
    interest_expense: Optional[float] = None
    total_assets: Optional[float] = None
    fixed_assets: Optional[float] = None
    current_assets: Optional[float] = None
    current_liabilities: Optional[float] = None
    inventory: Optional[float] = None
    receivables: Optional[float] = Field(default=None, description="Trade receivables (debtors)")
    payables: Optional[float] = Field(default=None, description="Trade payables")
    shareholders_equity: Optional[float] = None
    debt: Optional[float] = Field(default=None, description="Total borrowings (deposits included for banks)")
    operating_cash_flow: Optional[float] = None
    net_interest_income: Optional[float] = Field(default=None, description="Banks only")
    operating_expenses: Optional[float] = Field(default=None, description="Banks only")
    loans: Optional[float] = Field(default=None, description="Loan book (banks only)")
    deposits: Optional[float] = Field(default=None, description="Customer deposits (banks only)")


class MarketData(BaseModel):
    """Market context used for the valuation ratios."""
    market_cap: float
    stock_price: float
    shares_outstanding: float


class UniversalRatios(BaseModel):
    """
    Ratios computed for every company.

    Margins, returns and growth rates are fractions; growth over n years is
    a compound annual rate.
    """
    roe: float
    netProfitMargin: float
    revenueGrowth1Y: float
    revenueGrowth3Y: float
    revenueGrowth5Y: float
    profitGrowth1Y: float
    profitGrowth3Y: float
    profitGrowth5Y: float
    assetTurnover: float
    debtToEquity: float
    priceToEarnings: float
    priceToBook: float


class NonFinanceRatios(BaseModel):
    """Manufacturing and FMCG ratios. Margins are fractions; day counts are days."""
    operatingProfitMargin: float
    returnOnCapitalEmployed: float
    cashConversionCycle: float
    debtorDays: float
    inventoryDays: float
    payableDays: float
    workingCapitalDays: float
    interestCoverageRatio: float
    currentRatio: float
    quickRatio: float
    freeCashFlowMargin: float
    assetQualityRatio: float


class FinanceRatios(BaseModel):
    """Bank and NBFC ratios, all fractions."""
    netInterestMargin: float
    costToIncomeRatio: float
    loanGrowthRate: float
    depositGrowthRate: float
    nonInterestIncomeRatio: float
    capitalAdequacyRatio: float


class FinancialRatios(BaseModel):
    """
    Full ratio set for one company.

    Exactly one of `nonFinance` and `finance` is populated, chosen by the
    company type.
    """
    company: Optional[str] = None
    companyType: CompanyType
    period: Optional[str] = Field(default=None, description="Most recent statement period")
    universal: UniversalRatios
    nonFinance: Optional[NonFinanceRatios] = None
    finance: Optional[FinanceRatios] = None


# =============================================================================
# Accuracy Validation
# =============================================================================


class Tolerances(BaseModel):
    """Relative deviation tolerance tiers."""
    strict: float = Field(..., ge=0.0)
    normal: float = Field(..., ge=0.0)
    loose: float = Field(..., ge=0.0)


class ValidationTarget(BaseModel):
    """
    Expected ratios for one company.

    `actualRatios` holds the computed values to check. Without it, ratios are
    computed from `financialData` when statements are supplied; a target with
    neither is self-checked against its own expected ratios.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "companyInfo": {"name": "Emami Ltd", "sector": "FMCG", "type": "non_finance"},
                "expectedRatios": {"roe": 0.298, "netProfitMargin": 0.189, "operatingProfitMargin": 0.227},
                "tolerances": {"strict": 0.001, "normal": 0.01, "loose": 0.05},
            }
        }
    )

    companyInfo: CompanyInfo
    expectedRatios: Dict[str, float]
    tolerances: Tolerances
    actualRatios: Optional[Dict[str, Optional[float]]] = None
    financialData: Optional[List[FinancialStatement]] = Field(
        default=None,
        description="Statements, most recent first, for computing the actual ratios"
    )
    marketData: Optional[MarketData] = None


class ValidationFailure(BaseModel):
    """A metric whose deviation exceeded its effective tolerance."""
    metric: str
    expected: float
    actual: float
    deviation: float = Field(..., ge=0.0)
    tolerance: float = Field(..., ge=0.0)
    severity: Severity


class ValidationError(BaseModel):
    """A structural problem independent of tolerance."""
    type: ValidationErrorType
    message: str
    severity: Severity
    affectedMetrics: List[str] = Field(default_factory=list)


class DetailedError(BaseModel):
    """A failure with a generated remediation hint."""
    metric: str
    expected: float
    actual: float
    deviation: float = Field(..., ge=0.0)
    severity: Severity
    recommendation: str


class AccuracyResult(BaseModel):
    """Outcome of comparing actual ratios against expected ratios."""
    overallAccuracy: float = Field(..., ge=0.0, le=1.0)
    failedValidations: List[ValidationFailure] = Field(default_factory=list)
    strictTolerancePassed: float = Field(..., ge=0.0, le=1.0)
    averageDeviation: float = Field(..., ge=0.0)
    validatedCount: int = Field(default=0, ge=0)
    sectorSpecificAccuracy: Optional[float] = None
    operationalRatiosAccuracy: Optional[float] = None
    financialServicesAccuracy: Optional[float] = None
    criticalErrors: List[ValidationError] = Field(default_factory=list)
    detailedErrors: List[DetailedError] = Field(default_factory=list)


class ReportSummary(BaseModel):
    """0-100 component scores of a validation report."""
    accuracy: float
    performance: float
    reliability: float


class ValidationReport(BaseModel):
    """Aggregated report over every target of a validation framework."""
    overallScore: float = Field(..., ge=0.0, le=100.0)
    companiesValidated: int = Field(..., ge=0)
    totalRatiosValidated: int = Field(..., ge=0)
    criticalFailures: List[ValidationFailure] = Field(default_factory=list)
    performanceBenchmarksMet: bool
    recommendationsForProduction: List[str] = Field(default_factory=list)
    confidenceLevel: float = Field(..., ge=0.0, le=1.0)
    summary: ReportSummary


class PerformanceBenchmarks(BaseModel):
    """Performance targets checked by the benchmark run."""
    cycleDetectionTargetMs: float = Field(default=50.0, gt=0.0)
    ratioCalculationTargetMs: float = Field(default=10.0, gt=0.0)
    accuracyValidationTargetMs: float = Field(default=10.0, gt=0.0)
    batchDetectionTargetMs: float = Field(default=5000.0, gt=0.0)
    memoryUsageTargetMb: float = Field(default=256.0, gt=0.0)
    accuracyTarget: float = Field(default=0.999, ge=0.0, le=1.0)


class BenchmarkResult(BaseModel):
    """Measured timings and the reference accuracy of a benchmark run."""
    cycleDetectionMs: float = Field(..., ge=0.0)
    ratioCalculationMs: float = Field(..., ge=0.0)
    accuracyValidationMs: float = Field(..., ge=0.0)
    batchDetectionMs: float = Field(..., ge=0.0)
    memoryUsageMb: float = Field(..., ge=0.0)
    overallAccuracy: float = Field(..., ge=0.0, le=1.0)
    allBenchmarksMet: bool


# =============================================================================
# Cross-Source Reconciliation
# =============================================================================


class CrossValidationSource(BaseModel):
    """Ratios for one company as reported by one data source."""
    source: str = Field(..., min_length=1)
    company: str
    ratios: Dict[str, float]


class ConsensusSummary(BaseModel):
    accuracy: float = Field(..., ge=0.0, le=1.0)


class CrossValidationResult(BaseModel):
    """Agreement across data sources reporting the same ratios."""
    consensus: ConsensusSummary
    sourceAgreement: float = Field(..., ge=0.0, le=1.0)
    outliers: List[CrossValidationSource] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


# =============================================================================
# API Request Bodies
# =============================================================================


class CycleSeriesRequest(BaseModel):
    """Body for the indicator and classification endpoints."""
    historicalData: List[HistoricalDataPoint]
    companyType: CompanyType


class RatioCalculationRequest(BaseModel):
    """Body for the ratio calculation endpoint."""
    financialData: List[FinancialStatement] = Field(..., description="Statements, most recent first")
    companyInfo: CompanyInfo
    marketData: Optional[MarketData] = None
    periodDays: Optional[int] = Field(
        default=None,
        gt=0,
        description="Days per statement period; defaults to the configured annual period"
    )


class AccuracyValidationRequest(BaseModel):
    """Body for the accuracy validation endpoint."""
    actualRatios: Dict[str, Optional[float]]
    expectedRatios: Dict[str, float]
    tolerances: Optional[Tolerances] = Field(
        default=None,
        description="Defaults to the configured tolerance tiers"
    )


class NamedValidationTarget(BaseModel):
    name: str = Field(..., min_length=1)
    target: ValidationTarget


class ValidationReportRequest(BaseModel):
    """Body for the validation report endpoint."""
    targets: List[NamedValidationTarget]
    benchmark: Optional[BenchmarkResult] = None
