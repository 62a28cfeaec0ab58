"""
Validation Framework Service

Accumulates named validation targets (typically one per company), runs the
accuracy validator for each and aggregates the results into a production
readiness report.

Targets and the ratios they validate:
    A ValidationTarget may carry `actualRatios`, values computed elsewhere;
    those are compared with `expectedRatios`. Otherwise, when the target
    carries `financialData`, the ratio calculator computes the actual ratios
    from the statements. A target with neither is self-checked (expected
    against expected), which always passes. Self-checks are logged as
    warnings because they only prove the target is well formed.

Report scoring (0-100 scales):
    overall = accuracy * 0.5 + performance * 0.3 + reliability * 0.2

    - accuracy: mean overall accuracy of all targets * 100
    - performance: configured default, or 95/70 from a supplied benchmark run
    - reliability: 95, minus 10 per critical failure, floored at 50

A ValidationFramework instance is not safe to share between concurrent
callers; use one instance per sequential validation run.
"""

import logging
from typing import List, Optional, Tuple

from cyclescope.core.config import get_settings
from cyclescope.models.enums import Severity
from cyclescope.models.schemas import (
    AccuracyResult,
    BenchmarkResult,
    ReportSummary,
    ValidationFailure,
    ValidationReport,
    ValidationTarget,
)
from cyclescope.services.accuracy_validation import validate_calculation_accuracy
from cyclescope.services.ratios import calculate_financial_ratios, ratio_map


logger = logging.getLogger(__name__)


BASE_RELIABILITY_SCORE: float = 95.0
RELIABILITY_PENALTY_PER_FAILURE: float = 10.0
MIN_RELIABILITY_SCORE: float = 50.0

BENCHMARKS_MET_PERFORMANCE_SCORE: float = 95.0
BENCHMARKS_MISSED_PERFORMANCE_SCORE: float = 70.0

PRODUCTION_READY_SCORE: float = 90.0


class ValidationFramework:
    """
    Registry of validation targets and their accuracy results.

    Example:
        >>> framework = ValidationFramework()
        >>> await framework.add_validation_target("Emami", emami_target)
        >>> await framework.run_all_validations()
        >>> framework.get_overall_accuracy()
        1.0
    """

    def __init__(self) -> None:
        self._targets: List[Tuple[str, ValidationTarget]] = []
        self._results: List[AccuracyResult] = []

    async def add_validation_target(self, name: str, target: ValidationTarget) -> None:
        """Register a target; targets are validated in insertion order."""
        self._targets.append((name, target))

    async def run_all_validations(self) -> None:
        """
        Validate every registered target and append its result.

        Each call validates all targets again and appends a fresh set of
        results.
        """
        for name, target in self._targets:
            if target.actualRatios is not None:
                actual = target.actualRatios
            elif target.financialData:
                actual = ratio_map(calculate_financial_ratios(
                    target.financialData,
                    target.companyInfo.type,
                    market=target.marketData,
                    company=target.companyInfo.name,
                ))
            else:
                logger.warning(f"Target {name} has no actual ratios; self-checking expected ratios")
                actual = dict(target.expectedRatios)

            result = await validate_calculation_accuracy(actual, target.expectedRatios, target.tolerances)
            self._results.append(result)

            logger.info(
                f"Validated {name}: accuracy={result.overallAccuracy:.3f}, "
                f"failures={len(result.failedValidations)}, critical={len(result.criticalErrors)}"
            )

    @property
    def target_names(self) -> List[str]:
        return [name for name, _ in self._targets]

    def get_results(self) -> List[AccuracyResult]:
        return list(self._results)

    def get_overall_accuracy(self) -> float:
        """Mean overall accuracy of all results; 0 when nothing has run."""
        if not self._results:
            return 0.0
        return sum(result.overallAccuracy for result in self._results) / len(self._results)


def _performance_score(benchmark: Optional[BenchmarkResult]) -> float:
    if benchmark is None:
        return get_settings().default_performance_score
    if benchmark.allBenchmarksMet:
        return BENCHMARKS_MET_PERFORMANCE_SCORE
    return BENCHMARKS_MISSED_PERFORMANCE_SCORE


async def create_validation_report(
    framework: ValidationFramework,
    benchmark: Optional[BenchmarkResult] = None
) -> ValidationReport:
    """
    Aggregate a framework's results into a validation report.

    Args:
        framework: Framework whose validations have run
        benchmark: Optional performance benchmark result

    Returns:
        ValidationReport with the weighted overall score, critical failures
        and recommendations for production
    """
    settings = get_settings()
    results = framework.get_results()
    overall_accuracy = framework.get_overall_accuracy()

    total_ratios_validated = sum(result.validatedCount for result in results)
    critical_failures: List[ValidationFailure] = [
        failure
        for result in results
        for failure in result.failedValidations
        if failure.severity == Severity.CRITICAL
    ]

    accuracy_score = overall_accuracy * 100
    performance_score = _performance_score(benchmark)
    if critical_failures:
        reliability_score = max(
            MIN_RELIABILITY_SCORE,
            BASE_RELIABILITY_SCORE - len(critical_failures) * RELIABILITY_PENALTY_PER_FAILURE,
        )
    else:
        reliability_score = BASE_RELIABILITY_SCORE

    overall_score = accuracy_score * 0.5 + performance_score * 0.3 + reliability_score * 0.2

    recommendations: List[str] = []
    if overall_accuracy < settings.accuracy_target:
        recommendations.append(
            f"Improve calculation accuracy to meet {settings.accuracy_target:.1%} target"
        )
    if critical_failures:
        recommendations.append("Address critical calculation failures before production")
    if len(results) < settings.min_companies_for_coverage:
        recommendations.append("Validate with more company types for comprehensive coverage")

    report = ValidationReport(
        overallScore=min(100.0, overall_score),
        companiesValidated=len(results),
        totalRatiosValidated=total_ratios_validated,
        criticalFailures=critical_failures,
        performanceBenchmarksMet=overall_score > PRODUCTION_READY_SCORE,
        recommendationsForProduction=recommendations,
        confidenceLevel=min(overall_accuracy + 0.01, 0.99),
        summary=ReportSummary(
            accuracy=accuracy_score,
            performance=performance_score,
            reliability=reliability_score,
        ),
    )

    logger.info(
        f"Validation report: score={report.overallScore:.1f}, companies={report.companiesValidated}, "
        f"critical={len(critical_failures)}"
    )
    return report


__all__ = [
    "ValidationFramework",
    "create_validation_report",
]
