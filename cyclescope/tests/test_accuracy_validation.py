"""
Calculation Accuracy Validation Test Module

Test Coverage:
- Accurate and inaccurate computed ratios against published benchmarks
- Missing metrics and impossible values as critical errors
- Strict and normal tolerance tiers, near-exact widening
- Category accuracies (sector-specific, operational, financial services)
- Recommendation tiers
"""

import pytest

from cyclescope.models import Severity, Tolerances, ValidationErrorType
from cyclescope.services.accuracy_validation import (
    calculate_deviation,
    generate_recommendation,
    is_impossible_value,
    select_tolerance,
    validate_calculation_accuracy,
)


class TestAccurateRatios:

    @pytest.mark.asyncio
    async def test_accurate_ratios_pass(self, accurate_ratios, emami_expected_ratios, tolerances) -> None:
        result = await validate_calculation_accuracy(accurate_ratios, emami_expected_ratios, tolerances)

        assert result.overallAccuracy == 1.0
        assert result.failedValidations == []
        assert result.criticalErrors == []
        assert result.detailedErrors == []
        assert result.validatedCount == 3
        assert result.averageDeviation < 0.01

    @pytest.mark.asyncio
    async def test_strict_rate_ignores_widened_tolerance(
        self, accurate_ratios, emami_expected_ratios, tolerances
    ) -> None:
        """Every deviation is above 0.1% even though all pass at the widened 1%."""
        result = await validate_calculation_accuracy(accurate_ratios, emami_expected_ratios, tolerances)
        assert result.strictTolerancePassed == 0.0

    @pytest.mark.asyncio
    async def test_exact_match_passes_strict(self, emami_expected_ratios, tolerances) -> None:
        result = await validate_calculation_accuracy(emami_expected_ratios, emami_expected_ratios, tolerances)

        assert result.strictTolerancePassed == 1.0
        assert result.averageDeviation == 0.0

    @pytest.mark.asyncio
    async def test_category_accuracies(self, accurate_ratios, emami_expected_ratios, tolerances) -> None:
        result = await validate_calculation_accuracy(accurate_ratios, emami_expected_ratios, tolerances)

        # operatingProfitMargin is a sector-specific metric
        assert result.sectorSpecificAccuracy == 1.0
        assert result.operationalRatiosAccuracy == 1.0
        assert result.financialServicesAccuracy is None

    @pytest.mark.asyncio
    async def test_financial_services_accuracy(self, tolerances) -> None:
        expected = {"netInterestMargin": 0.035, "costToIncomeRatio": 0.45}
        result = await validate_calculation_accuracy(dict(expected), expected, tolerances)

        assert result.financialServicesAccuracy == 1.0
        assert result.operationalRatiosAccuracy is None
        assert result.sectorSpecificAccuracy is None


class TestInaccurateRatios:

    @pytest.mark.asyncio
    async def test_inaccurate_ratios_fail(self, inaccurate_ratios, emami_expected_ratios, tolerances) -> None:
        result = await validate_calculation_accuracy(inaccurate_ratios, emami_expected_ratios, tolerances)

        assert result.overallAccuracy == 0.0
        assert {failure.metric for failure in result.failedValidations} == set(emami_expected_ratios)
        assert all(failure.severity == Severity.CRITICAL for failure in result.failedValidations)
        assert len(result.criticalErrors) == 3
        assert all(
            error.type == ValidationErrorType.IMPOSSIBLE_RATIO_VALUE for error in result.criticalErrors
        )

    @pytest.mark.asyncio
    async def test_detailed_errors_carry_recommendations(
        self, inaccurate_ratios, emami_expected_ratios, tolerances
    ) -> None:
        result = await validate_calculation_accuracy(inaccurate_ratios, emami_expected_ratios, tolerances)

        assert len(result.detailedErrors) == 3
        for error in result.detailedErrors:
            assert error.recommendation.startswith("Critical deviation")

    @pytest.mark.asyncio
    async def test_strict_metric_failure_is_high_severity(self, tolerances) -> None:
        result = await validate_calculation_accuracy({"roe": 0.30}, {"roe": 0.28}, tolerances)

        failure = result.failedValidations[0]
        assert failure.severity == Severity.HIGH
        assert failure.tolerance == 0.001
        assert result.criticalErrors == []
        assert result.detailedErrors[0].recommendation.startswith("Moderate deviation")

    @pytest.mark.asyncio
    async def test_normal_metric_failure_is_medium_severity(self, tolerances) -> None:
        result = await validate_calculation_accuracy({"currentRatio": 1.55}, {"currentRatio": 1.5}, tolerances)

        failure = result.failedValidations[0]
        assert failure.severity == Severity.MEDIUM
        assert failure.tolerance == 0.01
        assert result.detailedErrors[0].recommendation.startswith("Minor deviation")


class TestMissingMetrics:

    @pytest.mark.asyncio
    async def test_missing_metrics_are_critical(self, emami_expected_ratios, tolerances) -> None:
        result = await validate_calculation_accuracy({"roe": 0.298}, emami_expected_ratios, tolerances)

        assert result.validatedCount == 1
        assert result.overallAccuracy == 1.0
        missing = [error for error in result.criticalErrors if error.type == ValidationErrorType.MISSING_METRIC]
        assert len(missing) == 2
        assert {error.affectedMetrics[0] for error in missing} == {"netProfitMargin", "operatingProfitMargin"}
        assert all(error.severity == Severity.CRITICAL for error in missing)

    @pytest.mark.asyncio
    async def test_none_value_is_missing(self, tolerances) -> None:
        result = await validate_calculation_accuracy({"roe": None}, {"roe": 0.298}, tolerances)

        assert result.criticalErrors[0].type == ValidationErrorType.MISSING_METRIC
        assert result.validatedCount == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    async def test_non_finite_value_is_missing(self, value, tolerances) -> None:
        result = await validate_calculation_accuracy({"roe": value}, {"roe": 0.298}, tolerances)

        assert [error.type for error in result.criticalErrors] == [ValidationErrorType.MISSING_METRIC]
        assert result.failedValidations == []
        assert result.validatedCount == 0
        assert result.overallAccuracy == 0.0

    @pytest.mark.asyncio
    async def test_nothing_validated(self, tolerances) -> None:
        result = await validate_calculation_accuracy({}, {}, tolerances)

        assert result.overallAccuracy == 0.0
        assert result.averageDeviation == 1.0
        assert result.strictTolerancePassed == 0.0

    @pytest.mark.asyncio
    async def test_extra_actual_metrics_are_ignored(self, tolerances) -> None:
        result = await validate_calculation_accuracy(
            {"roe": 0.298, "unexpected": 5.0}, {"roe": 0.298}, tolerances
        )
        assert result.validatedCount == 1


class TestHelpers:

    def test_relative_deviation(self) -> None:
        assert calculate_deviation(0.22, 0.20) == pytest.approx(0.1)

    def test_absolute_deviation_for_zero_expected(self) -> None:
        assert calculate_deviation(0.02, 0.0) == pytest.approx(0.02)

    def test_near_exact_match_widens_strict_tolerance(self) -> None:
        tolerances = Tolerances(strict=0.001, normal=0.01, loose=0.05)

        assert select_tolerance("roe", 0.005, tolerances) == 0.01
        assert select_tolerance("roe", 0.02, tolerances) == 0.001
        assert select_tolerance("currentRatio", 0.02, tolerances) == 0.01

    @pytest.mark.parametrize("metric,actual,deviation,expected", [
        ("netProfitMargin", -0.6, 0.1, True),
        ("roe", 1.2, 0.1, True),
        ("roe", -0.6, 0.1, True),
        ("currentRatio", 12.0, 0.1, True),
        ("currentRatio", 1.5, 0.6, True),
        ("currentRatio", 1.5, 0.1, False),
        ("netProfitMargin", -0.4, 0.1, False),
    ])
    def test_impossible_values(self, metric, actual, deviation, expected) -> None:
        assert is_impossible_value(metric, actual, deviation) is expected

    @pytest.mark.parametrize("deviation,prefix", [
        (0.6, "Critical deviation"),
        (0.2, "Significant deviation"),
        (0.07, "Moderate deviation"),
        (0.02, "Minor deviation"),
    ])
    def test_recommendation_tiers(self, deviation, prefix) -> None:
        assert generate_recommendation("roe", 0.3, 0.3, deviation).startswith(prefix)
