"""
FastAPI router module for calculation validation endpoints.

Endpoints:
- POST /validation/accuracy: Actual vs expected ratio check
- POST /validation/cross-source: Agreement across data sources
- POST /validation/report: Validation report over named targets
- POST /validation/benchmarks: Performance benchmark run
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from cyclescope.core.dependencies import SettingsDep
from cyclescope.models import (
    AccuracyResult,
    AccuracyValidationRequest,
    BenchmarkResult,
    CrossValidationResult,
    CrossValidationSource,
    PerformanceBenchmarks,
    Tolerances,
    ValidationReport,
    ValidationReportRequest,
)
from cyclescope.services.accuracy_validation import validate_calculation_accuracy
from cyclescope.services.benchmarks import validate_performance_benchmarks
from cyclescope.services.cross_source import validate_cross_data_sources
from cyclescope.services.validation_framework import (
    ValidationFramework,
    create_validation_report,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/validation", tags=["validation"])


@router.post("/accuracy", response_model=AccuracyResult)
async def accuracy_endpoint(request: AccuracyValidationRequest, settings: SettingsDep) -> AccuracyResult:
    """
    Validate computed ratios against expected ratios.

    Tolerances default to the configured strict/normal/loose tiers.
    """
    tolerances = request.tolerances or Tolerances(
        strict=settings.default_strict_tolerance,
        normal=settings.default_normal_tolerance,
        loose=settings.default_loose_tolerance,
    )
    return await validate_calculation_accuracy(request.actualRatios, request.expectedRatios, tolerances)


@router.post("/cross-source", response_model=CrossValidationResult)
async def cross_source_endpoint(sources: List[CrossValidationSource]) -> CrossValidationResult:
    """Reconcile ratios reported by several data sources."""
    return await validate_cross_data_sources(sources)


@router.post("/report", response_model=ValidationReport)
async def report_endpoint(request: ValidationReportRequest) -> ValidationReport:
    """
    Run every named target through a fresh ValidationFramework and report.

    Raises:
        HTTPException 400: If no targets are provided
    """
    if not request.targets:
        raise HTTPException(status_code=400, detail="No validation targets provided")

    try:
        framework = ValidationFramework()
        for named in request.targets:
            await framework.add_validation_target(named.name, named.target)
        await framework.run_all_validations()

        return await create_validation_report(framework, request.benchmark)
    except Exception as e:
        logger.error(f"Error creating validation report: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error creating validation report: {str(e)}",
        )


@router.post("/benchmarks", response_model=BenchmarkResult)
async def benchmarks_endpoint(benchmarks: PerformanceBenchmarks) -> BenchmarkResult:
    """Time the core calculations against the supplied targets."""
    try:
        return await validate_performance_benchmarks(benchmarks)
    except Exception as e:
        logger.error(f"Error running performance benchmarks: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error running performance benchmarks: {str(e)}",
        )
