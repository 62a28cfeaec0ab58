"""
FastAPI router module for cycle detection endpoints.

Endpoints:
- POST /cycles/detect: Full detection result for a supplied history
- POST /cycles/indicators: Indicator scores only
- POST /cycles/classify: Phase classification only
- GET /cycles/companies/{company_id}: Detection for a company held by the
  injected historical data source

The dashboard's cycle timeline, phase indicator and cycle indicators panel
read these responses as plain data.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from cyclescope.core.dependencies import DataSourceDep
from cyclescope.core.exceptions import InsufficientHistoryError, UnknownCompanyError
from cyclescope.models import (
    CompanyInfo,
    CompanyType,
    CycleClassification,
    CycleDetectionInput,
    CycleDetectionResult,
    CycleIndicators,
    CycleSeriesRequest,
)
from cyclescope.services.cycle_classification import classify_cycle_phase
from cyclescope.services.cycle_detection import (
    detect_cycle_phase,
    detect_cycle_phase_for_company,
)
from cyclescope.services.cycle_indicators import analyze_cycle_indicators

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.post("/detect", response_model=CycleDetectionResult)
async def detect_endpoint(detection_input: CycleDetectionInput) -> CycleDetectionResult:
    """
    Detect the cycle phase of a company from a supplied history.

    Args:
        detection_input: History (most recent first), company info and
            current quarter

    Returns:
        CycleDetectionResult
    """
    return detect_cycle_phase(detection_input)


@router.post("/indicators", response_model=CycleIndicators)
async def indicators_endpoint(request: CycleSeriesRequest) -> CycleIndicators:
    """Indicator scores for a history."""
    return analyze_cycle_indicators(request.historicalData, request.companyType)


@router.post("/classify", response_model=CycleClassification)
async def classify_endpoint(request: CycleSeriesRequest) -> CycleClassification:
    """Phase classification for a history."""
    return classify_cycle_phase(request.historicalData, request.companyType)


@router.get("/companies/{company_id}", response_model=CycleDetectionResult)
async def company_detection_endpoint(
    company_id: str,
    source: DataSourceDep,
    name: str = Query(..., min_length=1, description="Company display name"),
    sector: str = Query(..., description="Sector label, e.g. FMCG"),
    company_type: CompanyType = Query(..., alias="type", description="finance or non_finance"),
) -> CycleDetectionResult:
    """
    Detect the cycle phase of a company held by the data source.

    Raises:
        HTTPException 404: If the data source does not know the company
        HTTPException 422: If the company has no historical periods
    """
    company_info = CompanyInfo(name=name, sector=sector, type=company_type)
    try:
        return detect_cycle_phase_for_company(source, company_id, company_info)
    except UnknownCompanyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientHistoryError as e:
        logger.warning(f"Detection requested for {company_id} without history")
        raise HTTPException(status_code=422, detail=str(e))
