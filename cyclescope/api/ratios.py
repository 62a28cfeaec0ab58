"""
FastAPI router module for financial ratio calculation.

Endpoints:
- POST /ratios/calculate: Universal ratios plus the finance or non-finance
  set for a company's statements
"""

import logging

from fastapi import APIRouter, HTTPException

from cyclescope.models import FinancialRatios, RatioCalculationRequest
from cyclescope.services.ratios import calculate_financial_ratios

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ratios", tags=["ratios"])


@router.post("/calculate", response_model=FinancialRatios)
async def calculate_endpoint(request: RatioCalculationRequest) -> FinancialRatios:
    """
    Calculate the ratio sets for one company.

    Args:
        request: Statements (most recent first), company info, optional
            market data and period length

    Returns:
        FinancialRatios

    Raises:
        HTTPException 400: If no statements are provided
    """
    if not request.financialData:
        raise HTTPException(status_code=400, detail="No financial statements provided")

    return calculate_financial_ratios(
        request.financialData,
        request.companyInfo.type,
        market=request.marketData,
        company=request.companyInfo.name,
        period_days=request.periodDays,
    )
