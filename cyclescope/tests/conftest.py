"""
Pytest Configuration and Shared Fixtures for Cycle Scope Tests.

This module provides fixtures and configuration for all tests, supporting:
- Async test execution with pytest-asyncio for the validation entry points
- Sample histories matching the financial data feed schema
  (Emami FMCG series, a bank series, a declining manufacturer)
- Statement lines for the ratio calculator (Emami, a manufacturer, a bank)
- Validation targets with published benchmark ratios
- An in-memory historical data source for company-scoped detection

Dependencies:
- pytest
- pytest-asyncio
"""

from typing import List

import pytest

from cyclescope.core.config import get_settings
from cyclescope.core.data_source import InMemoryDataSource
from cyclescope.models import (
    CompanyInfo,
    CompanyType,
    CycleDetectionInput,
    FinancialStatement,
    HistoricalDataPoint,
    Tolerances,
    ValidationTarget,
)


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - slow: Marks tests as slow (deselect with -m "not slow")
    - boundary: Marks tests pinned to an exact decision-table threshold
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'boundary: marks tests exercising an exact threshold of a rule table'
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear the settings cache around every test so env overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# HISTORY FIXTURES
# ============================================================

def make_point(period: str, revenue: float, growth: float, margin: float, **extra) -> HistoricalDataPoint:
    """Build a history point with operating profit derived from the margin."""
    return HistoricalDataPoint(
        period=period,
        revenue=revenue,
        operating_profit=round(revenue * margin / 100, 2),
        operating_margin=margin,
        revenue_growth=growth,
        **extra,
    )


@pytest.fixture
def emami_history() -> List[HistoricalDataPoint]:
    """
    Emami Ltd annual series, most recent first.

    Average growth 6.1% with a flat 23% operating margin.
    """
    return [
        HistoricalDataPoint(period="2025", revenue=4776, operating_profit=1099,
                            operating_margin=23.0, revenue_growth=0.064),
        HistoricalDataPoint(period="2024", revenue=4488, operating_profit=1032,
                            operating_margin=23.0, revenue_growth=0.060),
        HistoricalDataPoint(period="2023", revenue=4234, operating_profit=974,
                            operating_margin=23.0, revenue_growth=0.059),
    ]


@pytest.fixture
def emami_company() -> CompanyInfo:
    return CompanyInfo(name="Emami Ltd", sector="FMCG", type=CompanyType.NON_FINANCE)


@pytest.fixture
def emami_input(emami_history, emami_company) -> CycleDetectionInput:
    return CycleDetectionInput(
        historicalData=emami_history,
        companyInfo=emami_company,
        currentQuarter=emami_history[0],
    )


@pytest.fixture
def bank_history() -> List[HistoricalDataPoint]:
    """Bank series with 15% average growth and a widening NIM."""
    growths = [0.16, 0.15, 0.15, 0.14, 0.15]
    nims = [4.2, 4.1, 4.1, 3.9, 3.8]
    revenues = [1200, 1035, 900, 783, 687]
    return [
        make_point(f"{2025 - i}", revenues[i], growths[i], 30.0, nim=nims[i])
        for i in range(5)
    ]


@pytest.fixture
def bank_company() -> CompanyInfo:
    return CompanyInfo(name="Sample Bank", sector="Banking", type=CompanyType.FINANCE)


@pytest.fixture
def declining_history() -> List[HistoricalDataPoint]:
    """
    Manufacturer whose growth turned negative and whose margins eroded.

    Recent periods first: revenue shrinking, margins falling from 18% to 1%.
    """
    rows = [
        ("2025", 600, -0.10, 1.0),
        ("2024", 667, -0.08, 2.0),
        ("2023", 725, -0.05, 4.0),
        ("2022", 763, 0.02, 12.0),
        ("2021", 748, 0.03, 16.0),
        ("2020", 726, 0.04, 18.0),
    ]
    return [make_point(*row) for row in rows]


@pytest.fixture
def manufacturer_company() -> CompanyInfo:
    return CompanyInfo(name="Sample Industries", sector="Manufacturing", type=CompanyType.NON_FINANCE)


# ============================================================
# STATEMENT FIXTURES
# ============================================================

@pytest.fixture
def emami_statements() -> List[FinancialStatement]:
    """Emami FY2025 lines consistent with the published ratios, plus FY2024."""
    return [
        FinancialStatement(
            period="2025",
            revenue=4776,
            net_income=902.7,
            operating_profit=1084.2,
            shareholders_equity=3029,
            total_assets=4400,
            current_assets=2100,
            current_liabilities=1200,
        ),
        FinancialStatement(period="2024", revenue=4488, net_income=801.0),
    ]


@pytest.fixture
def manufacturer_statement() -> FinancialStatement:
    """
    Annual manufacturer statement with round daily figures.

    Daily sales 10 and daily costs 8 over a 365-day period.
    """
    return FinancialStatement(
        period="2025",
        revenue=3650,
        net_income=365,
        operating_profit=730,
        other_income=70,
        expenses=2920,
        interest_expense=100,
        total_assets=5000,
        fixed_assets=2500,
        current_assets=2000,
        current_liabilities=1000,
        inventory=480,
        receivables=400,
        payables=240,
        shareholders_equity=2500,
        debt=1250,
        operating_cash_flow=547.5,
    )


@pytest.fixture
def bank_statements() -> List[FinancialStatement]:
    """Bank statements without the bank-specific lines."""
    return [
        FinancialStatement(period="2025", revenue=1000, net_income=200, total_assets=10000,
                           shareholders_equity=1200, current_assets=6600, debt=8000),
        FinancialStatement(period="2024", revenue=900, net_income=180, total_assets=9000,
                           shareholders_equity=1100, current_assets=6000, debt=7000),
    ]


# ============================================================
# VALIDATION FIXTURES
# ============================================================

@pytest.fixture
def tolerances() -> Tolerances:
    return Tolerances(strict=0.001, normal=0.01, loose=0.05)


@pytest.fixture
def emami_expected_ratios() -> dict:
    """Published Emami ratios."""
    return {"roe": 0.298, "netProfitMargin": 0.189, "operatingProfitMargin": 0.227}


@pytest.fixture
def accurate_ratios() -> dict:
    """Computed ratios within 1% of the published values."""
    return {"roe": 0.299, "netProfitMargin": 0.190, "operatingProfitMargin": 0.228}


@pytest.fixture
def inaccurate_ratios() -> dict:
    """Computed ratios far from the published values."""
    return {"roe": 0.50, "netProfitMargin": 0.05, "operatingProfitMargin": -0.10}


@pytest.fixture
def emami_benchmarks(emami_company, emami_expected_ratios, accurate_ratios, tolerances) -> ValidationTarget:
    return ValidationTarget(
        companyInfo=emami_company,
        expectedRatios=emami_expected_ratios,
        tolerances=tolerances,
        actualRatios=accurate_ratios,
    )


@pytest.fixture
def data_source(emami_history, declining_history) -> InMemoryDataSource:
    return InMemoryDataSource({
        "emami": emami_history,
        "sample-industries": declining_history,
        "new-listing": [],
    })
