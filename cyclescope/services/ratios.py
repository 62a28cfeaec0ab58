"""
Financial Ratio Calculation Service

Computes the ratio sets that the accuracy validator checks against published
benchmarks, from statement lines ordered most recent first.

Ratio sets:
- Universal (every company): ROE, net profit margin, revenue and profit
  growth over 1, 3 and 5 years, asset turnover, debt to equity, P/E, P/B
- Non-finance (manufacturing, FMCG): operating margin, ROCE, debtor,
  inventory and payable days, cash conversion cycle, working capital days,
  interest coverage, current and quick ratios, cash flow margin, asset quality
- Finance (banks, NBFCs): NIM, cost to income, loan and deposit growth,
  non-interest income share, capital adequacy

Conventions:
- Every ratio is a fraction except the day counts, which are days
- A ratio whose denominator is missing, zero or non-finite is 0
- n-year growth compares the latest statement with the one n positions back
  and is a compound annual rate; it is 0 when the history is too short
- Day counts convert period revenue and expenses to daily figures using the
  statement period length (annual by default)

Bank statements rarely split out every line, so missing bank lines are
estimated:
    net interest income = 70% of revenue
    operating expenses  = revenue - net income - 30% tax on net income
    loans               = current assets
    deposits            = 85% of debt
"""

import logging
import math
from typing import Dict, Optional, Sequence

from cyclescope.core.config import get_settings
from cyclescope.models.enums import CompanyType
from cyclescope.models.schemas import (
    FinanceRatios,
    FinancialRatios,
    FinancialStatement,
    MarketData,
    NonFinanceRatios,
    UniversalRatios,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

GROWTH_HORIZONS = (1, 3, 5)

# Bank line estimates
NET_INTEREST_INCOME_SHARE: float = 0.7
ESTIMATED_TAX_RATE: float = 0.3
DEPOSIT_SHARE_OF_DEBT: float = 0.85


# =============================================================================
# Building Blocks
# =============================================================================


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> float:
    """
    numerator / denominator, or 0 when either side is missing or the
    division is undefined.
    """
    if numerator is None or denominator is None:
        return 0.0
    if not (math.isfinite(numerator) and math.isfinite(denominator)) or denominator == 0:
        return 0.0
    return numerator / denominator


def _amount(value: Optional[float]) -> float:
    return value if value is not None and math.isfinite(value) else 0.0


def calculate_revenue_growth(current: float, previous: float, years: int) -> float:
    """
    Revenue growth over a horizon.

    Args:
        current: Latest revenue
        previous: Revenue `years` periods earlier
        years: Horizon; 1 gives simple growth, more gives a CAGR

    Returns:
        Growth as a fraction; -1 when revenue fell to zero, 0 when the
        earlier revenue is not positive or the horizon is empty
    """
    if years <= 0 or previous <= 0:
        return 0.0
    if current <= 0:
        return -1.0
    if years == 1:
        return (current - previous) / previous
    return (current / previous) ** (1 / years) - 1


def calculate_profit_growth(current: float, previous: float, years: int) -> float:
    """
    Profit growth over a horizon, tolerant of losses.

    Growth from zero to a profit counts as 100%. Over multi-year horizons a
    swing from loss to profit is +100% and from profit to loss -100%;
    otherwise the CAGR is taken on absolute values.

    Args:
        current: Latest net income
        previous: Net income `years` periods earlier
        years: Horizon

    Returns:
        Growth as a fraction
    """
    if previous == 0:
        return 1.0 if current > 0 else 0.0
    if years <= 0:
        return 0.0
    if years == 1:
        return (current - previous) / abs(previous)

    if previous < 0 < current:
        return 1.0
    if previous > 0 > current:
        return -1.0
    return (abs(current) / abs(previous)) ** (1 / years) - 1


def calculate_balance_growth(current: Optional[float], previous: Optional[float]) -> float:
    """Period-on-period growth of a balance; -1 when it ran off entirely."""
    if not previous:
        return 0.0
    if not current:
        return -1.0
    return (current - previous) / previous


def calculate_cash_conversion_cycle(debtor_days: float, inventory_days: float, payable_days: float) -> float:
    return debtor_days + inventory_days - payable_days


# =============================================================================
# Ratio Sets
# =============================================================================


def calculate_universal_ratios(
    statements: Sequence[FinancialStatement],
    market: Optional[MarketData] = None
) -> UniversalRatios:
    """
    Ratios common to every company type.

    Args:
        statements: Statements, most recent first
        market: Market data for P/E and P/B; both are 0 without it

    Returns:
        UniversalRatios; all zeros for an empty history
    """
    if not statements:
        return UniversalRatios(**{name: 0.0 for name in UniversalRatios.model_fields})

    latest = statements[0]

    growth: Dict[str, float] = {}
    for years in GROWTH_HORIZONS:
        earlier = statements[years] if len(statements) > years else None
        growth[f"revenueGrowth{years}Y"] = (
            calculate_revenue_growth(latest.revenue, earlier.revenue, years) if earlier is not None else 0.0
        )
        growth[f"profitGrowth{years}Y"] = (
            calculate_profit_growth(latest.net_income, earlier.net_income, years) if earlier is not None else 0.0
        )

    price_to_earnings = safe_divide(market.market_cap, latest.net_income) if market is not None else 0.0
    price_to_book = safe_divide(market.market_cap, latest.shareholders_equity) if market is not None else 0.0

    return UniversalRatios(
        roe=safe_divide(latest.net_income, latest.shareholders_equity),
        netProfitMargin=safe_divide(latest.net_income, latest.revenue),
        assetTurnover=safe_divide(latest.revenue, latest.total_assets),
        debtToEquity=safe_divide(latest.debt, latest.shareholders_equity),
        priceToEarnings=price_to_earnings,
        priceToBook=price_to_book,
        **growth,
    )


def calculate_non_finance_ratios(
    statement: FinancialStatement,
    period_days: int
) -> NonFinanceRatios:
    """
    Manufacturing and FMCG ratios from the latest statement.

    EBIT is operating profit plus other income. Capital employed is total
    assets less current liabilities. Expenses stand in for the cost of goods
    sold in inventory and payable days.

    Args:
        statement: Most recent statement
        period_days: Days covered by the statement

    Returns:
        NonFinanceRatios
    """
    ebit = _amount(statement.operating_profit) + _amount(statement.other_income)
    capital_employed = _amount(statement.total_assets) - _amount(statement.current_liabilities)
    working_capital = _amount(statement.current_assets) - _amount(statement.current_liabilities)

    daily_sales = safe_divide(statement.revenue, period_days)
    daily_costs = safe_divide(statement.expenses, period_days)

    debtor_days = safe_divide(statement.receivables, daily_sales)
    inventory_days = safe_divide(statement.inventory, daily_costs)
    payable_days = safe_divide(statement.payables, daily_costs)

    if statement.current_assets:
        quick_assets = statement.current_assets - _amount(statement.inventory)
        quick_ratio = safe_divide(quick_assets, statement.current_liabilities)
    else:
        quick_ratio = 0.0

    return NonFinanceRatios(
        operatingProfitMargin=safe_divide(statement.operating_profit, statement.revenue),
        returnOnCapitalEmployed=safe_divide(ebit, capital_employed),
        cashConversionCycle=calculate_cash_conversion_cycle(debtor_days, inventory_days, payable_days),
        debtorDays=debtor_days,
        inventoryDays=inventory_days,
        payableDays=payable_days,
        workingCapitalDays=safe_divide(working_capital, daily_sales),
        interestCoverageRatio=safe_divide(ebit, statement.interest_expense),
        currentRatio=safe_divide(statement.current_assets, statement.current_liabilities),
        quickRatio=quick_ratio,
        freeCashFlowMargin=safe_divide(statement.operating_cash_flow, statement.revenue),
        assetQualityRatio=safe_divide(statement.fixed_assets, statement.total_assets),
    )


def _loans(statement: FinancialStatement) -> Optional[float]:
    return statement.loans if statement.loans is not None else statement.current_assets


def _deposits(statement: FinancialStatement) -> Optional[float]:
    if statement.deposits is not None:
        return statement.deposits
    if statement.debt is None:
        return None
    return statement.debt * DEPOSIT_SHARE_OF_DEBT


def calculate_finance_ratios(statements: Sequence[FinancialStatement]) -> FinanceRatios:
    """
    Bank and NBFC ratios.

    Reported bank lines are used as given; missing ones are estimated (see
    the module docstring). Loan and deposit growth compare the two most
    recent statements.

    Args:
        statements: Statements, most recent first

    Returns:
        FinanceRatios; all zeros for an empty history
    """
    if not statements:
        return FinanceRatios(**{name: 0.0 for name in FinanceRatios.model_fields})

    latest = statements[0]
    previous = statements[1] if len(statements) > 1 else None

    if latest.net_interest_income is not None:
        net_interest_income = latest.net_interest_income
        non_interest_income = latest.revenue - latest.net_interest_income
    else:
        net_interest_income = latest.revenue * NET_INTEREST_INCOME_SHARE
        non_interest_income = latest.revenue * (1 - NET_INTEREST_INCOME_SHARE)

    if latest.operating_expenses is not None:
        operating_expenses = latest.operating_expenses
    else:
        operating_expenses = latest.revenue - latest.net_income * (1 + ESTIMATED_TAX_RATE)

    if previous is not None:
        loan_growth = calculate_balance_growth(_loans(latest), _loans(previous))
        deposit_growth = calculate_balance_growth(_deposits(latest), _deposits(previous))
    else:
        loan_growth = 0.0
        deposit_growth = 0.0

    return FinanceRatios(
        netInterestMargin=safe_divide(net_interest_income, latest.total_assets),
        costToIncomeRatio=safe_divide(operating_expenses, latest.revenue),
        loanGrowthRate=loan_growth,
        depositGrowthRate=deposit_growth,
        nonInterestIncomeRatio=safe_divide(non_interest_income, latest.revenue),
        capitalAdequacyRatio=safe_divide(latest.shareholders_equity, latest.total_assets),
    )


# =============================================================================
# Main Entry Points
# =============================================================================


def calculate_financial_ratios(
    statements: Sequence[FinancialStatement],
    company_type: CompanyType,
    market: Optional[MarketData] = None,
    company: Optional[str] = None,
    period_days: Optional[int] = None
) -> FinancialRatios:
    """
    Compute the universal ratios plus the set for the company type.

    Args:
        statements: Statements, most recent first
        company_type: finance or non_finance
        market: Optional market data for the valuation ratios
        company: Company name carried into the result
        period_days: Days per statement (default from settings)

    Returns:
        FinancialRatios with `finance` or `nonFinance` populated
    """
    company_type = CompanyType(company_type)
    if period_days is None:
        period_days = get_settings().ratio_period_days

    if not statements:
        logger.warning(f"No statements for {company or 'company'}; ratios default to zero")

    universal = calculate_universal_ratios(statements, market)

    finance = None
    non_finance = None
    if company_type == CompanyType.FINANCE:
        finance = calculate_finance_ratios(statements)
    elif statements:
        non_finance = calculate_non_finance_ratios(statements[0], period_days)
    else:
        non_finance = NonFinanceRatios(**{name: 0.0 for name in NonFinanceRatios.model_fields})

    ratios = FinancialRatios(
        company=company,
        companyType=company_type,
        period=statements[0].period if statements else None,
        universal=universal,
        nonFinance=non_finance,
        finance=finance,
    )

    logger.debug(
        f"Ratios for {company or 'company'} ({company_type.value}, {len(statements)} periods): "
        f"roe={universal.roe:.4f}, npm={universal.netProfitMargin:.4f}"
    )
    return ratios


def ratio_map(ratios: FinancialRatios) -> Dict[str, float]:
    """
    Flatten a ratio set into metric name -> value, the shape the accuracy
    validator compares.
    """
    metrics = ratios.universal.model_dump()
    if ratios.nonFinance is not None:
        metrics.update(ratios.nonFinance.model_dump())
    if ratios.finance is not None:
        metrics.update(ratios.finance.model_dump())
    return metrics


__all__ = [
    "calculate_financial_ratios",
    "calculate_universal_ratios",
    "calculate_non_finance_ratios",
    "calculate_finance_ratios",
    "calculate_revenue_growth",
    "calculate_profit_growth",
    "calculate_balance_growth",
    "calculate_cash_conversion_cycle",
    "ratio_map",
    "safe_divide",
]
