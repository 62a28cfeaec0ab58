"""
Domain exceptions for Cycle Scope.

Expected data conditions (short histories, missing metrics, outlier sources)
are reported inside results. These exceptions cover caller misuse only.
"""

from typing import Optional


class CycleScopeError(Exception):
    """Base class for all Cycle Scope errors."""


class UnknownCompanyError(CycleScopeError):
    """Raised when a data source has no record of the requested company."""

    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Unknown company: {company_id}")


class InsufficientHistoryError(CycleScopeError):
    """Raised when a company exists but has no historical periods at all."""

    def __init__(self, company_id: str, periods: int = 0, detail: Optional[str] = None):
        self.company_id = company_id
        self.periods = periods
        message = detail or f"No historical data for company {company_id}"
        super().__init__(message)
