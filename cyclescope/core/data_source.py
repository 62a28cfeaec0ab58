"""
Historical data source abstraction.

The cycle detector never reaches for a global client. Callers hand it a
HistoricalDataSource, which in production wraps the financial-data service
layer (e.g. a FinancialDataService.getByCompanyId equivalent) and in tests
is an InMemoryDataSource.

Usage:
    from cyclescope.core.data_source import InMemoryDataSource

    source = InMemoryDataSource({"emami": emami_history})
    history = source.get_history("emami")
"""

import logging
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from cyclescope.core.exceptions import UnknownCompanyError
from cyclescope.models.schemas import HistoricalDataPoint

logger = logging.getLogger(__name__)


@runtime_checkable
class HistoricalDataSource(Protocol):
    """Supplies per-company financial history, most recent period first."""

    def get_history(self, company_id: str) -> List[HistoricalDataPoint]:
        ...


class InMemoryDataSource:
    """
    Dictionary-backed data source.

    Histories are copied on the way in and on the way out so callers cannot
    mutate the stored sequence.
    """

    def __init__(self, histories: Optional[Dict[str, Iterable[HistoricalDataPoint]]] = None):
        self._histories: Dict[str, List[HistoricalDataPoint]] = {}
        for company_id, history in (histories or {}).items():
            self.put_history(company_id, history)

    def put_history(self, company_id: str, history: Iterable[HistoricalDataPoint]) -> None:
        self._histories[company_id] = list(history)
        logger.debug(f"Stored {len(self._histories[company_id])} periods for {company_id}")

    def get_history(self, company_id: str) -> List[HistoricalDataPoint]:
        if company_id not in self._histories:
            raise UnknownCompanyError(company_id)
        return list(self._histories[company_id])
