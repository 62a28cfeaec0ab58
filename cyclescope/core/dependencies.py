"""
FastAPI dependency injection module for the Cycle Scope service.

This module provides reusable FastAPI dependencies for configuration access
and the historical data source, enabling loose coupling between endpoint
handlers and the collaborators that feed them.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_data_source: Returns the process-local HistoricalDataSource
- SettingsDep: Type alias for injecting Settings into endpoints
- DataSourceDep: Type alias for injecting the data source into endpoints

Tests replace the data source through app.dependency_overrides:

    app.dependency_overrides[get_data_source] = lambda: InMemoryDataSource({...})
"""

from typing import Annotated

from fastapi import Depends

from cyclescope.core.config import Settings, get_settings
from cyclescope.core.data_source import HistoricalDataSource, InMemoryDataSource


# Empty until a deployment registers histories or overrides the dependency
_default_source = InMemoryDataSource()


def get_settings_dependency() -> Settings:
    """
    Return the application settings for injection into endpoints.

    Returns:
        Settings: Cached settings instance
    """
    return get_settings()


def get_data_source() -> HistoricalDataSource:
    """
    Return the historical data source used by company-scoped endpoints.

    Returns:
        HistoricalDataSource: The process-local in-memory source
    """
    return _default_source


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
DataSourceDep = Annotated[HistoricalDataSource, Depends(get_data_source)]
