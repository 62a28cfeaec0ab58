"""
Core infrastructure package for the Cycle Scope service.

Provides:
- Configuration management via pydantic-settings
- The HistoricalDataSource injection point
- FastAPI dependency injection utilities
- Domain exceptions

This module re-exports key components from submodules for convenient importing:

    from cyclescope.core import get_settings, InMemoryDataSource, DataSourceDep
"""

from cyclescope.core.config import Settings, get_settings
from cyclescope.core.data_source import HistoricalDataSource, InMemoryDataSource
from cyclescope.core.dependencies import (
    get_data_source,
    get_settings_dependency,
    DataSourceDep,
    SettingsDep,
)
from cyclescope.core.exceptions import (
    CycleScopeError,
    InsufficientHistoryError,
    UnknownCompanyError,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Data source (from data_source.py)
    'HistoricalDataSource',
    'InMemoryDataSource',
    # FastAPI dependency injection (from dependencies.py)
    'get_data_source',
    'get_settings_dependency',
    'DataSourceDep',
    'SettingsDep',
    # Exceptions (from exceptions.py)
    'CycleScopeError',
    'InsufficientHistoryError',
    'UnknownCompanyError',
]
