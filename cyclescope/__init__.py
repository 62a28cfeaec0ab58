"""
Cycle Scope Package.

Business-cycle phase detection and calculation validation for equity
financial data. The charts of the dashboard consume the results of this
package as plain data; the historical records are supplied by the caller.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, data source injection, and exceptions
    - models: Pydantic schemas and enums
    - services: Cycle detection and validation logic
"""

__version__ = "1.0.0"
