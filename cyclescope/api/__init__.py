"""
Cycle Scope API package initialization.

This package contains FastAPI router modules:
- cycles: Cycle indicators, classification and detection
- ratios: Financial ratio calculation
- validation: Accuracy validation, cross-source reconciliation, reports and
  benchmarks
"""

from fastapi import APIRouter

from cyclescope.api.cycles import router as cycles_router
from cyclescope.api.ratios import router as ratios_router
from cyclescope.api.validation import router as validation_router

api_router = APIRouter()

# Each router carries its own prefix
api_router.include_router(cycles_router)
api_router.include_router(ratios_router)
api_router.include_router(validation_router)

__all__ = [
    "api_router",
    "cycles_router",
    "ratios_router",
    "validation_router",
]
