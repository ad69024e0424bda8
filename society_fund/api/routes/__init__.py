"""
API Routes Package

Contains all route modules for the society fund API.
"""

from .expenses import router as expenses_router
from .funds import router as funds_router
from .reports import router as reports_router

__all__ = [
    "expenses_router",
    "funds_router",
    "reports_router",
]
