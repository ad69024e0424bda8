"""
FastAPI Backend for the Society Fund Tracker

Provides REST API endpoints for fund entries, expenses and reports.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
