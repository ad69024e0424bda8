"""
FastAPI dependencies.

The store and configuration are created once in the application lifespan and
kept on ``app.state``; handlers receive them through ``Depends``.
"""

from fastapi import Depends, Request

from ..config import SocietyConfig
from ..ledger.store import EntryStore
from ..reporting.service import ReportService


def get_store(request: Request) -> EntryStore:
    """Get the process-wide entry store."""
    return request.app.state.store


def get_config(request: Request) -> SocietyConfig:
    """Get the society configuration."""
    return request.app.state.config


def get_report_service(
    store: EntryStore = Depends(get_store),
    config: SocietyConfig = Depends(get_config),
) -> ReportService:
    """Get a report service for one render cycle."""
    return ReportService(store, config)
