"""Scheduler command application services."""

from .collector import BrowseResponseCollector, ReceiveTimeouts  # noqa: F401
from .report import render_jobs  # noqa: F401
from .service import BrowseSummary, SchedulerCommandService  # noqa: F401

__all__ = [
    "BrowseResponseCollector",
    "BrowseSummary",
    "ReceiveTimeouts",
    "SchedulerCommandService",
    "render_jobs",
]
