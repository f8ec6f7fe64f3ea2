"""
Service Module

Report catalogue that ties the match store to the analytics core.
"""

from matchlog.service.reports import (
    CATEGORIES,
    REPORTS,
    ReportContext,
    ReportDefinition,
    ReportResult,
    ReportService,
    UnknownReportError,
)

__all__ = [
    "CATEGORIES",
    "REPORTS",
    "ReportContext",
    "ReportDefinition",
    "ReportResult",
    "ReportService",
    "UnknownReportError",
]
