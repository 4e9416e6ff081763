"""ET revenue rollup package."""

from .application import ReportResult, aggregate, run_report, search_creatives
from .config import Settings, load_settings
from .ingestion import CsvFormatError, parse_report_text

__all__ = [
    "ReportResult",
    "aggregate",
    "run_report",
    "search_creatives",
    "Settings",
    "load_settings",
    "CsvFormatError",
    "parse_report_text",
]
