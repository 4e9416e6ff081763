"""Application layer package."""

from .aggregation import aggregate
from .report_service import ReportResult, build_summary, run_report
from .search import CreativeSearchGroup, search_creatives, search_total_revenue
from .selection import campaign_tag_breakdown, creative_rollup, filter_records, tag_campaign_breakdown

__all__ = [
    "aggregate",
    "ReportResult",
    "build_summary",
    "run_report",
    "CreativeSearchGroup",
    "search_creatives",
    "search_total_revenue",
    "campaign_tag_breakdown",
    "creative_rollup",
    "filter_records",
    "tag_campaign_breakdown",
]
