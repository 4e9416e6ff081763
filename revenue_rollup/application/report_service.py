"""Report use case: load reports, aggregate, summarize and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, Iterable, List, Sequence

import polars as pl
from loguru import logger

from revenue_rollup.application.aggregation import aggregate
from revenue_rollup.application.search import search_creatives, search_total_revenue
from revenue_rollup.application.selection import (
    SCOPE_CAMPAIGN,
    SCOPE_TAG,
    campaign_tag_breakdown,
    creative_rollup,
    filter_records,
    tag_campaign_breakdown,
)
from revenue_rollup.config import Settings
from revenue_rollup.domain.models import ProcessedBatch, RevenueAnalytics, TagStats
from revenue_rollup.domain.reference import ReferenceTables
from revenue_rollup.domain.tags import DEFAULT_TAG_PAIRS, TagPair
from revenue_rollup.domain.targets import TargetRevenueResolver
from revenue_rollup.infrastructure.csv_repository import UploadResult, load_reports
from revenue_rollup.infrastructure.excel_repository import save_output_workbook
from revenue_rollup.infrastructure.report_exporter import (
    MULTI_VALUE_SEPARATOR,
    save_creatives_export,
    save_records_export,
    save_summary_json,
)


@dataclass(frozen=True)
class ReportResult:
    summary: Dict[str, Any]
    analytics: RevenueAnalytics
    upload: UploadResult
    outputs: Dict[str, Path] = field(default_factory=dict)


def milestone_reached(total_revenue: float, settings: Settings) -> bool:
    return total_revenue >= settings.milestone_threshold


def _tag_row(tag: TagStats, resolver: TargetRevenueResolver, total_revenue: float) -> Dict[str, Any]:
    info = resolver.tables.tag_info_for(tag.name)
    row: Dict[str, Any] = {
        "name": tag.name,
        "revenue": tag.revenue,
        "target_revenue": resolver.display(tag.name, total_revenue),
        "stack": info.stack if info else None,
        "manager": info.manager if info else None,
        "type": info.type if info else None,
        "campaigns": list(tag.campaigns),
        "advertisers": [{"name": name, "revenue": revenue} for name, revenue in tag.advertisers_ranked],
        "top_creatives": [
            {"name": creative.name, "frequency": creative.frequency, "revenue": creative.revenue}
            for creative in tag.creatives[:5]
        ],
    }
    if tag.combined is not None:
        row["combined_from"] = dict(tag.combined.source_revenue)
    return row


def build_summary(
    batch: ProcessedBatch,
    analytics: RevenueAnalytics,
    resolver: TargetRevenueResolver,
    settings: Settings,
) -> Dict[str, Any]:
    total_revenue = analytics.total_revenue
    return {
        "record_count": len(batch.records),
        "total_revenue": total_revenue,
        "counts": {
            "campaigns": len(analytics.campaigns),
            "tags": len(analytics.tags),
            "creatives": len(batch.creatives),
            "advertisers": len(analytics.advertisers),
        },
        "target": {
            "threshold": resolver.threshold,
            "multiplier": resolver.multiplier_for(total_revenue),
            "total_target_revenue": resolver.total_target(total_revenue),
        },
        "milestone_reached": milestone_reached(total_revenue, settings),
        "advertisers": [
            {"name": item.name, "revenue": item.revenue, "frequency": item.frequency, "campaigns": list(item.campaigns)}
            for item in analytics.advertisers
        ],
        "campaigns": [
            {
                "name": item.name,
                "revenue": item.revenue,
                "tags": list(item.tags),
                "creative_count": len(item.creatives),
            }
            for item in analytics.campaigns
        ],
        "tags": [_tag_row(item, resolver, total_revenue) for item in analytics.tags],
    }


def _join(values: Iterable[Any]) -> str:
    return MULTI_VALUE_SEPARATOR.join(str(value) for value in values)


def _stats_sheets(analytics: RevenueAnalytics) -> Dict[str, pl.DataFrame]:
    campaign_rows: List[Dict[str, Any]] = [
        {"campaign": item.name, "revenue": item.revenue, "tags": _join(item.tags), "creatives": len(item.creatives)}
        for item in analytics.campaigns
    ]
    tag_rows: List[Dict[str, Any]] = [
        {
            "tag": item.name,
            "revenue": item.revenue,
            "campaigns": _join(item.campaigns),
            "advertisers": _join(name for name, _ in item.advertisers_ranked),
        }
        for item in analytics.tags
    ]
    advertiser_rows: List[Dict[str, Any]] = [
        {"advertiser": item.name, "revenue": item.revenue, "frequency": item.frequency, "campaigns": _join(item.campaigns)}
        for item in analytics.advertisers
    ]
    creative_rows: List[Dict[str, Any]] = [
        {
            "campaign": campaign.name,
            "creative": creative.name,
            "frequency": creative.frequency,
            "revenue": creative.revenue,
            "tags": _join(creative.tags),
        }
        for campaign in analytics.campaigns
        for creative in campaign.creatives
    ]

    def _frame(rows: List[Dict[str, Any]], columns: List[str]) -> pl.DataFrame:
        if not rows:
            return pl.DataFrame({col: [] for col in columns})
        return pl.DataFrame(rows).select(columns)

    return {
        "campaigns": _frame(campaign_rows, ["campaign", "revenue", "tags", "creatives"]),
        "tags": _frame(tag_rows, ["tag", "revenue", "campaigns", "advertisers"]),
        "advertisers": _frame(advertiser_rows, ["advertiser", "revenue", "frequency", "campaigns"]),
        "creatives": _frame(creative_rows, ["campaign", "creative", "frequency", "revenue", "tags"]),
    }


def _search_summary(query: str, batch: ProcessedBatch) -> Dict[str, Any]:
    groups = search_creatives(query, batch.records)
    return {
        "query": query,
        "total_revenue": search_total_revenue(groups),
        "results": [
            {
                "creative": group.creative,
                "revenue": group.total_revenue,
                "frequency": group.frequency,
                "campaigns": sorted(group.campaigns),
                "tags": sorted(group.tags),
                "advertisers": sorted(group.advertisers),
            }
            for group in groups or []
        ],
    }


def run_report(
    paths: Sequence[str | Path],
    settings: Settings,
    tables: ReferenceTables,
    campaign: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    tag_pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS,
    write_outputs: bool = True,
) -> ReportResult:
    """Run the whole upload -> rollup -> export flow for a set of report files."""
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    upload = load_reports(paths)
    batch = upload.combined()
    _mark("load_reports")

    analytics = aggregate(batch.records, tag_pairs)
    resolver = TargetRevenueResolver(
        tables,
        threshold=settings.target_threshold,
        multiplier=settings.target_multiplier,
    )
    _mark("aggregate")

    summary = build_summary(batch, analytics, resolver, settings)
    summary["files"] = [item.source_file for item in upload.batches]
    summary["rejected_files"] = [{"file": error.file_name, "message": error.message} for error in upload.errors]
    if campaign:
        summary["campaign_breakdown"] = {
            "campaign": campaign,
            "tags": campaign_tag_breakdown(batch.records, campaign),
        }
    if tag:
        summary["tag_breakdown"] = {
            "tag": tag,
            "campaigns": tag_campaign_breakdown(batch.records, tag, tag_pairs),
        }
    if search:
        summary["search"] = _search_summary(search, batch)
    _mark("build_summary")

    outputs: Dict[str, Path] = {}
    if write_outputs and not upload.batches:
        logger.warning("No report loaded; outputs not written")
    elif write_outputs:
        output_dir = settings.output_dir
        selected = filter_records(batch.records, campaign=campaign, tag=tag, pairs=tag_pairs)
        outputs["records_csv"] = save_records_export(output_dir, selected, campaign=campaign, tag=tag)
        if campaign:
            campaign_records = filter_records(batch.records, campaign=campaign)
            outputs["campaign_creatives_csv"] = save_creatives_export(
                output_dir, creative_rollup(campaign_records, SCOPE_CAMPAIGN), SCOPE_CAMPAIGN, campaign
            )
        if tag:
            tag_records = filter_records(batch.records, tag=tag, pairs=tag_pairs)
            outputs["tag_creatives_csv"] = save_creatives_export(
                output_dir, creative_rollup(tag_records, SCOPE_TAG), SCOPE_TAG, tag
            )

        summary_path = output_dir / "summary.json"
        save_summary_json(summary_path, summary)
        outputs["summary_json"] = summary_path

        excel_path = output_dir / "summary.xlsx"
        excel_saved, excel_error_message = save_output_workbook(excel_path, _stats_sheets(analytics))
        if excel_saved:
            outputs["summary_xlsx"] = excel_path
        else:
            logger.warning("Excel save skipped (file may be open/locked): {}", excel_error_message)
        _mark("save_outputs")

    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    logger.info(
        "Report prepared: files={}, records={}, total_revenue={:.2f}",
        len(upload.batches),
        len(batch.records),
        analytics.total_revenue,
    )
    logger.debug("Stage timing: {}", stage_text)
    return ReportResult(summary=summary, analytics=analytics, upload=upload, outputs=outputs)
