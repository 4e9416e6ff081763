"""Campaign/ET selection filters and drill-down breakdowns."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import polars as pl

from revenue_rollup.domain.models import SCOPE_CAMPAIGN, SCOPE_TAG, Record
from revenue_rollup.domain.tags import DEFAULT_TAG_PAIRS, TagPair, resolve_tag_selection
from revenue_rollup.ingestion import records_frame


TOP_CREATIVES = 6


def filter_records(
    records: Sequence[Record],
    campaign: str | None = None,
    tag: str | None = None,
    pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS,
) -> list[Record]:
    """Records of one campaign and/or one ET; a combined ET selects both constituents."""
    selected = list(records)
    if campaign:
        selected = [record for record in selected if record.campaign == campaign]
    if tag:
        keys = resolve_tag_selection(tag, pairs)
        selected = [record for record in selected if record.tag_key in keys]
    return selected


def creative_rollup(records: Sequence[Record], scope: str) -> pl.DataFrame:
    """Per-creative frequency/revenue with ETs (campaign scope) or campaigns (ET scope)."""
    if scope not in (SCOPE_CAMPAIGN, SCOPE_TAG):
        raise ValueError(f"Unknown creative rollup scope: {scope}")
    related = "tag_key" if scope == SCOPE_CAMPAIGN else "campaign"
    frame = records_frame(records)
    return (
        frame.group_by("creative", maintain_order=True)
        .agg(
            [
                pl.col("weight").sum().alias("frequency"),
                pl.col("revenue").sum().alias("revenue"),
                pl.col(related).unique(maintain_order=True).alias("related"),
                pl.col("effective_advertiser").unique(maintain_order=True).alias("advertisers"),
            ]
        )
        .sort("revenue", descending=True, maintain_order=True)
    )


def _breakdown(frame: pl.DataFrame, by: str, top_creatives: int) -> List[Dict[str, Any]]:
    if frame.is_empty():
        return []

    totals = (
        frame.group_by(by, maintain_order=True)
        .agg([pl.col("revenue").sum().alias("revenue"), pl.col("weight").sum().alias("frequency")])
        .sort("revenue", descending=True, maintain_order=True)
    )
    creatives = (
        frame.group_by([by, "creative"], maintain_order=True)
        .agg([pl.col("weight").sum().alias("frequency"), pl.col("revenue").sum().alias("revenue")])
        .sort("frequency", descending=True, maintain_order=True)
    )

    rows: List[Dict[str, Any]] = []
    for total in totals.iter_rows(named=True):
        scoped = creatives.filter(pl.col(by) == pl.lit(total[by])).head(top_creatives)
        rows.append(
            {
                "name": total[by],
                "revenue": total["revenue"],
                "frequency": total["frequency"],
                "creatives": scoped.select(["creative", "frequency", "revenue"]).to_dicts(),
            }
        )
    return rows


def campaign_tag_breakdown(
    records: Sequence[Record],
    campaign: str,
    top_creatives: int = TOP_CREATIVES,
) -> List[Dict[str, Any]]:
    """ETs inside one campaign with their revenue and most frequent creatives."""
    frame = records_frame(records).filter(pl.col("campaign") == pl.lit(campaign))
    return _breakdown(frame, "tag_key", top_creatives)


def tag_campaign_breakdown(
    records: Sequence[Record],
    tag: str,
    pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS,
    top_creatives: int = TOP_CREATIVES,
) -> List[Dict[str, Any]]:
    """Campaigns inside one ET (or combined ET) with their revenue and most frequent creatives."""
    keys = sorted(resolve_tag_selection(tag, pairs))
    frame = records_frame(records).filter(pl.col("tag_key").is_in(keys))
    return _breakdown(frame, "campaign", top_creatives)
