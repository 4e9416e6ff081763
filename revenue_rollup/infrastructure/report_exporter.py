"""Delimited-text exports for record sets and creative rollups."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

import polars as pl
from loguru import logger

from revenue_rollup.domain.models import SCOPE_CAMPAIGN, SCOPE_TAG, Record


RECORD_HEADERS: list[str] = ["SUBID", "Campaign", "Creative", "ET", "Revenue", "Advertiser", "Source File"]
CAMPAIGN_CREATIVE_HEADERS: list[str] = ["Creative Name", "Frequency", "Total Revenue", "ETs", "Advertisers"]
TAG_CREATIVE_HEADERS: list[str] = ["Creative Name", "Frequency", "Total Revenue", "Campaigns", "Advertisers"]
MULTI_VALUE_SEPARATOR = "; "


def plain_number(value: float | int) -> str:
    """Render numbers without thousands separators or a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def join_values(values: Iterable[Any]) -> str:
    return MULTI_VALUE_SEPARATOR.join(str(value) for value in values)


def _to_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    frame = pl.DataFrame(
        [list(row) for row in rows],
        schema={header: pl.Utf8 for header in headers},
        orient="row",
    )
    return frame.write_csv()


def records_csv(records: Sequence[Record]) -> str:
    """One row per record; MI records are attributed to MI."""
    rows = [
        [
            record.subid,
            record.campaign,
            record.creative,
            record.tag,
            plain_number(record.revenue),
            record.effective_advertiser,
            record.source_file,
        ]
        for record in records
    ]
    return _to_csv(RECORD_HEADERS, rows)


def creatives_csv(rollup: pl.DataFrame, scope: str) -> str:
    """Serialize a creative rollup frame (creative, frequency, revenue, related, advertisers).

    ``related`` holds ETs for a campaign scope and campaigns for an ET scope.
    """
    headers = CAMPAIGN_CREATIVE_HEADERS if scope == SCOPE_CAMPAIGN else TAG_CREATIVE_HEADERS
    rows = [
        [
            row["creative"],
            plain_number(row["frequency"]),
            plain_number(row["revenue"]),
            join_values(row["related"]),
            join_values(row["advertisers"]),
        ]
        for row in rollup.iter_rows(named=True)
    ]
    return _to_csv(headers, rows)


def records_export_name(campaign: str | None = None, tag: str | None = None) -> str:
    suffix = campaign or tag or "all"
    return f"campaign_data_{suffix}.csv"


def creatives_export_name(scope_name: str) -> str:
    return f"{scope_name}_creatives.csv"


def save_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Saved {}", path)
    return path


def save_records_export(
    output_dir: Path,
    records: Sequence[Record],
    campaign: str | None = None,
    tag: str | None = None,
) -> Path:
    return save_text(output_dir / records_export_name(campaign, tag), records_csv(records))


def save_creatives_export(output_dir: Path, rollup: pl.DataFrame, scope: str, scope_name: str) -> Path:
    if scope not in (SCOPE_CAMPAIGN, SCOPE_TAG):
        raise ValueError(f"Unknown creative export scope: {scope}")
    return save_text(output_dir / creatives_export_name(scope_name), creatives_csv(rollup, scope))


def save_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved {}", path)
