"""CSV report ingestion: raw text to decoded records, plus the Polars record frame."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

import polars as pl
from loguru import logger

from revenue_rollup.domain.advertiser import classify_advertiser
from revenue_rollup.domain.models import ProcessedBatch, Record
from revenue_rollup.domain.subid import parse_subid


SUBID_HEADER = "subid"
REVENUE_HEADER = "rev"
CONVERSION_HEADER = "conv"
RECORD_COLUMNS: list[str] = [
    "subid",
    "campaign",
    "creative",
    "tag",
    "tag_key",
    "revenue",
    "advertiser",
    "effective_advertiser",
    "source_file",
    "conversion_count",
    "weight",
]
RECORD_SCHEMA: dict[str, pl.DataType] = {
    "subid": pl.Utf8,
    "campaign": pl.Utf8,
    "creative": pl.Utf8,
    "tag": pl.Utf8,
    "tag_key": pl.Utf8,
    "revenue": pl.Float64,
    "advertiser": pl.Utf8,
    "effective_advertiser": pl.Utf8,
    "source_file": pl.Utf8,
    "conversion_count": pl.Float64,
    "weight": pl.Float64,
}
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class CsvFormatError(ValueError):
    """Raised when a report file lacks the SUBID/REV columns."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"Invalid CSV format in {file_name}. Required columns: SUBID, REV")
        self.file_name = file_name


def parse_leading_number(value: str) -> float | None:
    """Parse the numeric prefix of a cell (``"12.5abc"`` -> 12.5); ``None`` when there is none."""
    match = _LEADING_NUMBER_RE.match(value or "")
    if match is None:
        return None
    return float(match.group(1))


def _header_index(headers: Sequence[str], needle: str) -> int | None:
    return next((idx for idx, header in enumerate(headers) if needle in header), None)


def _conversion_value(values: Sequence[str], conv_index: int | None) -> float | None:
    if conv_index is None or len(values) <= conv_index:
        return None
    cell = values[conv_index].strip()
    if cell == "":
        return None
    return parse_leading_number(cell)


def build_record(subid: str, revenue: float, file_name: str, conversion_count: float | None = None) -> Record:
    parsed = parse_subid(subid)
    if parsed.has_advertiser:
        advertiser = str(parsed.advertiser)
    else:
        advertiser = classify_advertiser(file_name, parsed.campaign, parsed.creative)
    return Record(
        subid=subid,
        revenue=revenue,
        campaign=parsed.campaign,
        creative=parsed.creative,
        tag=parsed.tag,
        advertiser=advertiser,
        source_file=file_name,
        conversion_count=conversion_count,
    )


def parse_report_text(text: str, file_name: str) -> ProcessedBatch:
    """Parse one uploaded report into a batch.

    Short rows, empty SUBIDs and zero or unparseable revenue are dropped
    without error. A file without SUBID/REV headers raises ``CsvFormatError``.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        raise CsvFormatError(file_name)

    headers = [header.strip().lower() for header in lines[0].split(",")]
    subid_index = _header_index(headers, SUBID_HEADER)
    rev_index = _header_index(headers, REVENUE_HEADER)
    conv_index = _header_index(headers, CONVERSION_HEADER)
    if subid_index is None or rev_index is None:
        raise CsvFormatError(file_name)

    min_width = max(subid_index, rev_index) + 1
    records: list[Record] = []
    skipped = 0
    for line in lines[1:]:
        values = [value.strip() for value in line.split(",")]
        if len(values) < min_width:
            skipped += 1
            continue

        subid = values[subid_index]
        revenue = parse_leading_number(values[rev_index]) or 0.0
        if not subid or revenue == 0:
            skipped += 1
            continue

        records.append(build_record(subid, revenue, file_name, _conversion_value(values, conv_index)))

    logger.debug("Parsed {}: {} records, {} rows skipped", file_name, len(records), skipped)
    return ProcessedBatch.from_records(records, source_file=file_name)


def records_frame(records: Iterable[Record]) -> pl.DataFrame:
    """Columnar view of records used by breakdowns and exports."""
    rows = [
        {
            "subid": record.subid,
            "campaign": record.campaign,
            "creative": record.creative,
            "tag": record.tag,
            "tag_key": record.tag_key,
            "revenue": float(record.revenue),
            "advertiser": record.advertiser,
            "effective_advertiser": record.effective_advertiser,
            "source_file": record.source_file,
            "conversion_count": None if record.conversion_count is None else float(record.conversion_count),
            "weight": float(record.weight),
        }
        for record in records
    ]
    if not rows:
        return pl.DataFrame(schema=RECORD_SCHEMA)
    return pl.DataFrame(rows, schema=RECORD_SCHEMA).select(RECORD_COLUMNS)
