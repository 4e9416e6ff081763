"""Infrastructure adapter that reads report CSV files into batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from loguru import logger

from revenue_rollup.domain.models import ProcessedBatch, combine_batches
from revenue_rollup.ingestion import CsvFormatError, parse_report_text


@dataclass(frozen=True)
class FileError:
    file_name: str
    message: str


@dataclass(frozen=True)
class UploadResult:
    """Per-file outcome of one upload; a rejected file never blocks the others."""

    batches: tuple[ProcessedBatch, ...] = ()
    errors: tuple[FileError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    def combined(self) -> ProcessedBatch:
        return combine_batches(self.batches)


def read_report_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Input CSV file not found: {path}")
    # utf-8-sig drops the BOM some exporters prepend to the SUBID header.
    return path.read_text(encoding="utf-8-sig")


def load_report(path: str | Path) -> ProcessedBatch:
    csv_path = Path(path)
    return parse_report_text(read_report_text(csv_path), csv_path.name)


def load_reports(paths: Sequence[str | Path]) -> UploadResult:
    batches: list[ProcessedBatch] = []
    errors: list[FileError] = []
    for path in paths:
        csv_path = Path(path)
        try:
            batch = load_report(csv_path)
        except (CsvFormatError, FileNotFoundError, UnicodeDecodeError) as exc:
            logger.warning("Rejected {}: {}", csv_path.name, exc)
            errors.append(FileError(file_name=csv_path.name, message=str(exc)))
            continue
        logger.info("Loaded {}: {} records", csv_path.name, len(batch.records))
        batches.append(batch)
    return UploadResult(batches=tuple(batches), errors=tuple(errors))
