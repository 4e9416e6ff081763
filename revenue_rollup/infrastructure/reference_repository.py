"""Loads reference tables from JSON, falling back to the built-in defaults."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from revenue_rollup.domain.reference import ReferenceTables


def load_reference_tables(path: str | Path | None = None) -> ReferenceTables:
    if path is None:
        return ReferenceTables.default()

    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Reference table file not found: {json_path}")
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Reference table file must contain a JSON object: {json_path}")
    tables = ReferenceTables.from_mapping(payload)
    logger.info(
        "Loaded reference tables from {}: {} targets, {} tag entries",
        json_path,
        len(tables.target_revenue),
        len(tables.tag_info),
    )
    return tables
