"""Target revenue lookup per ET with the high-volume multiplier."""

from __future__ import annotations

import re

from revenue_rollup.config import DEFAULT_TARGET_MULTIPLIER, DEFAULT_TARGET_THRESHOLD
from revenue_rollup.domain.reference import ReferenceTables


NOT_AVAILABLE = "NA"
_HAS_LETTER_RE = re.compile(r"[A-Za-z]")
_HAS_DIGIT_RE = re.compile(r"\d")
_NUMERIC_TARGET_RE = re.compile(r"^[\s$,]*\d[\d\s$,]*(?:\.\d+)?\s*$")
_CLEAN_DOLLAR_RE = re.compile(r"^\$[\d,]+(?:\.\d+)?$")
_TAG_REFERENCE_RE = re.compile(r"^[A-Z]+\d+$", re.IGNORECASE)


def parse_target_amount(value: str) -> float | None:
    text = str(value or "").strip()
    if not _NUMERIC_TARGET_RE.match(text):
        return None
    cleaned = text.replace("$", "").replace(",", "").replace(" ", "")
    try:
        return float(cleaned)
    except ValueError:
        return None


def format_target(value: float | str) -> str:
    if isinstance(value, str):
        return value
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


class TargetRevenueResolver:
    """Resolve configured target revenue for ET names.

    Tag-reference values such as ``CM41 -> JSG41`` are returned verbatim and
    never followed.
    """

    def __init__(
        self,
        tables: ReferenceTables,
        threshold: float = DEFAULT_TARGET_THRESHOLD,
        multiplier: float = DEFAULT_TARGET_MULTIPLIER,
    ) -> None:
        self.tables = tables
        self.threshold = threshold
        self.multiplier = multiplier

    def multiplier_for(self, total_revenue: float) -> float:
        return self.multiplier if total_revenue >= self.threshold else 1

    def resolve(self, tag_name: str, total_revenue: float) -> float | str:
        raw = self.tables.raw_target(tag_name)
        if raw is None:
            return NOT_AVAILABLE
        # Letters (a tag reference or a label) or no digits at all: show as configured.
        if _HAS_LETTER_RE.search(raw) or not _HAS_DIGIT_RE.search(raw):
            return raw
        amount = parse_target_amount(raw)
        if amount is None:
            return raw
        return amount * self.multiplier_for(total_revenue)

    def display(self, tag_name: str, total_revenue: float) -> str:
        return format_target(self.resolve(tag_name, total_revenue))

    def total_target(self, total_revenue: float) -> float:
        """Sum clean ``$amount`` targets, skipping tag references, then apply the multiplier."""
        total = 0.0
        for value in self.tables.target_revenue.values():
            text = value.strip()
            if _TAG_REFERENCE_RE.match(text):
                continue
            if not _CLEAN_DOLLAR_RE.match(text):
                continue
            total += float(text.replace("$", "").replace(",", ""))
        return total * self.multiplier_for(total_revenue)
