"""Creative-name search grouped by creative."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from revenue_rollup.domain.models import Record


@dataclass
class CreativeSearchGroup:
    creative: str
    total_revenue: float = 0.0
    frequency: float = 0
    campaigns: set[str] = field(default_factory=set)
    tags: set[str] = field(default_factory=set)
    advertisers: set[str] = field(default_factory=set)
    records: list[Record] = field(default_factory=list)

    def add(self, record: Record) -> None:
        self.total_revenue += record.revenue
        self.frequency += record.weight
        self.campaigns.add(record.campaign)
        self.tags.add(record.tag_key)
        self.advertisers.add(record.effective_advertiser)
        self.records.append(record)


def search_creatives(query: str, records: Sequence[Record]) -> list[CreativeSearchGroup] | None:
    """Group records whose creative contains ``query`` (case-insensitive).

    Returns ``None`` for a blank query or when nothing matches.
    """
    if not (query or "").strip():
        return None
    needle = query.lower()

    groups: dict[str, CreativeSearchGroup] = {}
    for record in records:
        if needle not in record.creative.lower():
            continue
        groups.setdefault(record.creative, CreativeSearchGroup(record.creative)).add(record)

    if not groups:
        return None
    return sorted(groups.values(), key=lambda group: -group.total_revenue)


def search_total_revenue(groups: Sequence[CreativeSearchGroup] | None) -> float:
    if not groups:
        return 0.0
    return sum(group.total_revenue for group in groups)
