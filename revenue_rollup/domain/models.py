"""Domain models for per-click records and their rollups."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence


MI_ADVERTISER = "MI"
CM_GMAIL_ADVERTISER = "CM Gmail"
OTHER_ADVERTISER = "Other"

# Creative rollups are scoped to one campaign (listing ETs) or one ET (listing campaigns).
SCOPE_CAMPAIGN = "campaign"
SCOPE_TAG = "tag"

# MI token bounded by underscores or the identifier edges, e.g. JG_225_MI_P24.
_MI_SUBID_RE = re.compile(r"(?:^|_)MI(?:_|$)", re.IGNORECASE)
CM_SUBID_MARKERS: tuple[str, ...] = ("CM", "JSG36")


@dataclass(frozen=True)
class Record:
    """One valid CSV data row after identifier decoding and attribution."""

    subid: str
    revenue: float
    campaign: str
    creative: str
    tag: str
    advertiser: str
    source_file: str
    conversion_count: float | None = None

    @property
    def tag_key(self) -> str:
        return self.tag.strip().upper()

    @property
    def weight(self) -> float:
        if self.conversion_count is None:
            return 1.0
        return self.conversion_count

    @property
    def is_mi(self) -> bool:
        return bool(_MI_SUBID_RE.search(self.subid))

    @property
    def is_cm_gmail(self) -> bool:
        return any(marker in self.subid for marker in CM_SUBID_MARKERS)

    @property
    def effective_advertiser(self) -> str:
        """Advertiser used by every advertiser rollup; MI records only count under MI."""
        if self.is_mi:
            return MI_ADVERTISER
        return self.advertiser


@dataclass(frozen=True)
class ProcessedBatch:
    records: tuple[Record, ...] = ()
    campaigns: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()
    creatives: frozenset[str] = frozenset()
    advertisers: frozenset[str] = frozenset()
    source_file: str = ""

    @classmethod
    def from_records(cls, records: Sequence[Record], source_file: str = "") -> "ProcessedBatch":
        return cls(
            records=tuple(records),
            campaigns=frozenset(record.campaign for record in records),
            tags=frozenset(record.tag for record in records),
            creatives=frozenset(record.creative for record in records),
            advertisers=frozenset(record.advertiser for record in records),
            source_file=source_file,
        )

    @property
    def total_revenue(self) -> float:
        return sum(record.revenue for record in self.records)


def combine_batches(batches: Iterable[ProcessedBatch]) -> ProcessedBatch:
    """Concatenate records and union the name sets of several batches."""
    records: list[Record] = []
    campaigns: set[str] = set()
    tags: set[str] = set()
    creatives: set[str] = set()
    advertisers: set[str] = set()
    for batch in batches:
        records.extend(batch.records)
        campaigns.update(batch.campaigns)
        tags.update(batch.tags)
        creatives.update(batch.creatives)
        advertisers.update(batch.advertisers)
    return ProcessedBatch(
        records=tuple(records),
        campaigns=frozenset(campaigns),
        tags=frozenset(tags),
        creatives=frozenset(creatives),
        advertisers=frozenset(advertisers),
    )


@dataclass(frozen=True)
class CreativeStats:
    name: str
    frequency: float
    revenue: float
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class CampaignStats:
    name: str
    revenue: float
    creatives: tuple[CreativeStats, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class CombinedTag:
    """Overlay kept on a merged tag: which tags were merged and what each earned."""

    sources: tuple[str, ...]
    source_revenue: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class TagStats:
    name: str
    revenue: float
    creatives: tuple[CreativeStats, ...] = ()
    campaigns: tuple[str, ...] = ()
    advertisers: Mapping[str, float] = field(default_factory=dict)
    advertisers_ranked: tuple[tuple[str, float], ...] = ()
    combined: CombinedTag | None = None

    @property
    def is_combined(self) -> bool:
        return self.combined is not None


@dataclass(frozen=True)
class AdvertiserStats:
    name: str
    revenue: float
    campaigns: tuple[str, ...] = ()
    frequency: float = 0


@dataclass(frozen=True)
class RevenueAnalytics:
    total_revenue: float
    advertisers: tuple[AdvertiserStats, ...] = ()
    campaigns: tuple[CampaignStats, ...] = ()
    tags: tuple[TagStats, ...] = ()

    def campaign(self, name: str) -> CampaignStats | None:
        return next((item for item in self.campaigns if item.name == name), None)

    def tag(self, name: str) -> TagStats | None:
        key = name.strip().upper()
        return next((item for item in self.tags if item.name == key), None)

    def advertiser(self, name: str) -> AdvertiserStats | None:
        return next((item for item in self.advertisers if item.name == name), None)
