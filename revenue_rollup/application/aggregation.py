"""Single-pass campaign / ET / creative / advertiser rollup."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Sequence

from revenue_rollup.domain.models import (
    CM_GMAIL_ADVERTISER,
    AdvertiserStats,
    CampaignStats,
    CombinedTag,
    CreativeStats,
    Record,
    RevenueAnalytics,
    TagStats,
)
from revenue_rollup.domain.tags import DEFAULT_TAG_PAIRS, TagPair


def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


@dataclass
class _CreativeBucket:
    name: str
    frequency: float = 0
    revenue: float = 0.0
    tags: list[str] = field(default_factory=list)

    def add(self, record: Record) -> None:
        self.frequency += record.weight
        self.revenue += record.revenue
        _append_unique(self.tags, record.tag_key)

    def merge(self, other: "_CreativeBucket") -> None:
        self.frequency += other.frequency
        self.revenue += other.revenue
        for tag in other.tags:
            _append_unique(self.tags, tag)

    def copy(self) -> "_CreativeBucket":
        return _CreativeBucket(self.name, self.frequency, self.revenue, list(self.tags))

    def freeze(self) -> CreativeStats:
        return CreativeStats(name=self.name, frequency=self.frequency, revenue=self.revenue, tags=tuple(self.tags))


def _freeze_creatives(buckets: Iterable[_CreativeBucket]) -> tuple[CreativeStats, ...]:
    ordered = sorted(buckets, key=lambda bucket: -bucket.frequency)
    return tuple(bucket.freeze() for bucket in ordered)


@dataclass
class _CampaignBucket:
    name: str
    revenue: float = 0.0
    tags: list[str] = field(default_factory=list)
    creatives: dict[str, _CreativeBucket] = field(default_factory=dict)

    def add(self, record: Record) -> None:
        self.revenue += record.revenue
        _append_unique(self.tags, record.tag_key)
        self.creatives.setdefault(record.creative, _CreativeBucket(record.creative)).add(record)

    def freeze(self) -> CampaignStats:
        return CampaignStats(
            name=self.name,
            revenue=self.revenue,
            creatives=_freeze_creatives(self.creatives.values()),
            tags=tuple(self.tags),
        )


@dataclass
class _TagBucket:
    name: str
    revenue: float = 0.0
    campaigns: list[str] = field(default_factory=list)
    advertisers: dict[str, float] = field(default_factory=dict)
    creatives: dict[str, _CreativeBucket] = field(default_factory=dict)
    combined: CombinedTag | None = None

    def add(self, record: Record) -> None:
        self.revenue += record.revenue
        _append_unique(self.campaigns, record.campaign)
        advertiser = record.effective_advertiser
        self.advertisers[advertiser] = self.advertisers.get(advertiser, 0.0) + record.revenue
        self.creatives.setdefault(record.creative, _CreativeBucket(record.creative)).add(record)

    def freeze(self) -> TagStats:
        ranked = sorted(self.advertisers.items(), key=lambda item: -item[1])
        return TagStats(
            name=self.name,
            revenue=self.revenue,
            creatives=_freeze_creatives(self.creatives.values()),
            campaigns=tuple(self.campaigns),
            advertisers=MappingProxyType(dict(self.advertisers)),
            advertisers_ranked=tuple(ranked),
            combined=self.combined,
        )


@dataclass
class _AdvertiserBucket:
    name: str
    revenue: float = 0.0
    frequency: float = 0
    campaigns: list[str] = field(default_factory=list)

    def add(self, record: Record) -> None:
        self.revenue += record.revenue
        self.frequency += record.weight
        _append_unique(self.campaigns, record.campaign)

    def freeze(self) -> AdvertiserStats:
        return AdvertiserStats(
            name=self.name,
            revenue=self.revenue,
            campaigns=tuple(self.campaigns),
            frequency=self.frequency,
        )


def _merge_tag_buckets(
    name: str,
    sources: Sequence[_TagBucket],
    extra: Sequence[_TagBucket] = (),
) -> _TagBucket:
    """Merge source ET buckets into one combined bucket; shared creatives are summed.

    ``extra`` buckets are folded into the totals but not listed as sources.
    """
    merged = _TagBucket(
        name=name,
        combined=CombinedTag(
            sources=tuple(source.name for source in sources),
            source_revenue=MappingProxyType({source.name: source.revenue for source in sources}),
        ),
    )
    for source in (*sources, *extra):
        merged.revenue += source.revenue
        for campaign in source.campaigns:
            _append_unique(merged.campaigns, campaign)
        for advertiser, revenue in source.advertisers.items():
            merged.advertisers[advertiser] = merged.advertisers.get(advertiser, 0.0) + revenue
        for creative_name, creative in source.creatives.items():
            existing = merged.creatives.get(creative_name)
            if existing is None:
                merged.creatives[creative_name] = creative.copy()
            else:
                existing.merge(creative)
    return merged


def _combine_tag_buckets(
    buckets: dict[str, _TagBucket],
    pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS,
) -> dict[str, _TagBucket]:
    """Return a new ET map where each configured pair present in full is replaced by its merge."""
    combined: dict[str, _TagBucket] = dict(buckets)
    for pair in pairs:
        primary = pair.primary.upper()
        secondary = pair.secondary.upper()
        if primary not in combined or secondary not in combined:
            continue
        name = pair.name.upper()
        # A raw ET spelled like the combined name joins the merge.
        raw = [combined.pop(name)] if name in combined else []
        merged = _merge_tag_buckets(name, [combined.pop(primary), combined.pop(secondary)], raw)
        combined[merged.name] = merged
    return combined


def _cm_gmail_bucket(records: Sequence[Record]) -> _AdvertiserBucket | None:
    bucket = _AdvertiserBucket(CM_GMAIL_ADVERTISER)
    for record in records:
        if record.is_cm_gmail:
            bucket.add(record)
    if bucket.revenue > 0:
        return bucket
    return None


def aggregate(records: Sequence[Record], tag_pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS) -> RevenueAnalytics:
    """Build campaign, ET, advertiser and nested creative stats from scratch.

    Every record lands in one campaign bucket, one ET bucket (keyed by the
    upper-cased tag) and one advertiser bucket (its effective advertiser).
    ``CM Gmail`` is an extra overlay summed on top of the regular buckets.
    """
    advertisers: dict[str, _AdvertiserBucket] = {}
    cm_bucket = _cm_gmail_bucket(records)
    if cm_bucket is not None:
        advertisers[cm_bucket.name] = cm_bucket

    campaigns: dict[str, _CampaignBucket] = {}
    tags: dict[str, _TagBucket] = {}
    total_revenue = 0.0

    for record in records:
        total_revenue += record.revenue
        advertiser = record.effective_advertiser
        advertisers.setdefault(advertiser, _AdvertiserBucket(advertiser)).add(record)
        campaigns.setdefault(record.campaign, _CampaignBucket(record.campaign)).add(record)
        tags.setdefault(record.tag_key, _TagBucket(record.tag_key)).add(record)

    tags = _combine_tag_buckets(tags, tag_pairs)

    return RevenueAnalytics(
        total_revenue=total_revenue,
        advertisers=tuple(
            bucket.freeze() for bucket in sorted(advertisers.values(), key=lambda bucket: -bucket.revenue)
        ),
        campaigns=tuple(bucket.freeze() for bucket in sorted(campaigns.values(), key=lambda bucket: -bucket.revenue)),
        tags=tuple(bucket.freeze() for bucket in sorted(tags.values(), key=lambda bucket: -bucket.revenue)),
    )
