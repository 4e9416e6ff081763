"""Domain layer package."""

from .advertiser import ADVERTISER_RULES, classify_advertiser
from .models import (
    AdvertiserStats,
    CampaignStats,
    CombinedTag,
    CreativeStats,
    ProcessedBatch,
    Record,
    RevenueAnalytics,
    TagStats,
    combine_batches,
)
from .reference import ReferenceTables, TagInfo
from .subid import ParsedSubid, parse_subid
from .tags import DEFAULT_TAG_PAIRS, TagPair, normalize_tag, resolve_tag_selection
from .targets import NOT_AVAILABLE, TargetRevenueResolver

__all__ = [
    "ADVERTISER_RULES",
    "classify_advertiser",
    "AdvertiserStats",
    "CampaignStats",
    "CombinedTag",
    "CreativeStats",
    "ProcessedBatch",
    "Record",
    "RevenueAnalytics",
    "TagStats",
    "combine_batches",
    "ReferenceTables",
    "TagInfo",
    "ParsedSubid",
    "parse_subid",
    "DEFAULT_TAG_PAIRS",
    "TagPair",
    "normalize_tag",
    "resolve_tag_selection",
    "NOT_AVAILABLE",
    "TargetRevenueResolver",
]
