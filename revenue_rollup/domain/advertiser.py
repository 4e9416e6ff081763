"""Advertiser attribution from source file name, campaign and creative."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from revenue_rollup.domain.models import MI_ADVERTISER, OTHER_ADVERTISER


ICO_ADVERTISER = "ICO"
ICO_CREATIVE_PREFIX = "ICO"
MI_CREATIVE_MARKER = "_MI"
RGR_CAMPAIGNS: tuple[str, ...] = ("RGR", "RAH")


@dataclass(frozen=True)
class AdvertiserContext:
    """Upper-cased inputs every rule reads."""

    file_name: str
    campaign: str
    creative: str

    @classmethod
    def build(cls, file_name: str, campaign: str, creative: str) -> "AdvertiserContext":
        return cls(
            file_name=str(file_name or "").upper(),
            campaign=str(campaign or "").upper(),
            creative=str(creative or "").upper(),
        )


@dataclass(frozen=True)
class AdvertiserRule:
    name: str
    predicate: Callable[[AdvertiserContext], bool]
    outcome: Callable[[AdvertiserContext], str]


def _fixed(advertiser: str) -> Callable[[AdvertiserContext], str]:
    return lambda ctx: advertiser


def _file_contains(*codes: str) -> Callable[[AdvertiserContext], bool]:
    return lambda ctx: any(code in ctx.file_name for code in codes)


def _rgr_or_ico(ctx: AdvertiserContext) -> str:
    if ctx.creative.startswith(ICO_CREATIVE_PREFIX):
        return ICO_ADVERTISER
    return "RGR"


# First match wins. DB must precede XC, and XC EXC/XCE must precede plain XC.
ADVERTISER_RULES: tuple[AdvertiserRule, ...] = (
    AdvertiserRule("mi_creative", lambda ctx: MI_CREATIVE_MARKER in ctx.creative, _fixed(MI_ADVERTISER)),
    AdvertiserRule("db_file", _file_contains("DB"), _fixed("DB")),
    AdvertiserRule("xc_exc_file", _file_contains("XC EXC", "XCE"), _fixed("XC EXC")),
    AdvertiserRule("xc_file", _file_contains("XC CAMPS", "XC"), _fixed("XC")),
    AdvertiserRule("non_comcast_file", _file_contains("NON COMCAST"), _fixed("NON COMCAST")),
    AdvertiserRule("comcast_file", _file_contains("COMCAST"), _fixed("COMCAST")),
    AdvertiserRule("branded_file", _file_contains("BRANDED"), _fixed("Branded")),
    AdvertiserRule("gz_file", _file_contains("GZ"), _fixed("GZ")),
    AdvertiserRule("rgr_file", _file_contains("RGR"), _rgr_or_ico),
    AdvertiserRule("es_file_or_campaign", lambda ctx: "ES" in ctx.file_name or "ES" in ctx.campaign, _fixed("ES")),
    AdvertiserRule("rgr_campaign", lambda ctx: ctx.campaign in RGR_CAMPAIGNS, _rgr_or_ico),
)


def classify_advertiser(
    file_name: str,
    campaign: str,
    creative: str,
    rules: Sequence[AdvertiserRule] = ADVERTISER_RULES,
) -> str:
    """Return the advertiser of the first matching rule, or ``Other``."""
    ctx = AdvertiserContext.build(file_name, campaign, creative)
    for rule in rules:
        if rule.predicate(ctx):
            return rule.outcome(ctx)
    return OTHER_ADVERTISER
