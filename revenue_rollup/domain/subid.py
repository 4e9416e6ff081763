"""SUBID decoding into campaign, creative and ET tag."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace


PAREN_SUBID_RE = re.compile(r"^([^/]+)/([^/]+)/(.+?)\((\d+)\)\s*$", re.IGNORECASE)
PAREN_TAG_NAMES: dict[int, str] = {
    30: "JSG30PM",
    24: "P24",
}
PAREN_TAG_PREFIX = "JSG"
ADVERTISER_ALIASES: dict[str, str] = {"XCE": "XC EXC"}
CAMPAIGN_ALIASES: dict[str, str] = {"RAH": "RGR"}

FORMAT_PAREN = "paren"
FORMAT_SLASH = "slash"
FORMAT_UNDERSCORE = "underscore"


@dataclass(frozen=True)
class ParsedSubid:
    campaign: str
    creative: str
    tag: str
    format: str
    advertiser: str | None = None

    @property
    def has_advertiser(self) -> bool:
        return self.advertiser is not None


def paren_tag_name(number: int) -> str:
    """Map the parenthesized ET number to its tag name: (30)->JSG30PM, (24)->P24, (32)->JSG32."""
    return PAREN_TAG_NAMES.get(number, f"{PAREN_TAG_PREFIX}{number}")


def normalize_advertiser_token(token: str) -> str:
    cleaned = token.strip()
    return ADVERTISER_ALIASES.get(cleaned.upper(), cleaned)


def parse_paren_subid(subid: str) -> ParsedSubid | None:
    match = PAREN_SUBID_RE.match(subid.strip())
    if match is None:
        return None
    advertiser, campaign, creative_suffix, number = match.groups()
    campaign = campaign.strip()
    return ParsedSubid(
        campaign=campaign,
        creative=f"{campaign}/{creative_suffix.strip()}",
        tag=paren_tag_name(int(number)),
        format=FORMAT_PAREN,
        advertiser=normalize_advertiser_token(advertiser),
    )


def parse_slash_subid(subid: str) -> ParsedSubid:
    parts = [part.strip() for part in subid.split("/") if part.strip() != ""]
    if len(parts) >= 2:
        return ParsedSubid(
            campaign=parts[0],
            creative="/".join(parts[:-1]),
            tag=parts[-1],
            format=FORMAT_SLASH,
        )
    whole = parts[0] if parts else subid.strip()
    return ParsedSubid(campaign=whole, creative=whole, tag=whole, format=FORMAT_SLASH)


def parse_underscore_subid(subid: str) -> ParsedSubid:
    parts = subid.split("_")
    if len(parts) >= 3:
        return ParsedSubid(
            campaign=parts[0],
            creative="_".join(parts[:-1]),
            tag=parts[-1],
            format=FORMAT_UNDERSCORE,
        )
    if len(parts) == 2:
        return ParsedSubid(campaign=parts[0], creative=parts[0], tag=parts[1], format=FORMAT_UNDERSCORE)
    return ParsedSubid(campaign=subid, creative=subid, tag=subid, format=FORMAT_UNDERSCORE)


def _apply_campaign_alias(parsed: ParsedSubid) -> ParsedSubid:
    alias = CAMPAIGN_ALIASES.get(parsed.campaign)
    if alias is None:
        return parsed
    return replace(parsed, campaign=alias)


def parse_subid(subid: str) -> ParsedSubid:
    """Decode a SUBID, trying the parenthesized, slash and underscore formats in order.

    Only the parenthesized format carries its own advertiser; the other two
    leave ``advertiser`` unset for the file-name classifier.
    """
    parsed = parse_paren_subid(subid)
    if parsed is not None:
        return parsed
    if "/" in subid:
        return _apply_campaign_alias(parse_slash_subid(subid))
    return _apply_campaign_alias(parse_underscore_subid(subid))
