"""ET tag normalization and the fixed combined-tag pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


COMBINED_TAG_SEPARATOR = "+"


@dataclass(frozen=True)
class TagPair:
    primary: str
    secondary: str

    @property
    def name(self) -> str:
        return f"{self.primary}{COMBINED_TAG_SEPARATOR}{self.secondary}"

    @property
    def sources(self) -> tuple[str, str]:
        return (self.primary, self.secondary)


# Each secondary tag points at its primary in the target-revenue table.
DEFAULT_TAG_PAIRS: tuple[TagPair, ...] = (
    TagPair("JSG41", "CM41"),
    TagPair("JSG36", "C36"),
    TagPair("JSG32", "EX32"),
)


def normalize_tag(tag: str) -> str:
    return str(tag or "").strip().upper()


def is_combined_tag(name: str) -> bool:
    return COMBINED_TAG_SEPARATOR in name


def split_combined_tag(name: str) -> tuple[str, ...]:
    return tuple(normalize_tag(part) for part in name.split(COMBINED_TAG_SEPARATOR) if part.strip())


def resolve_tag_selection(name: str, pairs: Sequence[TagPair] = DEFAULT_TAG_PAIRS) -> frozenset[str]:
    """Return the upper-cased tag keys a selected tag name stands for.

    A combined name resolves to its constituents plus the combined name itself,
    which a raw ET may also carry; any other name resolves to itself.
    """
    key = normalize_tag(name)
    for pair in pairs:
        if normalize_tag(pair.name) == key:
            return frozenset({key, *(normalize_tag(source) for source in pair.sources)})
    if is_combined_tag(key):
        return frozenset({key, *split_combined_tag(key)})
    return frozenset({key})
