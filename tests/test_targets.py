import pytest

from revenue_rollup.domain.reference import ReferenceTables
from revenue_rollup.domain.targets import (
    NOT_AVAILABLE,
    TargetRevenueResolver,
    format_target,
    parse_target_amount,
)


@pytest.fixture
def resolver():
    tables = ReferenceTables.from_mapping(
        {
            "target_revenue": {
                "JSG26": "$1,800",
                "JSG43": "$750",
                "CM41": "JSG41",
                "JSG41": "$1100",
                "jsg22": "0",
                "LABEL": "TBD",
                "SPLIT": "12.5",
            },
            "tag_info": {},
        }
    )
    return TargetRevenueResolver(tables)


def test_multiplier_applies_from_threshold(resolver):
    assert resolver.display("JSG26", 41_000) == "12,600"
    assert resolver.display("JSG26", 40_000) == "12,600"
    assert resolver.display("JSG26", 39_000) == "1,800"


def test_tag_reference_returned_verbatim(resolver):
    assert resolver.resolve("CM41", 50_000) == "JSG41"


def test_letters_only_value_returned_verbatim(resolver):
    assert resolver.resolve("LABEL", 50_000) == "TBD"


def test_missing_tag_is_not_available(resolver):
    assert resolver.resolve("JSG99", 0) == NOT_AVAILABLE
    assert resolver.resolve("  ", 0) == NOT_AVAILABLE


def test_lookup_is_case_insensitive(resolver):
    assert resolver.resolve("jsg43", 0) == 750.0
    assert resolver.resolve("JSG22", 0) == 0.0


def test_combined_name_resolves_through_first_constituent(resolver):
    assert resolver.display("JSG41+CM41", 41_000) == "7,700"


def test_fractional_amounts_keep_two_decimals(resolver):
    assert resolver.display("SPLIT", 0) == "12.50"


def test_total_target_sums_clean_dollar_values(resolver):
    assert resolver.total_target(10_000) == 1800 + 750 + 1100
    assert resolver.total_target(45_000) == (1800 + 750 + 1100) * 7


def test_total_target_on_default_tables():
    resolver = TargetRevenueResolver(ReferenceTables.default())

    assert resolver.total_target(0) == 17_550
    assert resolver.total_target(40_000) == 122_850


def test_custom_threshold_and_multiplier():
    tables = ReferenceTables.from_mapping({"target_revenue": {"JSG26": "$100"}, "tag_info": {}})
    resolver = TargetRevenueResolver(tables, threshold=1_000, multiplier=2)

    assert resolver.resolve("JSG26", 999) == 100
    assert resolver.resolve("JSG26", 1_000) == 200


def test_parse_target_amount():
    assert parse_target_amount("$1,800") == 1800.0
    assert parse_target_amount(" $ 1 100 ") == 1100.0
    assert parse_target_amount("JSG41") is None
    assert parse_target_amount("") is None


def test_format_target():
    assert format_target(12600.0) == "12,600"
    assert format_target(1234.5) == "1,234.50"
    assert format_target("NA") == "NA"
