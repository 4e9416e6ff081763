import pytest

from revenue_rollup.application.aggregation import aggregate
from revenue_rollup.domain.tags import TagPair


def test_revenue_totals_match_records(sample_records):
    analytics = aggregate(sample_records)
    expected = sum(record.revenue for record in sample_records)

    assert analytics.total_revenue == pytest.approx(expected)
    assert sum(item.revenue for item in analytics.campaigns) == pytest.approx(expected)
    assert sum(item.revenue for item in analytics.tags) == pytest.approx(expected)


def test_top_level_arrays_sorted_by_revenue(sample_records):
    analytics = aggregate(sample_records)

    for items in (analytics.campaigns, analytics.tags, analytics.advertisers):
        revenues = [item.revenue for item in items]
        assert revenues == sorted(revenues, reverse=True)


def test_tags_are_grouped_upper_case(make_record):
    analytics = aggregate([make_record("SQLI_AC2_jsg43", 10.0), make_record("SQLI_AC2_JSG43", 5.0)])

    assert [tag.name for tag in analytics.tags] == ["JSG43"]
    assert analytics.tag("jsg43").revenue == 15.0


def test_combined_tag_replaces_its_sources(sample_records):
    analytics = aggregate(sample_records)
    names = [tag.name for tag in analytics.tags]

    assert "JSG41+CM41" in names
    assert "JSG41" not in names
    assert "CM41" not in names

    combined = analytics.tag("JSG41+CM41")
    assert combined.is_combined
    assert combined.revenue == pytest.approx(200.0)
    assert combined.combined.sources == ("JSG41", "CM41")
    assert dict(combined.combined.source_revenue) == {"JSG41": 160.0, "CM41": 40.0}


def test_combined_tag_merges_shared_creatives(sample_records):
    combined = aggregate(sample_records).tag("JSG41+CM41")
    creatives = {creative.name: creative for creative in combined.creatives}

    assert creatives["SQLI_AC2"].revenue == pytest.approx(140.0)
    assert creatives["SQLI_AC2"].frequency == 2
    assert creatives["SQLI_AC2"].tags == ("JSG41", "CM41")
    assert creatives["SQLI_BN7"].frequency == 3
    # frequency descending
    assert [creative.name for creative in combined.creatives] == ["SQLI_BN7", "SQLI_AC2"]


def test_pair_with_missing_source_is_not_combined(make_record):
    analytics = aggregate([make_record("NADR_IMG1_JSG32", 10.0)])

    assert [tag.name for tag in analytics.tags] == ["JSG32"]
    assert not analytics.tags[0].is_combined


def test_custom_tag_pairs(make_record):
    records = [make_record("NADR_IMG1_JSG26", 10.0), make_record("NADR_IMG2_JSG29", 5.0)]

    analytics = aggregate(records, tag_pairs=(TagPair("JSG26", "JSG29"),))

    assert [tag.name for tag in analytics.tags] == ["JSG26+JSG29"]
    assert analytics.tags[0].revenue == 15.0


def test_mi_records_only_count_under_mi(make_record):
    records = [
        make_record("JG_225_MI_P24", 30.0, "DB 0612.csv"),
        make_record("JG_225_P24", 20.0, "DB 0612.csv"),
    ]

    analytics = aggregate(records)

    assert analytics.advertiser("MI").revenue == 30.0
    assert analytics.advertiser("DB").revenue == 20.0
    assert dict(analytics.tag("P24").advertisers) == {"DB": 20.0, "MI": 30.0}
    assert analytics.tag("P24").advertisers_ranked == (("MI", 30.0), ("DB", 20.0))


def test_mi_token_needs_underscore_boundaries(make_record):
    record = make_record("MIAMI_IMG_JSG26", 10.0, "DB 0612.csv")

    assert not record.is_mi
    assert aggregate([record]).advertiser("DB").revenue == 10.0


def test_cm_gmail_overlay(make_record):
    records = [
        make_record("SQLI_AC2_CM41", 40.0, "report.csv"),
        make_record("NADR_IMG1_JSG36", 10.0, "report.csv"),
        make_record("NADR_IMG1_JSG26", 5.0, "report.csv"),
    ]

    analytics = aggregate(records)
    cm_gmail = analytics.advertiser("CM Gmail")

    assert cm_gmail.revenue == 50.0
    assert cm_gmail.frequency == 2
    # overlay on top of the regular buckets
    assert analytics.advertiser("Other").revenue == 55.0


def test_cm_gmail_absent_without_matching_revenue(make_record):
    analytics = aggregate([make_record("NADR_IMG1_JSG26", 5.0), make_record("SQLI_cm_JSG26", 3.0)])

    assert analytics.advertiser("CM Gmail") is None


def test_campaign_creatives_sorted_by_frequency(make_record):
    records = [
        make_record("SQLI_AC2_JSG43", 100.0),
        make_record("SQLI_AC3_JSG43", 1.0),
        make_record("SQLI_AC3_JSG43", 1.0),
    ]

    campaign = aggregate(records).campaign("SQLI")

    assert [creative.name for creative in campaign.creatives] == ["SQLI_AC3", "SQLI_AC2"]
    assert campaign.creatives[0].frequency == 2
    assert campaign.tags == ("JSG43",)


def test_advertiser_collects_distinct_campaigns(make_record):
    records = [
        make_record("SQLI_AC2_JSG43", 1.0, "GZ.csv"),
        make_record("NADR_IMG1_JSG43", 1.0, "GZ.csv"),
        make_record("SQLI_AC3_JSG43", 1.0, "GZ.csv"),
    ]

    assert aggregate(records).advertiser("GZ").campaigns == ("SQLI", "NADR")


def test_aggregate_is_idempotent(sample_records):
    assert aggregate(sample_records) == aggregate(list(sample_records))


def test_aggregate_empty():
    analytics = aggregate([])

    assert analytics.total_revenue == 0
    assert analytics.campaigns == ()
    assert analytics.tags == ()
    assert analytics.advertisers == ()


def test_raw_tag_spelled_like_combined_name_is_kept(make_record):
    records = [
        make_record("SQLI_AC2_JSG41", 100.0),
        make_record("SQLI_AC2_CM41", 40.0),
        make_record("SQLI_AC9_JSG41+CM41", 7.0),
    ]

    analytics = aggregate(records)
    combined = analytics.tag("JSG41+CM41")

    assert [tag.name for tag in analytics.tags] == ["JSG41+CM41"]
    assert combined.revenue == pytest.approx(147.0)
    assert sum(tag.revenue for tag in analytics.tags) == pytest.approx(analytics.total_revenue)
    assert dict(combined.combined.source_revenue) == {"JSG41": 100.0, "CM41": 40.0}
    assert {creative.name for creative in combined.creatives} == {"SQLI_AC2", "SQLI_AC9"}


def test_raw_combined_spelling_without_both_sources_stays_separate(make_record):
    analytics = aggregate([make_record("SQLI_AC2_JSG41", 100.0), make_record("SQLI_AC9_JSG41+CM41", 7.0)])

    assert [tag.name for tag in analytics.tags] == ["JSG41", "JSG41+CM41"]
    assert not analytics.tag("JSG41+CM41").is_combined
