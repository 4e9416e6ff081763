import json

import pytest

from revenue_rollup.application.selection import SCOPE_CAMPAIGN, SCOPE_TAG, creative_rollup, filter_records
from revenue_rollup.infrastructure.report_exporter import (
    creatives_csv,
    creatives_export_name,
    plain_number,
    records_csv,
    records_export_name,
    save_creatives_export,
    save_records_export,
    save_summary_json,
)


def test_plain_number():
    assert plain_number(1800.0) == "1800"
    assert plain_number(12.5) == "12.5"
    assert plain_number(3) == "3"


def test_records_csv(make_record):
    content = records_csv([make_record("SQLI_AC2_jsg41", 1800.0, "DB 0612.csv")])

    assert content.splitlines() == [
        "SUBID,Campaign,Creative,ET,Revenue,Advertiser,Source File",
        "SQLI_AC2_jsg41,SQLI,SQLI_AC2,jsg41,1800,DB,DB 0612.csv",
    ]


def test_records_csv_reports_mi_records_under_mi(make_record):
    records = [make_record("JG_225_MI_P24", 30.0, "DB 0612.csv"), make_record("MIAMI_IMG_JSG26", 5.0, "DB 0612.csv")]

    exported = records_csv(records).splitlines()
    rolled_up = creatives_csv(creative_rollup(records, SCOPE_CAMPAIGN), SCOPE_CAMPAIGN).splitlines()

    assert exported[1] == "JG_225_MI_P24,JG,JG_225_MI,P24,30,MI,DB 0612.csv"
    assert exported[2].split(",")[5] == "DB"
    assert rolled_up[1] == "JG_225_MI,1,30,P24,MI"


def test_records_csv_empty_has_header_only():
    assert records_csv([]).splitlines() == ["SUBID,Campaign,Creative,ET,Revenue,Advertiser,Source File"]


def test_campaign_creatives_csv(sample_records):
    content = creatives_csv(creative_rollup(filter_records(sample_records, campaign="SQLI"), SCOPE_CAMPAIGN), SCOPE_CAMPAIGN)

    assert content.splitlines() == [
        "Creative Name,Frequency,Total Revenue,ETs,Advertisers",
        "SQLI_AC2,2,140,JSG41; CM41,XC",
        "SQLI_BN7,3,60,JSG41,XC",
    ]


def test_tag_creatives_csv(make_record):
    records = [
        make_record("NADR_IMG1_JSG26", 12.5, "DB 0612.csv"),
        make_record("SQLI_IMG1_JSG26", 5.0, "GZ.csv"),
        make_record("NADR_IMG1_JSG26", 10.0, "GZ.csv"),
    ]

    content = creatives_csv(creative_rollup(records, SCOPE_TAG), SCOPE_TAG)

    assert content.splitlines() == [
        "Creative Name,Frequency,Total Revenue,Campaigns,Advertisers",
        "NADR_IMG1,2,22.5,NADR,DB; GZ",
        "SQLI_IMG1,1,5,SQLI,GZ",
    ]


def test_export_names():
    assert records_export_name() == "campaign_data_all.csv"
    assert records_export_name(campaign="SQLI") == "campaign_data_SQLI.csv"
    assert records_export_name(tag="JSG41+CM41") == "campaign_data_JSG41+CM41.csv"
    assert creatives_export_name("SQLI") == "SQLI_creatives.csv"


def test_save_exports(tmp_path, sample_records):
    records_path = save_records_export(tmp_path, sample_records, tag="JSG26")
    creatives_path = save_creatives_export(tmp_path, creative_rollup(sample_records, SCOPE_TAG), SCOPE_TAG, "JSG26")

    assert records_path.name == "campaign_data_JSG26.csv"
    assert creatives_path.name == "JSG26_creatives.csv"
    assert records_path.read_text(encoding="utf-8").startswith("SUBID,Campaign")


def test_save_creatives_export_rejects_unknown_scope(tmp_path, sample_records):
    with pytest.raises(ValueError):
        save_creatives_export(tmp_path, creative_rollup(sample_records, SCOPE_TAG), "advertiser", "X")


def test_save_summary_json(tmp_path):
    path = tmp_path / "nested" / "summary.json"

    save_summary_json(path, {"total_revenue": 12.5, "tags": ["JSG41+CM41"]})

    assert json.loads(path.read_text(encoding="utf-8")) == {"total_revenue": 12.5, "tags": ["JSG41+CM41"]}
