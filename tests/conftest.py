import pytest

from revenue_rollup.ingestion import build_record


@pytest.fixture
def make_record():
    def _make(subid, revenue, file_name="report.csv", conversion_count=None):
        return build_record(subid, revenue, file_name, conversion_count)

    return _make


@pytest.fixture
def sample_records(make_record):
    return [
        make_record("SQLI_AC2_JSG41", 100.0, "XC CAMPS 0612.csv"),
        make_record("SQLI_AC2_CM41", 40.0, "XC CAMPS 0612.csv"),
        make_record("SQLI_BN7_jsg41", 60.0, "XC CAMPS 0612.csv", conversion_count=3),
        make_record("NADR_064IMG_JSG26", 250.0, "DB 0612.csv"),
        make_record("JG_225_MI_P24", 30.0, "DB 0612.csv"),
        make_record("RAH_ICO12_JSG20", 75.0, "report.csv"),
        make_record("XCE/NADR/064IMG(30)", 500.0, "report.csv"),
    ]

