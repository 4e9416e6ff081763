from revenue_rollup.domain.subid import (
    FORMAT_PAREN,
    FORMAT_SLASH,
    FORMAT_UNDERSCORE,
    paren_tag_name,
    parse_subid,
)


def test_paren_format_carries_advertiser_and_numbered_tag():
    parsed = parse_subid("XCE/NADR/064IMG(30)")

    assert parsed.format == FORMAT_PAREN
    assert parsed.campaign == "NADR"
    assert parsed.creative == "NADR/064IMG"
    assert parsed.tag == "JSG30PM"
    assert parsed.advertiser == "XC EXC"


def test_paren_tag_names():
    assert paren_tag_name(30) == "JSG30PM"
    assert paren_tag_name(24) == "P24"
    assert paren_tag_name(32) == "JSG32"


def test_paren_format_keeps_unknown_advertiser_token():
    parsed = parse_subid("db/NADR/064IMG(41) ")

    assert parsed.advertiser == "db"
    assert parsed.tag == "JSG41"


def test_slash_format():
    parsed = parse_subid("SQLI/AC2/JSG43")

    assert parsed.format == FORMAT_SLASH
    assert parsed.campaign == "SQLI"
    assert parsed.creative == "SQLI/AC2"
    assert parsed.tag == "JSG43"
    assert not parsed.has_advertiser


def test_slash_format_single_segment_fills_every_field():
    parsed = parse_subid("/ONLY/")

    assert (parsed.campaign, parsed.creative, parsed.tag) == ("ONLY", "ONLY", "ONLY")


def test_underscore_format():
    parsed = parse_subid("CAMP_CREATIVE_TAGX")

    assert parsed.format == FORMAT_UNDERSCORE
    assert parsed.campaign == "CAMP"
    assert parsed.creative == "CAMP_CREATIVE"
    assert parsed.tag == "TAGX"


def test_underscore_format_two_parts():
    parsed = parse_subid("CAMP_TAGX")

    assert (parsed.campaign, parsed.creative, parsed.tag) == ("CAMP", "CAMP", "TAGX")


def test_single_token_fills_every_field():
    parsed = parse_subid("LONELY")

    assert (parsed.campaign, parsed.creative, parsed.tag) == ("LONELY", "LONELY", "LONELY")


def test_rah_campaign_is_rewritten_to_rgr():
    assert parse_subid("RAH_ICO12_JSG20").campaign == "RGR"
    assert parse_subid("RAH/ICO12/JSG20").campaign == "RGR"


def test_rah_alias_is_not_applied_to_paren_format():
    assert parse_subid("DB/RAH/ICO12(20)").campaign == "RAH"
