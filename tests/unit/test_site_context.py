"""Tests for the site-context message builder."""

from dataclasses import replace

from plannera.core.types import InstrumentMetadata, LepParseResult, SiteContext, ZoneRecord
from plannera.pipeline.site_context import build_site_context_message, build_site_summary

EXPECTED_RU1_BLOCK = (
    "Byron Local Environmental Plan 2014\n"
    "RU1 – Primary Production\n"
    "Zone objectives: To encourage sustainable primary industry\n"
    "Permitted without consent: environmental protection works, home occupations\n"
    "Permitted with consent: dwelling houses, horticulture, intensive livestock agriculture\n"
    "Prohibited: industry, retail premises"
)


class TestBuildSiteContextMessage:
    def test_exact_block(self, byron_site, byron_lep):
        assert build_site_context_message(byron_site, byron_lep) == EXPECTED_RU1_BLOCK

    def test_en_dash_header(self, byron_site, byron_lep):
        message = build_site_context_message(byron_site, byron_lep)
        assert "RU1 – Primary Production" in message.splitlines()

    def test_empty_categories_omitted(self, byron_site, byron_lep):
        zone = byron_lep.zones[0]
        zone.zone_objectives = []
        zone.permitted_without_consent = []
        message = build_site_context_message(byron_site, byron_lep)
        assert message == (
            "Byron Local Environmental Plan 2014\n"
            "RU1 – Primary Production\n"
            "Permitted with consent: dwelling houses, horticulture, intensive livestock agriculture\n"
            "Prohibited: industry, retail premises"
        )
        assert "None" not in message

    def test_blank_entries_dropped(self, byron_site, byron_lep):
        byron_lep.zones[0].prohibited = ["  ", "industry "]
        assert build_site_context_message(byron_site, byron_lep).endswith("Prohibited: industry")

    def test_missing_instrument_name_omits_line(self, byron_site, byron_lep):
        byron_lep.metadata.instrument_name = None
        assert build_site_context_message(byron_site, byron_lep).splitlines()[0] == "RU1 – Primary Production"

    def test_zone_without_name(self, byron_site):
        lep = LepParseResult(metadata=InstrumentMetadata(), zones=[ZoneRecord(zone_code="RU1")])
        assert build_site_context_message(byron_site, lep) == "RU1"

    def test_lowercase_site_code(self, byron_site, byron_lep):
        site = replace(byron_site, zoning_code="ru1")
        assert build_site_context_message(site, byron_lep) == EXPECTED_RU1_BLOCK

    def test_falls_back_to_zone_field(self, byron_site, byron_lep):
        site = replace(byron_site, zoning_code=None, zone="RU1")
        assert build_site_context_message(site, byron_lep) == EXPECTED_RU1_BLOCK

    def test_no_match_returns_none(self, byron_site, byron_lep):
        site = replace(byron_site, zoning_code="R2", zone="R2")
        assert build_site_context_message(site, byron_lep) is None

    def test_no_lep_data_returns_none(self, byron_site):
        assert build_site_context_message(byron_site, None) is None

    def test_no_site_returns_none(self, byron_lep):
        assert build_site_context_message(None, byron_lep) is None

    def test_no_zoning_code_returns_none(self, byron_lep):
        site = SiteContext(formatted_address="1 Jonson St, Byron Bay NSW")
        assert build_site_context_message(site, byron_lep) is None


class TestBuildSiteSummary:
    def test_includes_site_and_lep_block(self, byron_site, byron_lep):
        summary = build_site_summary(byron_site, byron_lep)
        assert "The current project site is: 123 Sample St, Byron Bay NSW." in summary
        assert "LGA: Byron Shire." in summary
        assert "Zoning: RU1 – Primary Production (nsw-planning-portal)." in summary
        assert "Local Environmental Plan (LEP) context:" in summary
        assert summary.endswith(EXPECTED_RU1_BLOCK)

    def test_without_lep_data(self, byron_site):
        summary = build_site_summary(byron_site)
        assert "Zoning: RU1 – Primary Production" in summary
        assert "LEP" not in summary.split("\n")[-1]
        assert "Local Environmental Plan (LEP) context:" not in summary

    def test_zoning_unavailable(self):
        site = SiteContext(formatted_address="1 Jonson St, Byron Bay NSW")
        summary = build_site_summary(site)
        assert "Zoning is not available yet." in summary
        assert "LGA:" not in summary

    def test_zone_only(self):
        site = SiteContext(formatted_address="1 Jonson St, Byron Bay NSW", zone="B2")
        assert "Zoning: B2." in build_site_summary(site)

    def test_no_site(self):
        assert build_site_summary(None) is None
