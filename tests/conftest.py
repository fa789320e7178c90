"""Shared test fixtures."""

import mlflow
import pytest

from plannera.core.types import InstrumentMetadata, LepParseResult, SiteContext, ZoneRecord

BYRON_LEP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<LEP>
  <EPI_NAME>Byron Local Environmental Plan 2014</EPI_NAME>
  <EPI_TYPE>LEP</EPI_TYPE>
  <LGA_NAME>Byron Shire Council</LGA_NAME>
  <LAND_USE_TABLE>
    <ZONE>
      <ZONE_CODE>RU1</ZONE_CODE>
      <ZONE_NAME>Primary Production</ZONE_NAME>
      <WITHOUT_CONSENT>
        <LAND_USE>Environmental protection works</LAND_USE>
      </WITHOUT_CONSENT>
      <WITH_CONSENT>
        <LAND_USE>Dwelling houses</LAND_USE>
        <LAND_USE>Secondary dwellings</LAND_USE>
      </WITH_CONSENT>
      <PROHIBITED>
        <LAND_USE>Caravan parks</LAND_USE>
        <LAND_USE>Multi dwelling housing</LAND_USE>
      </PROHIBITED>
    </ZONE>
    <ZONE>
      <ZONE_NAME>R2 Low Density Residential</ZONE_NAME>
      <WITH_CONSENT>
        <LAND_USE>Boarding houses</LAND_USE>
      </WITH_CONSENT>
      <PROHIBITED>
        <LAND_USE>Heavy industrial storage establishment</LAND_USE>
      </PROHIBITED>
    </ZONE>
  </LAND_USE_TABLE>
</LEP>"""


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests so nothing is written to mlruns/."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


@pytest.fixture
def byron_xml() -> str:
    return BYRON_LEP_XML


@pytest.fixture
def byron_lep() -> LepParseResult:
    """RU1 with every category populated, as the chat layer sees it."""
    return LepParseResult(
        metadata=InstrumentMetadata(
            lga_name="Byron Shire",
            instrument_name="Byron Local Environmental Plan 2014",
            instrument_type="LEP",
        ),
        zones=[
            ZoneRecord(
                zone_code="RU1",
                zone_name="Primary Production",
                zone_objectives=["To encourage sustainable primary industry"],
                permitted_without_consent=["environmental protection works", "home occupations"],
                permitted_with_consent=["dwelling houses", "horticulture", "intensive livestock agriculture"],
                prohibited=["industry", "retail premises"],
            ),
        ],
    )


@pytest.fixture
def byron_site() -> SiteContext:
    return SiteContext(
        formatted_address="123 Sample St, Byron Bay NSW",
        lga_name="Byron Shire",
        zone="RU1",
        zoning_code="RU1",
        zoning_name="Primary Production",
        zoning_source="nsw-planning-portal",
    )
