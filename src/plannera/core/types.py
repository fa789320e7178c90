"""Domain types for the plannera legislation core.

All shared dataclasses live here so parsers, the zone resolver, the
message builder and the persistence schemas agree on one model.
Every optional field defaults to None or an empty list.
"""

from dataclasses import dataclass, field
from datetime import datetime


# ---------------------------------------------------------------------------
# LEP types
# ---------------------------------------------------------------------------

@dataclass
class InstrumentMetadata:
    """Instrument-level metadata declared in an LEP document."""

    lga_name: str | None = None
    instrument_name: str | None = None
    instrument_type: str | None = None


@dataclass
class ZoneRecord:
    """One zone from an LEP land use table."""

    zone_name: str = ""
    zone_code: str | None = None
    zone_objectives: list[str] = field(default_factory=list)
    permitted_without_consent: list[str] = field(default_factory=list)
    permitted_with_consent: list[str] = field(default_factory=list)
    prohibited: list[str] = field(default_factory=list)


@dataclass
class LepParseResult:
    """Parsed LEP: metadata plus zones in document order."""

    metadata: InstrumentMetadata = field(default_factory=InstrumentMetadata)
    zones: list[ZoneRecord] = field(default_factory=list)


@dataclass
class ZoneMatch:
    """A zone resolved for a site, with the instrument it came from."""

    zone: ZoneRecord
    metadata: InstrumentMetadata


# ---------------------------------------------------------------------------
# DCP types
# ---------------------------------------------------------------------------

@dataclass
class DcpSection:
    """A named section of a Development Control Plan."""

    heading: str
    body: str
    order: int


@dataclass
class DcpParseResult:
    """Parsed DCP text."""

    instrument_name: str | None = None
    sections: list[DcpSection] = field(default_factory=list)
    lga_name: str | None = None


# ---------------------------------------------------------------------------
# Site types
# ---------------------------------------------------------------------------

@dataclass
class SiteContext:
    """The resolved project site, as far as the chat layer needs it."""

    formatted_address: str
    lga_name: str | None = None
    zone: str | None = None
    zoning_code: str | None = None
    zoning_name: str | None = None
    zoning_source: str | None = None


# ---------------------------------------------------------------------------
# Legislation instrument types
# ---------------------------------------------------------------------------

@dataclass
class InstrumentConfig:
    """Where to find a legislative instrument and how to key its clauses."""

    slug: str
    name: str
    short_name: str
    instrument_type: str
    source_url: str
    jurisdiction: str = "NSW"
    xml_source_url: str | None = None
    export_date: str | None = None
    export_path: str | None = None
    clause_prefix: str | None = None
    fixture_file: str | None = None


@dataclass
class ParsedClause:
    """A clause extracted from an instrument's HTML rendition."""

    clause_key: str
    title: str
    body_html: str
    body_text: str
    hierarchy_path: list[str] = field(default_factory=list)
    content_hash: str = ""


@dataclass
class InstrumentFetchResult:
    """Raw instrument document plus where it came from."""

    document: str
    fetched_at: datetime
    status: int
    source_url: str
    used_fixture: bool
    format: str
