"""Core domain types shared across all plannera modules."""

from plannera.core.exceptions import (
    InstrumentFetchError,
    InvalidPersistedDocument,
    MalformedDocument,
    PlanneraError,
)
from plannera.core.types import (
    DcpParseResult,
    DcpSection,
    InstrumentConfig,
    InstrumentFetchResult,
    InstrumentMetadata,
    LepParseResult,
    ParsedClause,
    SiteContext,
    ZoneMatch,
    ZoneRecord,
)

__all__ = [
    "DcpParseResult",
    "DcpSection",
    "InstrumentConfig",
    "InstrumentFetchError",
    "InstrumentFetchResult",
    "InstrumentMetadata",
    "InvalidPersistedDocument",
    "LepParseResult",
    "MalformedDocument",
    "ParsedClause",
    "PlanneraError",
    "SiteContext",
    "ZoneMatch",
    "ZoneRecord",
]
