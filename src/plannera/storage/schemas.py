"""Pydantic models for LEP, DCP and clause documents as persisted on a project.

Projects store parsed legislation as JSON (camelCase keys, the shape the
web app reads). These models are the contract for that JSON. They are
decoupled from the domain dataclasses, and we bridge the two with the
dump/load functions below. Loading validates; anything that does not fit
raises InvalidPersistedDocument.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from plannera.core.exceptions import InvalidPersistedDocument
from plannera.core.types import (
    DcpParseResult,
    DcpSection,
    InstrumentMetadata,
    LepParseResult,
    ParsedClause,
    ZoneRecord,
)

SCHEMA_VERSION = 1


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class InstrumentMetadataDocument(_Document):
    lga_name: str | None = None
    instrument_name: str | None = None
    instrument_type: str | None = None

    @field_validator("lga_name", "instrument_name", "instrument_type")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        # Older rows stored "" for unknown metadata
        return v if v and v.strip() else None


class ZoneDocument(_Document):
    zone_code: str | None = None
    zone_name: str = ""
    zone_objectives: list[str] = Field(default_factory=list)
    permitted_without_consent: list[str] = Field(default_factory=list)
    permitted_with_consent: list[str] = Field(default_factory=list)
    prohibited: list[str] = Field(default_factory=list)

    @field_validator(
        "zone_objectives", "permitted_without_consent", "permitted_with_consent", "prohibited",
        mode="before",
    )
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v


class LepDocument(_Document):
    schema_version: int = SCHEMA_VERSION
    metadata: InstrumentMetadataDocument = Field(default_factory=InstrumentMetadataDocument)
    zones: list[ZoneDocument] = Field(default_factory=list)


class DcpSectionDocument(_Document):
    heading: str
    body: str = ""
    order: int | None = None


class DcpDocument(_Document):
    schema_version: int = SCHEMA_VERSION
    instrument_name: str | None = None
    lga_name: str | None = None
    sections: list[DcpSectionDocument] = Field(default_factory=list)


def _validate(model: type[_Document], payload, kind: str):
    if not isinstance(payload, dict):
        raise InvalidPersistedDocument(kind, [f"expected an object, got {type(payload).__name__}"])
    try:
        doc = model.model_validate(payload)
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise InvalidPersistedDocument(kind, errors) from e
    if doc.schema_version != SCHEMA_VERSION:
        raise InvalidPersistedDocument(kind, [f"unsupported schemaVersion {doc.schema_version}"])
    return doc


# ---------------------------------------------------------------------------
# LEP
# ---------------------------------------------------------------------------

def dump_lep_data(result: LepParseResult) -> dict:
    """Serialise a parse result to its persisted JSON shape."""
    doc = LepDocument(
        metadata=InstrumentMetadataDocument(
            lga_name=result.metadata.lga_name,
            instrument_name=result.metadata.instrument_name,
            instrument_type=result.metadata.instrument_type,
        ),
        zones=[
            ZoneDocument(
                zone_code=z.zone_code,
                zone_name=z.zone_name,
                zone_objectives=list(z.zone_objectives),
                permitted_without_consent=list(z.permitted_without_consent),
                permitted_with_consent=list(z.permitted_with_consent),
                prohibited=list(z.prohibited),
            )
            for z in result.zones
        ],
    )
    return doc.model_dump(by_alias=True)


def load_lep_data(payload: dict) -> LepParseResult:
    """Validate persisted LEP JSON and rebuild the domain result.

    Raises:
        InvalidPersistedDocument: payload does not match the LEP schema.
    """
    doc = _validate(LepDocument, payload, "LEP")
    return LepParseResult(
        metadata=InstrumentMetadata(**doc.metadata.model_dump()),
        zones=[ZoneRecord(**z.model_dump()) for z in doc.zones],
    )


# ---------------------------------------------------------------------------
# DCP
# ---------------------------------------------------------------------------

def dump_dcp_data(result: DcpParseResult) -> dict:
    doc = DcpDocument(
        instrument_name=result.instrument_name,
        lga_name=result.lga_name,
        sections=[DcpSectionDocument(heading=s.heading, body=s.body, order=s.order) for s in result.sections],
    )
    return doc.model_dump(by_alias=True)


def load_dcp_data(payload: dict) -> DcpParseResult:
    """Validate persisted DCP JSON. Rows written before `order` existed get list position."""
    doc = _validate(DcpDocument, payload, "DCP")
    return DcpParseResult(
        instrument_name=doc.instrument_name,
        lga_name=doc.lga_name,
        sections=[
            DcpSection(heading=s.heading, body=s.body, order=s.order if s.order is not None else i)
            for i, s in enumerate(doc.sections)
        ],
    )


# ---------------------------------------------------------------------------
# Clauses
# ---------------------------------------------------------------------------

class ClauseDocument(_Document):
    clause_key: str
    title: str
    body_html: str = ""
    body_text: str = ""
    hierarchy_path: list[str] = Field(default_factory=list)
    content_hash: str


class ClauseSetDocument(_Document):
    schema_version: int = SCHEMA_VERSION
    clauses: list[ClauseDocument] = Field(default_factory=list)


def dump_clause_data(clauses: list[ParsedClause]) -> dict:
    doc = ClauseSetDocument(
        clauses=[
            ClauseDocument(
                clause_key=c.clause_key,
                title=c.title,
                body_html=c.body_html,
                body_text=c.body_text,
                hierarchy_path=list(c.hierarchy_path),
                content_hash=c.content_hash,
            )
            for c in clauses
        ],
    )
    return doc.model_dump(by_alias=True)


def load_clause_data(payload: dict) -> list[ParsedClause]:
    """Validate persisted clause JSON.

    Raises:
        InvalidPersistedDocument: payload does not match the clause schema.
    """
    doc = _validate(ClauseSetDocument, payload, "clause")
    return [ParsedClause(**c.model_dump()) for c in doc.clauses]
