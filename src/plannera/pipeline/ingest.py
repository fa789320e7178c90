"""Ingestion service: fetch → parse → validate → persisted JSON.

Parsers are pure and never log. Parse failures are logged and traced
here, then re-raised to the caller.
"""

import logging
import time
import uuid

from plannera.core.exceptions import MalformedDocument
from plannera.core.types import InstrumentConfig, ParsedClause
from plannera.ingestion.clause_parser import parse_instrument_document
from plannera.ingestion.dcp_parser import parse_dcp_text
from plannera.ingestion.fetcher import fetch_instrument_document
from plannera.ingestion.lep_parser import parse_lep_xml
from plannera.observability.logging import correlation_id, get_correlation_id
from plannera.observability.tracing import start_span, trace
from plannera.storage.schemas import dump_clause_data, dump_dcp_data, dump_lep_data

logger = logging.getLogger(__name__)


@trace(name="ingest_lep_xml", span_type="PARSER")
def ingest_lep_xml(xml_text: str, instrument: str | None = None) -> dict:
    """Parse LEP XML into its persisted JSON shape.

    Raises:
        MalformedDocument: the XML could not be parsed at all (logged here).
    """
    t0 = time.monotonic()
    try:
        result = parse_lep_xml(xml_text)
    except MalformedDocument as e:
        logger.warning("LEP parse failed: %s", e, extra={"instrument": instrument, "step": "parse_lep"})
        raise

    unnamed = sum(1 for z in result.zones if not z.zone_code)
    if unnamed:
        logger.warning(
            "%d zone(s) without a code in %s", unnamed, result.metadata.instrument_name or instrument,
            extra={"instrument": instrument},
        )

    logger.info(
        "Parsed LEP %s: %d zones",
        result.metadata.instrument_name or instrument or "<unnamed>",
        len(result.zones),
        extra={
            "instrument": result.metadata.instrument_name or instrument,
            "zones": len(result.zones),
            "duration_ms": round((time.monotonic() - t0) * 1000, 1),
        },
    )
    return dump_lep_data(result)


@trace(name="ingest_dcp_text", span_type="PARSER")
def ingest_dcp_text(document_text: str) -> dict:
    """Split extracted DCP text into sections and return its persisted JSON."""
    result = parse_dcp_text(document_text)
    if not result.sections:
        logger.warning("DCP text produced no sections", extra={"step": "parse_dcp"})

    logger.info(
        "Parsed DCP %s: %d sections",
        result.instrument_name or "<unnamed>",
        len(result.sections),
        extra={"instrument": result.instrument_name, "sections": len(result.sections)},
    )
    return dump_dcp_data(result)


def dedupe_clauses(clauses: list[ParsedClause], slug: str | None = None) -> list[ParsedClause]:
    """Keep the first clause for each clause key.

    LEP HTML repeats headings such as "Objectives of zone" once per zone,
    so keys collide. A later duplicate whose content differs is logged.
    """
    seen: dict[str, ParsedClause] = {}
    unique: list[ParsedClause] = []

    for clause in clauses:
        first = seen.get(clause.clause_key)
        if first is None:
            seen[clause.clause_key] = clause
            unique.append(clause)
            continue
        if first.content_hash != clause.content_hash:
            logger.warning(
                "Duplicate clause key %s with differing content; keeping first instance",
                clause.clause_key,
                extra={"slug": slug},
            )

    return unique


@trace(name="ingest_instrument", span_type="CHAIN")
async def ingest_instrument(config: InstrumentConfig) -> dict:
    """Fetch an instrument and parse it by format.

    XML is read as an LEP land use table; HTML is split into clauses.
    Every log line of the run carries one correlation_id, reused from the
    caller when one is already set.

    Returns:
        {"slug", "format", "source_url", "used_fixture", "data"} where data
        is the LEP JSON or the clause JSON.
    """
    token = correlation_id.set(get_correlation_id() or uuid.uuid4().hex[:12])
    try:
        with start_span("fetch") as span:
            span.set_inputs({"slug": config.slug, "source_url": config.source_url})
            fetched = await fetch_instrument_document(config)
            span.set_outputs({"format": fetched.format, "used_fixture": fetched.used_fixture})

        if fetched.format == "html":
            clauses = dedupe_clauses(parse_instrument_document(config, fetched.document), slug=config.slug)
            logger.info(
                "Parsed %d clauses for %s", len(clauses), config.slug,
                extra={"slug": config.slug, "clauses": len(clauses)},
            )
            data = dump_clause_data(clauses)
        else:
            data = ingest_lep_xml(fetched.document, instrument=config.name)
    finally:
        correlation_id.reset(token)

    return {
        "slug": config.slug,
        "format": fetched.format,
        "source_url": fetched.source_url,
        "used_fixture": fetched.used_fixture,
        "data": data,
    }
