"""Legislation HTML → clauses.

Splits an instrument's HTML rendition into clauses: every h2/h3/h4
starts a clause whose body runs over the following siblings up to the
next heading. Each clause gets a stable key and a content hash so
re-ingestion can detect amended clauses.
"""

import hashlib
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from plannera.core.types import InstrumentConfig, ParsedClause

CLAUSE_HEADING_TAGS = ["h2", "h3", "h4"]

_HEADING_NAME = re.compile(r"^h[1-6]$", re.IGNORECASE)
_HIERARCHY_SPLIT = re.compile(r"-|–|—")


def normalize_clause_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def build_clause_key(config: InstrumentConfig, heading_text: str) -> str:
    """'Clause 4.3 Height of buildings' → 'BYRON_LEP_2014_CLAUSE_4_3_HEIGHT_OF_BUILDINGS'."""
    normalized = re.sub(r"[^\w\d]+", "_", normalize_clause_text(heading_text))
    normalized = normalized.strip("_").upper()
    prefix = config.clause_prefix or re.sub(r"[^A-Za-z0-9]+", "_", config.slug).upper()
    return f"{prefix}_{normalized}"


def compute_content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def extract_hierarchy(heading_text: str) -> list[str]:
    """'Part 2 – Permitted or prohibited development' → ['Part 2', 'Permitted or prohibited development']."""
    parts = [normalize_clause_text(p) for p in _HIERARCHY_SPLIT.split(heading_text)]
    return [p for p in parts if p]


def _clause_body(heading: Tag) -> tuple[str, str]:
    """Collect HTML and text from the heading up to the next heading sibling."""
    html_parts = [str(heading)]
    text_parts = [heading.get_text(" ")]

    for sibling in heading.next_siblings:
        if isinstance(sibling, Tag):
            if _HEADING_NAME.match(sibling.name):
                break
            html_parts.append(str(sibling))
            text_parts.append(sibling.get_text(" "))
        elif isinstance(sibling, NavigableString) and not isinstance(sibling, Comment) and sibling.strip():
            html_parts.append(str(sibling))
            text_parts.append(str(sibling))

    return "\n".join(html_parts), normalize_clause_text(" ".join(text_parts))


def parse_instrument_document(config: InstrumentConfig, document: str) -> list[ParsedClause]:
    """Parse an instrument's HTML into clauses, in document order."""
    soup = BeautifulSoup(document, "html.parser")
    clauses: list[ParsedClause] = []

    for heading in soup.find_all(CLAUSE_HEADING_TAGS):
        heading_text = normalize_clause_text(heading.get_text(" "))
        if not heading_text:
            continue

        body_html, body_text = _clause_body(heading)
        clauses.append(
            ParsedClause(
                clause_key=build_clause_key(config, heading_text),
                title=heading_text,
                body_html=body_html,
                body_text=body_text,
                hierarchy_path=extract_hierarchy(heading_text),
                content_hash=compute_content_hash(body_text),
            )
        )

    return clauses
