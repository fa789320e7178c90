"""Plain text → DCP sections.

Splits Development Control Plan text (already extracted from the PDF)
into named sections using line-level heading heuristics. Never raises on
text input: with no detectable headings the whole document becomes one
section.
"""

import re

from plannera.core.types import DcpParseResult, DcpSection

MAX_HEADING_LENGTH = 80
MAX_TITLE_CASE_WORDS = 12
MIN_UPPERCASE_HEADING_LENGTH = 5

PREAMBLE_HEADING = "General"
FALLBACK_HEADING = "Document"

# "2.3.1 Secondary Dwellings", "4. Car Parking"; not "6 metres from the boundary"
NUMBERED_HEADING = re.compile(r"^\d+(?:\.\d+)*\.?\s+[A-Z]")
TERMINAL_PUNCTUATION = (".", ",", ";", ":", "?", "!")
INSTRUMENT_NAME_PATTERN = re.compile(r"\bDCP\b|Development Control Plan", re.IGNORECASE)

# Words allowed to stay lowercase in a title-case heading
MINOR_WORDS = {
    "a", "an", "and", "as", "at", "by", "for", "from", "in", "into",
    "of", "on", "or", "the", "to", "with", "within", "per", "vs",
}


def _is_title_case(line: str) -> bool:
    words = line.split()
    if not words or len(words) > MAX_TITLE_CASE_WORDS:
        return False

    significant = 0
    for word in words:
        letters = word.lstrip("(\"'")
        if not letters or not letters[0].isalpha():
            continue
        if letters.lower() in MINOR_WORDS:
            continue
        if not letters[0].isupper():
            return False
        significant += 1
    return significant > 0


def is_heading_line(line: str) -> bool:
    """Decide whether a stripped line delimits a new section."""
    if not line or len(line) > MAX_HEADING_LENGTH:
        return False
    if line.endswith(TERMINAL_PUNCTUATION):
        return False

    if NUMBERED_HEADING.match(line):
        return True
    if len(line) >= MIN_UPPERCASE_HEADING_LENGTH and line == line.upper() and re.search(r"[A-Z]", line):
        return True
    return _is_title_case(line)


def _instrument_name(lines: list[str]) -> str | None:
    for line in lines:
        if INSTRUMENT_NAME_PATTERN.search(line):
            return line
    return lines[0] if lines else None


def _split_sections(lines: list[str]) -> list[DcpSection]:
    sections: list[DcpSection] = []
    heading: str | None = None
    body: list[str] = []

    def flush() -> None:
        if heading is None and not body:
            return
        sections.append(
            DcpSection(
                heading=heading or PREAMBLE_HEADING,
                body="\n".join(body).strip(),
                order=len(sections),
            )
        )

    for line in lines:
        if is_heading_line(line):
            flush()
            heading, body = line, []
        else:
            body.append(line)
    flush()

    return sections


def parse_dcp_text(document_text: str) -> DcpParseResult:
    """Parse DCP plain text into ordered sections."""
    text = (document_text or "").strip()
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    instrument_name = _instrument_name(lines)

    if not lines:
        return DcpParseResult(instrument_name=None, sections=[])

    if not any(is_heading_line(line) for line in lines):
        section = DcpSection(heading=instrument_name or FALLBACK_HEADING, body=text, order=0)
        return DcpParseResult(instrument_name=instrument_name, sections=[section])

    return DcpParseResult(instrument_name=instrument_name, sections=_split_sections(lines))
