"""NSW LEP XML → zone records.

Tolerant reader for Local Environmental Plan land use tables. Tags are
matched by local name (namespaces ignored) against a small set of known
aliases, and every missing field resolves to None or an empty list. The
only failure is input that is not XML at all.
"""

import re

from lxml import etree

from plannera.core.exceptions import MalformedDocument
from plannera.core.types import InstrumentMetadata, LepParseResult, ZoneRecord

# Tag aliases seen across NSW exports and hand-built fixtures
EPI_NAME_TAGS = ("EPI_NAME", "EpiName", "INSTRUMENT_NAME")
EPI_TYPE_TAGS = ("EPI_TYPE", "EpiType", "INSTRUMENT_TYPE")
LGA_NAME_TAGS = ("LGA_NAME", "LgaName")
LAND_USE_TABLE_TAGS = ("LAND_USE_TABLE", "LandUseTable")
ZONE_TAGS = ("ZONE", "Zone")
ZONE_CODE_TAGS = ("ZONE_CODE", "ZoneCode")
ZONE_NAME_TAGS = ("ZONE_NAME", "ZoneName")
OBJECTIVES_TAGS = ("ZONE_OBJECTIVES", "OBJECTIVES", "ZoneObjectives", "Objectives")
WITHOUT_CONSENT_TAGS = ("WITHOUT_CONSENT", "PERMITTED_WITHOUT_CONSENT", "PermittedWithoutConsent")
WITH_CONSENT_TAGS = ("WITH_CONSENT", "PERMITTED_WITH_CONSENT", "PermittedWithConsent")
PROHIBITED_TAGS = ("PROHIBITED", "Prohibited")

# NSW standard instrument codes: R2, RU1, B4, IN1, SP2, E3, MU1, RE1, W1...
# plus the two unnumbered ones, Unzoned Land and Deferred Matter
UNNUMBERED_ZONE_CODES = ("UL", "DM")
_CODE = r"[A-Z]{1,3}\d{1,2}[A-Z]?|" + "|".join(UNNUMBERED_ZONE_CODES)
ZONE_CODE_PATTERN = re.compile(rf"^(?:{_CODE})$")
_LEADING_CODE = re.compile(rf"^({_CODE})(?:$|[\s–—:]+)(.*)$", re.DOTALL)

# Separators that may follow a code prefix: "RU1 – Primary Production", "R2: Low Density"
_CODE_SEPARATOR = re.compile(r"^[\s–—:\-]+")

_parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True, huge_tree=True)


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _clean_text(value: str | None) -> str | None:
    """Collapse internal whitespace; whitespace-only text counts as absent."""
    if value is None:
        return None
    collapsed = " ".join(value.split())
    return collapsed or None


def _element_text(element: etree._Element) -> str | None:
    return _clean_text("".join(element.itertext()))


def _elements(node: etree._Element, tags: tuple[str, ...]):
    """Yield descendant elements (document order) whose local name is in tags."""
    for el in node.iter():
        if isinstance(el.tag, str) and el is not node and _local_name(el) in tags:
            yield el


def _first_text(node: etree._Element, tags: tuple[str, ...]) -> str | None:
    for el in _elements(node, tags):
        text = _element_text(el)
        if text is not None:
            return text
    return None


def _child(node: etree._Element, tags: tuple[str, ...]) -> etree._Element | None:
    """First descendant matching tags that belongs to this zone block, not a nested one."""
    for el in _elements(node, tags):
        if _owning_zone(el) is node:
            return el
    return None


def _owning_zone(element: etree._Element) -> etree._Element | None:
    for ancestor in element.iterancestors():
        if isinstance(ancestor.tag, str) and _local_name(ancestor) in ZONE_TAGS:
            return ancestor
    return None


def _child_elements(node: etree._Element) -> list[etree._Element]:
    return [el for el in node if isinstance(el.tag, str)]


def _has_own_text(node: etree._Element) -> bool:
    """True when the node carries text outside its child elements."""
    if node.text and node.text.strip():
        return True
    return any(child.tail and child.tail.strip() for child in node)


def _entry_texts(node: etree._Element) -> list[str]:
    entries = []
    for child in _child_elements(node):
        # Wrappers like <LAND_USES> hold entries, not text
        if _child_elements(child) and not _has_own_text(child):
            entries.extend(_entry_texts(child))
            continue
        text = _element_text(child)
        if text:
            entries.append(text)
    return entries


def _collect_entries(category: etree._Element | None) -> list[str]:
    """Text entries of a category node, one per child element, in source order.

    Inline markup inside an entry ("Dwelling <i>houses</i>") stays part of
    that entry. A category with no child elements, or with text of its own,
    is a single entry.
    """
    if category is None:
        return []

    if not _child_elements(category) or _has_own_text(category):
        text = _element_text(category)
        return [text] if text else []

    return _entry_texts(category)


def split_zone_code(name: str | None, zone_code: str | None = None) -> tuple[str | None, str]:
    """Split a zone name into (code, name).

    With an explicit code, a leading copy of it is stripped from the name.
    Without one, the first token becomes the code only when it matches
    ZONE_CODE_PATTERN ("R2 Low Density Residential" → ("R2", "Low Density
    Residential")). Otherwise the code is None and the name is returned whole.
    """
    text = _clean_text(name) or ""

    if zone_code:
        if text.upper().startswith(zone_code.upper()):
            rest = text[len(zone_code):]
            if not rest or not rest[0].isalnum():
                return zone_code, _CODE_SEPARATOR.sub("", rest).strip()
        return zone_code, text

    match = _LEADING_CODE.match(text)
    if match:
        return match.group(1), _CODE_SEPARATOR.sub("", match.group(2)).strip()
    return None, text


def _parse_zone(block: etree._Element) -> ZoneRecord:
    code_el = _child(block, ZONE_CODE_TAGS)
    name_el = _child(block, ZONE_NAME_TAGS)
    raw_code = _element_text(code_el) if code_el is not None else None
    raw_name = _element_text(name_el) if name_el is not None else None

    zone_code, zone_name = split_zone_code(raw_name, raw_code)

    return ZoneRecord(
        zone_code=zone_code,
        zone_name=zone_name,
        zone_objectives=_collect_entries(_child(block, OBJECTIVES_TAGS)),
        permitted_without_consent=_collect_entries(_child(block, WITHOUT_CONSENT_TAGS)),
        permitted_with_consent=_collect_entries(_child(block, WITH_CONSENT_TAGS)),
        prohibited=_collect_entries(_child(block, PROHIBITED_TAGS)),
    )


def _zone_blocks(root: etree._Element) -> list[etree._Element]:
    containers = list(_elements(root, LAND_USE_TABLE_TAGS))
    if _local_name(root) in LAND_USE_TABLE_TAGS:
        containers.insert(0, root)
    scopes = containers or [root]

    blocks: list[etree._Element] = []
    seen: set[int] = set()
    for scope in scopes:
        for block in _elements(scope, ZONE_TAGS):
            if id(block) not in seen and _owning_zone(block) is None:
                seen.add(id(block))
                blocks.append(block)
    return blocks


def parse_lep_xml(xml_text: str) -> LepParseResult:
    """Parse LEP XML into instrument metadata and zone records.

    Raises:
        MalformedDocument: if the input is empty or not well-formed XML.
    """
    if not xml_text or not xml_text.strip():
        raise MalformedDocument("LEP document is empty")

    try:
        root = etree.fromstring(xml_text.strip().encode("utf-8"), parser=_parser)
    except etree.XMLSyntaxError as e:
        raise MalformedDocument(f"LEP document is not well-formed XML: {e}") from e

    metadata = InstrumentMetadata(
        lga_name=_first_text(root, LGA_NAME_TAGS),
        instrument_name=_first_text(root, EPI_NAME_TAGS),
        instrument_type=_first_text(root, EPI_TYPE_TAGS),
    )
    zones = [_parse_zone(block) for block in _zone_blocks(root)]

    return LepParseResult(metadata=metadata, zones=zones)
