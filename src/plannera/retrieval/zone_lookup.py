"""Zone lookup: resolve a site's zoning code against parsed LEP data.

Matching is exact on the normalised code. A name fallback exists but is
opt-in and strict: a zone qualifies only when every word of
its name appears in the query, and only an unambiguous single candidate
is returned. No substring or fuzzy matching.
"""

import re

from plannera.core.types import LepParseResult, ZoneMatch, ZoneRecord

_WORD = re.compile(r"[a-z0-9]+")


def normalize_zone_code(code: str | None) -> str:
    """'  ru1 ' → 'RU1'."""
    return (code or "").strip().upper()


def _name_tokens(text: str) -> set[str]:
    return set(_WORD.findall(text.lower()))


def _match_by_name(zones: list[ZoneRecord], query: str) -> ZoneRecord | None:
    query_tokens = _name_tokens(query)
    candidates = []
    for zone in zones:
        tokens = _name_tokens(zone.zone_name)
        if tokens and tokens <= query_tokens:
            candidates.append(zone)
    if len(candidates) != 1:
        return None
    return candidates[0]


def find_zone(
    lep_data: LepParseResult | None,
    zoning_code: str | None,
    *,
    match_names: bool = False,
) -> ZoneMatch | None:
    """Find the zone record for a zoning code.

    Args:
        lep_data: Parsed LEP, or None when the project has none yet.
        zoning_code: Code as supplied by the site resolver, any case/padding.
        match_names: Also accept a query that names exactly one zone, e.g.
            "R2 Low Density Residential" when the record has no code.

    Returns:
        ZoneMatch for the first zone (source order) whose code matches, or
        None when the code is unset, lep_data is empty, or nothing matches.
    """
    if lep_data is None or not lep_data.zones:
        return None

    query = normalize_zone_code(zoning_code)
    if not query:
        return None

    for zone in lep_data.zones:
        if zone.zone_code is not None and normalize_zone_code(zone.zone_code) == query:
            return ZoneMatch(zone=zone, metadata=lep_data.metadata)

    if match_names:
        zone = _match_by_name(lep_data.zones, query)
        if zone is not None:
            return ZoneMatch(zone=zone, metadata=lep_data.metadata)

    return None
