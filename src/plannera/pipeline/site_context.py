"""Site-context messages for the chat layer.

build_site_context_message renders the matched LEP zone as a fixed
line-oriented block; the labels, order and the en dash in the zone
header are consumed downstream verbatim. build_site_summary wraps that
block with the site lines the assistant receives before every reply.
"""

from plannera.core.types import LepParseResult, SiteContext, ZoneMatch
from plannera.retrieval.zone_lookup import find_zone

ZONE_SEPARATOR = " – "

CATEGORY_LABELS = (
    ("zone_objectives", "Zone objectives"),
    ("permitted_without_consent", "Permitted without consent"),
    ("permitted_with_consent", "Permitted with consent"),
    ("prohibited", "Prohibited"),
)

SITE_GUIDANCE = (
    "If a site is already set in the context, do not ask the user to provide the address again. "
    "Use the site details above in your answers.",
    "If zoning is available, use it to frame what is likely permitted, but still advise the user "
    "to confirm via LEP/DCP and council.",
    "If zoning is missing, provide general NSW guidance without requesting the address again.",
)


def _clean(values: list[str]) -> list[str]:
    return [v.strip() for v in values if v and v.strip()]


def _zone_header(match: ZoneMatch) -> str:
    parts = [p for p in (match.zone.zone_code, match.zone.zone_name) if p]
    return ZONE_SEPARATOR.join(parts)


def render_zone_block(match: ZoneMatch) -> str:
    """Render a matched zone as the instrument/zone/category line block."""
    lines = []
    if match.metadata.instrument_name:
        lines.append(match.metadata.instrument_name)
    lines.append(_zone_header(match))

    for attr, label in CATEGORY_LABELS:
        values = _clean(getattr(match.zone, attr))
        if values:
            lines.append(f"{label}: {', '.join(values)}")

    return "\n".join(lines)


def _lookup_code(site_context: SiteContext) -> str | None:
    return site_context.zoning_code or site_context.zone


def build_site_context_message(
    site_context: SiteContext | None,
    lep_data: LepParseResult | None,
) -> str | None:
    """Zone block for the site's zoning code, or None when nothing matches."""
    if site_context is None or lep_data is None:
        return None

    match = find_zone(lep_data, _lookup_code(site_context))
    if match is None:
        return None
    return render_zone_block(match)


def build_site_summary(
    site_context: SiteContext | None,
    lep_data: LepParseResult | None = None,
) -> str | None:
    """Full site preamble: address, LGA, zoning, guidance, then the LEP block if any."""
    if site_context is None:
        return None

    zoning_label = ZONE_SEPARATOR.join(
        p for p in (site_context.zoning_code, site_context.zoning_name) if p
    ).strip()
    zone = zoning_label or site_context.zone
    source = f" ({site_context.zoning_source})" if site_context.zoning_source else ""

    lines = [f"The current project site is: {site_context.formatted_address}."]
    if site_context.lga_name:
        lines.append(f"LGA: {site_context.lga_name}.")
    lines.append(f"Zoning: {zone}{source}." if zone else "Zoning is not available yet.")
    lines.extend(SITE_GUIDANCE)

    block = build_site_context_message(site_context, lep_data)
    if block:
        lines.append("Local Environmental Plan (LEP) context:\n" + block)

    return "\n".join(lines)
