"""Plannera CLI: parse LEP/DCP documents and ingest instruments.

    plannera lep <file.xml> [--zone CODE]
    plannera dcp <file.txt>
    plannera fetch <url> [--slug SLUG]
"""

import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

from plannera.config import settings
from plannera.core.exceptions import InstrumentFetchError, MalformedDocument
from plannera.observability.logging import correlation_id, setup_logging
from plannera.observability.tracing import set_experiment, set_tracking_uri

logger = logging.getLogger(__name__)

USAGE = """Usage:
  plannera lep <file.xml> [--zone CODE]   Parse an LEP; print JSON, or the zone's message block
  plannera dcp <file.txt>                 Parse extracted DCP text; print section headings
  plannera fetch <url> [--slug SLUG]      Fetch and ingest an instrument"""


def _init_mlflow() -> None:
    """Initialize MLflow tracking for the current process."""
    set_tracking_uri(settings.mlflow_tracking_uri)
    set_experiment(settings.mlflow_experiment_name)


def _option(args: list[str], name: str) -> str | None:
    """Pop `--name VALUE` from args."""
    if name not in args:
        return None
    i = args.index(name)
    if i + 1 >= len(args):
        print(f"Missing value for {name}")
        sys.exit(1)
    value = args[i + 1]
    del args[i:i + 2]
    return value


def _read(path: str) -> str:
    p = Path(path)
    if not p.is_file():
        print(f"File not found: {path}")
        sys.exit(1)
    return p.read_text(encoding="utf-8")


def _run_lep(args: list[str]) -> None:
    from plannera.ingestion.lep_parser import parse_lep_xml
    from plannera.pipeline.ingest import ingest_lep_xml
    from plannera.pipeline.site_context import render_zone_block
    from plannera.retrieval.zone_lookup import find_zone

    zone_code = _option(args, "--zone")
    if len(args) != 1:
        print(USAGE)
        sys.exit(1)
    xml_text = _read(args[0])

    if zone_code is None:
        print(json.dumps(ingest_lep_xml(xml_text, instrument=args[0]), indent=2, ensure_ascii=False))
        return

    match = find_zone(parse_lep_xml(xml_text), zone_code)
    if match is None:
        print(f"Zone {zone_code!r} not found")
        sys.exit(1)
    print(render_zone_block(match))


def _run_dcp(args: list[str]) -> None:
    from plannera.pipeline.ingest import ingest_dcp_text

    if len(args) != 1:
        print(USAGE)
        sys.exit(1)

    data = ingest_dcp_text(_read(args[0]))
    print(data["instrumentName"] or "(unnamed DCP)")
    print(f"{'=' * 50}")
    for section in data["sections"]:
        print(f"  {section['order']:>3}  {section['heading']}")
    print(f"\nTotal: {len(data['sections'])} sections")


def _run_fetch(args: list[str]) -> None:
    from plannera.core.types import InstrumentConfig
    from plannera.pipeline.ingest import ingest_instrument

    slug = _option(args, "--slug")
    if len(args) != 1:
        print(USAGE)
        sys.exit(1)

    url = args[0]
    config = InstrumentConfig(
        slug=slug or "adhoc",
        name=slug or url,
        short_name=slug or url,
        instrument_type="LEP",
        source_url=url,
    )
    result = asyncio.run(ingest_instrument(config))
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


COMMANDS = {"lep": _run_lep, "dcp": _run_dcp, "fetch": _run_fetch}


def main() -> None:
    """Entry point: plannera <command> [args]"""
    setup_logging(json_format=settings.log_json, level=settings.log_level)

    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        sys.exit(0 if args else 1)

    command = COMMANDS.get(args[0])
    if command is None:
        print(f"Unknown command: {args[0]}\n")
        print(USAGE)
        sys.exit(1)

    _init_mlflow()
    token = correlation_id.set(uuid.uuid4().hex[:12])
    try:
        command(args[1:])
    except MalformedDocument as e:
        logger.error("Malformed document: %s", e)
        sys.exit(2)
    except InstrumentFetchError as e:
        logger.error("Fetch failed: %s", e)
        sys.exit(2)
    finally:
        correlation_id.reset(token)


if __name__ == "__main__":
    main()
