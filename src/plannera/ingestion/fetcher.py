"""Instrument fetcher: NSW legislation XML/HTML over HTTP, file:// or fixtures.

Resolution order:
  1. Fixture, when LEGISLATION_USE_FIXTURES is on and one is configured
  2. file:// source URLs, read from disk and reported as fixtures
  3. HTTP GET with linear-backoff retries, against the NSW XML export
     endpoint when the source is a legislation.nsw.gov.au page
  4. Fixture fallback when every HTTP attempt failed
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from plannera.config import settings
from plannera.core.exceptions import InstrumentFetchError
from plannera.core.types import InstrumentConfig, InstrumentFetchResult

logger = logging.getLogger(__name__)

NSW_LEGISLATION_HOST = "https://legislation.nsw.gov.au"
ACCEPT_HEADER = "application/xml,text/xml;q=0.9,application/xhtml+xml;q=0.8"

# "epi-2014-0250" style identifiers in NSW legislation URLs
_EXPORT_PATH = re.compile(r"([a-z]+-\d{4}-\d+)", re.IGNORECASE)
_HTML_MARKER = re.compile(r"<html|<!DOCTYPE html", re.IGNORECASE)


def detect_format(content: str) -> str:
    return "html" if _HTML_MARKER.search(content) else "xml"


def build_xml_source_url(config: InstrumentConfig) -> str:
    """Map a legislation.nsw.gov.au page URL onto its XML export URL."""
    if config.xml_source_url:
        return config.xml_source_url

    source = config.source_url
    export_path = config.export_path
    if not export_path:
        match = _EXPORT_PATH.search(source)
        export_path = match.group(1) if match else None

    if source.startswith(NSW_LEGISLATION_HOST) and export_path:
        date_segment = config.export_date or "current"
        return f"{settings.legislation_export_base_url}/{date_segment}/{export_path}"
    return source


def _file_url_to_path(url: str) -> Path:
    return Path(url2pathname(urlparse(url).path))


def _result(document: str, source_url: str, status: int = 200, used_fixture: bool = True) -> InstrumentFetchResult:
    return InstrumentFetchResult(
        document=document,
        fetched_at=datetime.now(timezone.utc),
        status=status,
        source_url=source_url,
        used_fixture=used_fixture,
        format=detect_format(document),
    )


def load_fixture(config: InstrumentConfig) -> InstrumentFetchResult:
    if not config.fixture_file:
        raise InstrumentFetchError(f"No fixture configured for {config.slug}")
    path = Path(config.fixture_file)
    document = path.read_text(encoding="utf-8")
    return _result(document, str(path))


async def _http_fetch(url: str) -> tuple[str, int]:
    """GET with retries. Raises the last error once attempts are exhausted."""
    headers = {
        "User-Agent": settings.legislation_user_agent,
        "Accept": ACCEPT_HEADER,
        "Accept-Encoding": "identity",
    }
    attempts = max(1, settings.legislation_fetch_retries + 1)
    last_error: Exception | None = None

    async with httpx.AsyncClient(timeout=settings.legislation_fetch_timeout_s, follow_redirects=True) as client:
        for attempt in range(attempts):
            try:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
                return resp.text, resp.status_code
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("Fetch attempt %d/%d failed for %s: %s", attempt + 1, attempts, url, e)
                if attempt < attempts - 1:
                    await asyncio.sleep(settings.legislation_fetch_retry_delay_s * (attempt + 1))

    if last_error is None:
        raise InstrumentFetchError(f"No fetch attempted for {url}")
    raise last_error


async def fetch_instrument_document(config: InstrumentConfig) -> InstrumentFetchResult:
    """Fetch an instrument's source document.

    Raises:
        InstrumentFetchError: HTTP failed after all retries and no fixture is configured.
    """
    if settings.legislation_use_fixtures and config.fixture_file:
        logger.info("Using fixture for %s", config.slug, extra={"slug": config.slug})
        return load_fixture(config)

    if config.source_url.startswith("file://"):
        document = _file_url_to_path(config.source_url).read_text(encoding="utf-8")
        return _result(document, config.source_url)

    target_url = build_xml_source_url(config)
    try:
        document, status = await _http_fetch(target_url)
    except httpx.HTTPError as e:
        if config.fixture_file:
            logger.warning("Falling back to fixture for %s: %s", config.slug, e, extra={"slug": config.slug})
            return load_fixture(config)
        raise InstrumentFetchError(f"Failed to fetch {config.slug} from {target_url}: {e}") from e

    logger.info(
        "Fetched %s (%d chars)", target_url, len(document),
        extra={"slug": config.slug, "source_url": target_url},
    )
    return _result(document, target_url, status=status, used_fixture=False)
