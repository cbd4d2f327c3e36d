"""Find downloadable PDF assets on the Internet Archive for a free-text query."""
import logging
from typing import Any
from urllib.parse import quote

import httpx

from pdfscout.config import MAX_SEARCH_ROWS, Settings
from pdfscout.errors import UpstreamError, ValidationError
from pdfscout.models.search import SearchResult

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["identifier", "title", "creator", "year", "format"]
PROXY_FAILURE = "Failed to fetch PDF links"


async def search_pdf_links(
    query: str,
    client: httpx.AsyncClient,
    settings: Settings
) -> list[SearchResult]:
    """
    Search the archive and return one result per PDF file of each matching item.

    Order follows the archive's ranking, then each item's file listing.
    Any upstream failure aborts the whole search; partial results are
    never returned.

    Raises:
        ValidationError: query is empty
        UpstreamError: the archive could not be reached or returned junk
    """
    if not query or not query.strip():
        raise ValidationError("Search query must not be empty")

    try:
        docs = await _search_items(query, client, settings)
        results = []
        for item in docs:
            if not _offers_pdf(item):
                continue
            identifier = item["identifier"]
            for name in await _pdf_file_names(identifier, client, settings):
                results.append(SearchResult(
                    title=item.get("title"),
                    creator=item.get("creator"),
                    year=item.get("year"),
                    pdfLink=f"{settings.archive_base_url}/download/{quote(identifier)}/{quote(name)}"
                ))
    except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning(f"Archive search for {query!r} failed: {e}")
        raise UpstreamError(PROXY_FAILURE, details=str(e)) from e

    logger.info(f"🔎 {query!r} -> {len(results)} PDF link(s)")
    return results


async def _search_items(
    query: str,
    client: httpx.AsyncClient,
    settings: Settings
) -> list[dict[str, Any]]:
    rows = min(settings.search_rows, MAX_SEARCH_ROWS)
    response = await client.get(
        f"{settings.archive_base_url}/advancedsearch.php",
        params={
            "q": query,
            "fl[]": SEARCH_FIELDS,
            "rows": rows,
            "output": "json",
        },
        timeout=settings.http_timeout,
    )
    response.raise_for_status()
    docs = response.json()["response"]["docs"]
    if not isinstance(docs, list):
        raise TypeError("search response docs is not a list")
    return docs[:rows]


def _offers_pdf(item: dict[str, Any]) -> bool:
    """True when any declared format mentions pdf (case-insensitive)."""
    formats = item.get("format") or []
    if isinstance(formats, str):
        formats = [formats]
    return any("pdf" in str(f).lower() for f in formats)


async def _pdf_file_names(
    identifier: str,
    client: httpx.AsyncClient,
    settings: Settings
) -> list[str]:
    response = await client.get(
        f"{settings.archive_base_url}/metadata/{quote(identifier)}",
        timeout=settings.http_timeout,
    )
    response.raise_for_status()
    files = response.json().get("files") or []
    return [
        f["name"] for f in files
        if isinstance(f.get("name"), str) and f["name"].lower().endswith(".pdf")
    ]
