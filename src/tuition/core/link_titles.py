"""Best-effort resource link title enrichment.

Google Docs links get the document title from the page ``<title>``;
YouTube links get the video title from noembed. Other links keep the
title derived at mapping time.

Every lookup is independent: all links are resolved concurrently and a
failed lookup falls back to the raw URL as the title without affecting any
other link.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import replace
from typing import Iterable

import httpx
import structlog

from tuition.core.records import ProgressItem, ResourceLink

logger = structlog.get_logger(__name__)

NOEMBED_URL = "https://noembed.com/embed"
DEFAULT_TIMEOUT = 5.0

TITLE_PATTERN = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
GOOGLE_DOCS_SUFFIX = " - Google Docs"


def is_google_doc(url: str) -> bool:
    return "docs.google.com" in url


def is_youtube(url: str) -> bool:
    return "youtube.com" in url or "youtu.be" in url


def needs_lookup(url: str) -> bool:
    """Whether a URL has a remote title worth fetching."""
    return is_google_doc(url) or is_youtube(url)


def extract_html_title(html: str) -> str | None:
    """Return the trimmed ``<title>`` text of an HTML page, if any."""
    match = TITLE_PATTERN.search(html)
    if not match:
        return None
    title = " ".join(match.group(1).split())
    return title or None


class LinkTitleResolver:
    """Resolves friendlier titles for resource links.

    The HTTP client is injected so callers control its lifetime and tests
    can supply a mock transport. When no client is given, one is created per
    ``resolve_links`` call.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        enabled: bool = True,
    ):
        self._client = client
        self.timeout = timeout
        self.enabled = enabled

    async def _fetch_title(self, client: httpx.AsyncClient, url: str) -> str | None:
        if is_google_doc(url):
            response = await client.get(url, timeout=self.timeout, follow_redirects=True)
            response.raise_for_status()
            title = extract_html_title(response.text)
            if title and title.endswith(GOOGLE_DOCS_SUFFIX):
                title = title[: -len(GOOGLE_DOCS_SUFFIX)].strip()
            return title or None

        if is_youtube(url):
            response = await client.get(
                NOEMBED_URL, params={"url": url}, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
            title = data.get("title") if isinstance(data, dict) else None
            return title.strip() if isinstance(title, str) and title.strip() else None

        return None

    async def resolve(self, link: ResourceLink, client: httpx.AsyncClient | None = None) -> ResourceLink:
        """Resolve a single link.

        Links that need no lookup are returned unchanged. A failed or empty
        lookup yields the raw URL as the title.
        """
        if not self.enabled or not needs_lookup(link.url):
            return link

        client = client or self._client
        if client is None:
            async with httpx.AsyncClient() as own_client:
                return await self.resolve(link, own_client)

        try:
            title = await self._fetch_title(client, link.url)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("link_title_fallback", url=link.url, error=str(e))
            return ResourceLink(url=link.url, title=link.url)

        if not title:
            logger.debug("link_title_missing", url=link.url)
            return ResourceLink(url=link.url, title=link.url)
        return ResourceLink(url=link.url, title=title)

    async def resolve_links(self, links: Iterable[ResourceLink]) -> list[ResourceLink]:
        """Resolve many links concurrently, preserving order."""
        links = list(links)
        if not self.enabled or not any(needs_lookup(link.url) for link in links):
            return links

        if self._client is not None:
            return list(await asyncio.gather(*(self.resolve(link) for link in links)))

        async with httpx.AsyncClient() as client:
            return list(
                await asyncio.gather(*(self.resolve(link, client) for link in links))
            )

    async def enrich_items(self, items: list[ProgressItem]) -> list[ProgressItem]:
        """Return copies of items with every resource link resolved.

        All links across all items are looked up in a single concurrent batch.
        """
        flat = [link for item in items for link in item.resource_links]
        resolved = await self.resolve_links(flat)

        enriched = []
        position = 0
        for item in items:
            count = len(item.resource_links)
            enriched.append(
                replace(item, resource_links=resolved[position : position + count])
            )
            position += count

        logger.debug("links_enriched", items=len(items), links=len(flat))
        return enriched
