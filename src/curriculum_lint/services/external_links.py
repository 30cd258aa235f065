"""Service for checking external URLs referenced by lessons."""

import asyncio
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import httpx
from loguru import logger

from curriculum_lint import __version__

USER_AGENT = f"curriculum-lint/{__version__}"


@dataclass
class UrlStatus:
    url: str
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and self.status_code < 400

    def describe(self) -> str:
        if self.error is not None:
            return self.error
        return f"HTTP {self.status_code}"


async def check_url(client: httpx.AsyncClient, url: str) -> UrlStatus:
    """Check one URL. HEAD first, GET when the host refuses HEAD."""
    try:
        response = await client.head(url)
        if response.status_code < 400:
            return UrlStatus(url=url, status_code=response.status_code)
        # only the status is needed; the body is never read
        async with client.stream("GET", url) as response:
            return UrlStatus(url=url, status_code=response.status_code)
    except httpx.HTTPError as e:
        logger.debug(f"Request to {url} failed: {e!r}")
        return UrlStatus(url=url, error=type(e).__name__)


async def check_urls(
    urls: Iterable[str],
    timeout: float = 10.0,
    concurrency: int = 20,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, UrlStatus]:
    """Check many URLs with bounded concurrency.

    Args:
        urls: URLs to check; duplicates are checked once
        timeout: Per request timeout in seconds
        concurrency: Maximum requests in flight
        transport: Optional transport, used by tests

    Returns:
        Mapping of url to UrlStatus
    """
    unique = sorted(set(urls))
    if not unique:
        return {}

    logger.info(f"Checking {len(unique)} external URLs")
    semaphore = asyncio.Semaphore(concurrency)

    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    ) as client:

        async def bounded(url: str) -> UrlStatus:
            async with semaphore:
                return await check_url(client, url)

        results = await asyncio.gather(*(bounded(url) for url in unique))

    return {status.url: status for status in results}
