# a11y_scout/crawler/fetcher.py
"""
Fetcher module: plain HTTP GETs for sitemaps and fallback root pages, with
retry/backoff on retryable statuses and a bounded per-request timeout.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from a11y_scout.config import RunConfig
from a11y_scout.crawler.models import FetchedDocument
from a11y_scout.logger import get_logger

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class Fetcher:
    """Handles raw HTTP fetching with retries/backoff and timeout.

    The session is owned by the caller; one session serves the whole
    discovery phase.
    """

    def __init__(
        self,
        session: ClientSession,
        config: RunConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status
        self._timeout = ClientTimeout(total=config.fetch_timeout)
        self.logger = get_logger("fetcher")

    async def fetch(self, url: str) -> Optional[FetchedDocument]:
        """
        GET *url* and return the response, whatever its status.

        Returns None on network failure, timeout, or when retryable statuses
        persist past ``retry_times``.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url, timeout=self._timeout, raise_for_status=False) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"retryable status {resp.status}")
                    body = await resp.read()
                    return FetchedDocument(
                        url=str(resp.url),
                        status=resp.status,
                        content_type=resp.headers.get("Content-Type", ""),
                        content=body,
                    )
            except asyncio.TimeoutError:
                # no retry on timeout
                self.logger.warning("Fetch timed out after %.1f s: %s", self.config.fetch_timeout, url)
                return None
            except ClientError as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    self.logger.warning("Fetch failed %s: %s", url, exc)
                    return None
                # exponential backoff, cap at 60s
                backoff = min(2**attempts, 60)
                self.logger.debug("Retry %d/%d for %s after %d s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)


def open_session(config: RunConfig) -> ClientSession:
    """Client session preconfigured with the run's User-Agent and fetch timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=config.fetch_timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


__all__ = ["Fetcher", "RETRY_STATUS", "open_session"]
