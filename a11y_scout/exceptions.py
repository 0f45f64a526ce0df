# File: a11y_scout/exceptions.py
"""a11y_scout.exceptions: Error types shared by discovery and scanning."""

from __future__ import annotations


class A11yScoutError(Exception):
    """Base class for all project errors."""


class DiscoveryError(A11yScoutError):
    """A sitemap or root page could not be fetched or parsed.

    Never fatal: the caller logs it and treats the source as empty.
    """


class NavigationError(A11yScoutError):
    """The browser failed to load a page (network error, timeout, crash)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


__all__ = ["A11yScoutError", "DiscoveryError", "NavigationError"]
