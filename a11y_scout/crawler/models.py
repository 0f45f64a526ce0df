# a11y_scout/crawler/models.py
"""
Data models for raw (non-browser) HTTP fetches.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FetchedDocument:
    """Response of a plain GET: final URL, status, content type and body bytes."""

    url: str
    status: int
    content_type: str
    content: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()
