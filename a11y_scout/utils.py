# File: a11y_scout/utils.py
"""a11y_scout.utils: URL normalization and classification helpers used by discovery and scanning."""

from __future__ import annotations

import posixpath
import re
from typing import Collection, Iterable, List, Sequence
from urllib.parse import urlsplit, urlunsplit

from a11y_scout.logger import logger

__all__: Sequence[str] = (
    "DEFAULT_SKIP_EXTENSIONS",
    "PDF_RUN_LIMIT",
    "normalize_url",
    "url_extension",
    "is_pdf_like",
    "is_likely_html_url",
    "strip_fragment",
    "same_origin",
    "remove_duplicates",
)

DEFAULT_SKIP_EXTENSIONS: tuple[str, ...] = (
    "pdf", "zip", "gz", "tar", "rar", "7z",
    "jpg", "jpeg", "png", "gif", "svg", "webp", "ico", "bmp", "tif", "tiff",
    "mp3", "mp4", "mov", "avi", "wav", "webm", "ogg",
    "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "csv", "rtf",
    "xml", "json", "txt", "rss", "atom",
    "css", "js", "woff", "woff2", "ttf", "eot",
    "exe", "dmg", "msi", "apk",
)

#: consecutive PDF-like sitemap entries after which a urlset is abandoned
PDF_RUN_LIMIT = 5

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(raw: str | None) -> str:
    """Trim *raw*, prefix ``https://`` when it carries no http(s) scheme and
    spell an empty path as ``/``.

    Returns ``""`` for empty input or strings that do not parse into a URL
    with a host; callers log and skip those entries.
    """
    if not raw:
        return ""
    target = raw.strip()
    if not target:
        return ""
    if not _SCHEME_RE.match(target):
        target = "https://" + target
    try:
        parts = urlsplit(target)
        # .port raises ValueError on garbage such as "host:abc"
        parts.port
    except ValueError:
        logger.debug("Unparsable URL: %r", raw)
        return ""
    if not parts.hostname or any(ch.isspace() for ch in parts.netloc):
        logger.debug("URL without a usable host: %r", raw)
        return ""
    if not parts.path:
        # an empty path is the site root
        return urlunsplit((parts.scheme, parts.netloc, "/", parts.query, parts.fragment))
    return target


def url_extension(url: str) -> str:
    """Lower-case extension of the last path segment, without the dot ("" if none)."""
    path = urlsplit(url).path.rstrip("/")
    _, ext = posixpath.splitext(posixpath.basename(path))
    return ext[1:].lower()


def is_pdf_like(url: str) -> bool:
    """True for ``.pdf`` paths and for paths ending in a bare ``pdf`` (``/report-pdf``)."""
    path = urlsplit(url).path.rstrip("/").lower()
    return path.endswith("pdf")


def is_likely_html_url(url: str, skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS) -> bool:
    """Guess whether *url* points to an HTML page worth auditing.

    Extension-less routes are assumed to be HTML. Skip-list entries match with
    or without a leading dot and regardless of case.
    """
    if is_pdf_like(url):
        return False
    ext = url_extension(url)
    if not ext:
        return True
    skip = {e.strip().lower().lstrip(".") for e in skip_extensions if e and e.strip()}
    return ext not in skip


def strip_fragment(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))


def _origin(url: str) -> tuple[str, str, int | None]:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    return scheme, (parts.hostname or "").lower(), parts.port or _DEFAULT_PORTS.get(scheme)


def same_origin(url: str, reference: str) -> bool:
    """True when scheme, host and effective port of both URLs match."""
    try:
        return _origin(url) == _origin(reference)
    except ValueError:
        return False


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Drop repeated URLs, keeping the first occurrence of each."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
