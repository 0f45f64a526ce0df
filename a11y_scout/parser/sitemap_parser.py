# File: a11y_scout/parser/sitemap_parser.py
"""a11y_scout.parser.sitemap_parser: Parsing of sitemap.xml / sitemap index documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Union

from lxml import etree

from a11y_scout.exceptions import DiscoveryError

SitemapKind = Literal["index", "urlset"]


@dataclass(slots=True)
class SitemapDocument:
    """Parsed sitemap: either an index of child sitemaps or a set of page URLs."""

    kind: SitemapKind
    locations: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind == "index"


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname.lower()


def parse_sitemap(xml_content: Union[str, bytes]) -> SitemapDocument:
    """Parse sitemap XML and return its kind plus the ``<loc>`` values in document order.

    Args:
        xml_content: raw bytes (preferred, keeps the declared encoding) or text.

    Raises:
        DiscoveryError: the content is not XML, or its root is neither
            ``<sitemapindex>`` nor ``<urlset>``.

    Example:
    ```python
    doc = parse_sitemap(Path("sitemap.xml").read_bytes())
    if doc.is_index:
        children = doc.locations
    ```
    """
    data = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    if not data or not data.strip():
        raise DiscoveryError("empty sitemap document")
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise DiscoveryError(f"unparsable sitemap: {exc}") from exc
    if root is None:
        raise DiscoveryError("unparsable sitemap: no root element")

    root_name = _local_name(root.tag)
    if root_name == "sitemapindex":
        kind: SitemapKind = "index"
        entries = root.findall("{*}sitemap")
    elif root_name == "urlset":
        kind = "urlset"
        entries = root.findall("{*}url")
    else:
        raise DiscoveryError(f"unexpected sitemap root <{root_name}>")

    locations: List[str] = []
    for entry in entries:
        loc = entry.find("{*}loc")
        if loc is not None and loc.text and loc.text.strip():
            locations.append(loc.text.strip())
    return SitemapDocument(kind=kind, locations=locations)


__all__ = ["SitemapDocument", "SitemapKind", "parse_sitemap"]
