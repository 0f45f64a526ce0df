# File: a11y_scout/models.py
"""a11y_scout.models: Per-page scan results and the browser collaborator payloads.

A page ends in exactly one of three states, modelled as a tagged union:

* :class:`ScanSuccess` – the page rendered and axe-core produced results;
* :class:`ScanSkipped` – the response gate rejected the page (HTTP error or
  non-HTML content); not a failure;
* :class:`ScanFailed`  – navigation or analysis raised.

All variants are keyed by the *final* URL after redirects and remember the
URL that was dequeued (``original_url``) plus every other input that led to
the same page (``sources``).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Mapping, Tuple, Union

__all__ = [
    "Navigation",
    "AuditOutcome",
    "ScanSuccess",
    "ScanSkipped",
    "ScanFailed",
    "PageResult",
    "with_sources",
]


@dataclass(frozen=True, slots=True)
class Navigation:
    """What the browser reports after loading a URL."""

    final_url: str
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    title: str = ""

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""


@dataclass(frozen=True, slots=True)
class AuditOutcome:
    """Raw axe-core result lists; rule entries are passed through untouched."""

    violations: List[Dict[str, Any]] = field(default_factory=list)
    passes: List[Dict[str, Any]] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class _PageResultBase:
    outcome: ClassVar[str] = ""

    url: str
    original_url: str
    sources: Tuple[str, ...] = ()

    def _common(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome,
            "url": self.url,
            "originalUrl": self.original_url,
            "sources": list(self.sources),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ScanSuccess(_PageResultBase):
    outcome: ClassVar[str] = "success"

    status: int
    content_type: str
    title: str
    violations: List[Dict[str, Any]] = field(default_factory=list)
    passes: List[Dict[str, Any]] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def violation_nodes(self) -> int:
        return sum(len(v.get("nodes", [])) for v in self.violations)

    def to_dict(self) -> Dict[str, Any]:
        data = self._common()
        data.update(
            status=self.status,
            contentType=self.content_type,
            title=self.title,
            violations=self.violations,
            passes=self.passes,
            incomplete=self.incomplete,
            error=None,
        )
        return data


@dataclass(frozen=True, slots=True, kw_only=True)
class ScanSkipped(_PageResultBase):
    outcome: ClassVar[str] = "skipped"

    reason: str
    status: int
    content_type: str

    violation_nodes: ClassVar[int] = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self._common()
        data.update(
            status=self.status,
            contentType=self.content_type,
            skipped=True,
            reason=self.reason,
            violations=[],
            error=None,
        )
        return data


@dataclass(frozen=True, slots=True, kw_only=True)
class ScanFailed(_PageResultBase):
    outcome: ClassVar[str] = "failed"

    error: str

    violation_nodes: ClassVar[int] = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self._common()
        data.update(violations=[], error=self.error)
        return data


PageResult = Union[ScanSuccess, ScanSkipped, ScanFailed]


def with_sources(result: PageResult, sources: Tuple[str, ...]) -> PageResult:
    """Copy of *result* carrying *sources*; results themselves stay immutable."""
    if not sources or sources == result.sources:
        return result
    return replace(result, sources=sources)
