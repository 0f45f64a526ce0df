# File: a11y_scout/gate.py
"""a11y_scout.gate: Decide whether a loaded response is worth running axe-core against."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class GateDecision:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def should_analyze(status: Optional[int], content_type: Optional[str] = None) -> GateDecision:
    """Reject HTTP errors (>= 400) and responses that declare a non-HTML type.

    A missing or empty content type is accepted: some servers omit the header
    for perfectly normal pages.
    """
    if status is not None and status >= 400:
        return GateDecision(False, f"HTTP {status}")
    if content_type and "text/html" not in content_type.lower():
        return GateDecision(False, f"skipped non-html content ({content_type})")
    return GateDecision(True)


__all__ = ["GateDecision", "should_analyze"]
