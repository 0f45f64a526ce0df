# File: a11y_scout/aggregator.py
"""a11y_scout.aggregator: The result of one scan run and its summary figures."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from a11y_scout.models import PageResult, ScanFailed, ScanSkipped, ScanSuccess


class RunSummary(TypedDict):
    """Headline numbers of a run, as written to ``summary.json``."""

    runId: str
    startedAt: str
    pagesScanned: int
    pagesWithViolations: int
    totalViolations: int
    pagesSkipped: int
    pagesFailed: int


@dataclass(slots=True)
class ScanRun:
    """Everything a run produced: identity, effective config, targets and page results."""

    run_id: str
    started_at: str
    tool_version: str
    config: Dict[str, Any]
    targets: List[str]
    finished_at: Optional[str] = None
    results_by_url: Dict[str, PageResult] = field(default_factory=dict)

    def summary(self) -> RunSummary:
        results = list(self.results_by_url.values())
        successes = [r for r in results if isinstance(r, ScanSuccess)]
        return {
            "runId": self.run_id,
            "startedAt": self.started_at,
            "pagesScanned": len(results),
            "pagesWithViolations": sum(1 for r in successes if r.violations),
            "totalViolations": sum(r.violation_nodes for r in successes),
            "pagesSkipped": sum(1 for r in results if isinstance(r, ScanSkipped)),
            "pagesFailed": sum(1 for r in results if isinstance(r, ScanFailed)),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runId": self.run_id,
            "startedAt": self.started_at,
            "finishedAt": self.finished_at,
            "toolVersion": self.tool_version,
            "config": self.config,
            "targets": self.targets,
            "resultsByUrl": {url: r.to_dict() for url, r in self.results_by_url.items()},
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the whole run."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


__all__ = ["RunSummary", "ScanRun"]
