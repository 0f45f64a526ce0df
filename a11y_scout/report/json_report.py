# a11y_scout/report/json_report.py

"""
JSON output of a scan run.

Writes ``results.json`` (the full run) and ``summary.json`` (headline
numbers) into ``<output_dir>/<run_id>/``.
"""
import json
from pathlib import Path
from typing import Any

from a11y_scout.aggregator import ScanRun


def _dump(data: Any, path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def render_json(run: ScanRun, output_dir: Path | str) -> Path:
    """
    Save *run* under ``output_dir/<run_id>`` and return that directory.

    :param run: finished ScanRun
    :param output_dir: parent directory of all runs (e.g. ``site/runs``)
    :return: Path of the run directory

    Example:
    ```python
    from a11y_scout.report.json_report import render_json
    run_dir = render_json(run, 'site/runs')
    print(f"Results saved to: {run_dir}")
    ```
    """
    run_dir = Path(output_dir) / run.run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    _dump(run.to_dict(), run_dir / "results.json")
    _dump(run.summary(), run_dir / "summary.json")

    return run_dir
