# File: a11y_scout/report/html_report.py
"""a11y_scout.report.html_report: HTML page for one run, rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from a11y_scout.aggregator import ScanRun
from a11y_scout.models import ScanFailed, ScanSkipped, ScanSuccess

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _page_rows(run: ScanRun) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for url, result in sorted(run.results_by_url.items()):
        row: dict[str, Any] = {
            "url": url,
            "outcome": result.outcome,
            "sources": list(result.sources),
            "title": "",
            "violations": 0,
            "nodes": 0,
            "detail": "",
        }
        if isinstance(result, ScanSuccess):
            row.update(title=result.title, violations=len(result.violations), nodes=result.violation_nodes)
        elif isinstance(result, ScanSkipped):
            row["detail"] = result.reason
        elif isinstance(result, ScanFailed):
            row["detail"] = result.error
        rows.append(row)
    return rows


def render_html(
    run: ScanRun,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the run page from a template and save it to *output_path*.

    Args:
        run: finished ScanRun.
        template_dir: directory containing ``report.html.j2``; *None* uses
            the template shipped with the package.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from a11y_scout.report.html_report import render_html
    html_path = render_html(run, template_dir=None, output_path='site/runs/x/index.html')
    ```
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "run": run,
        "summary": run.summary(),
        "pages": _page_rows(run),
    }
    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
