# File: a11y_scout/report/__init__.py
"""a11y_scout.report: Writers for scan run results (JSON files and an HTML page)."""

from a11y_scout.report.html_report import render_html
from a11y_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
