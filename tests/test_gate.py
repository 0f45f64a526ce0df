# File: tests/test_gate.py
import pytest

from a11y_scout.gate import should_analyze


@pytest.mark.parametrize(
    "status,content_type,ok,reason",
    [
        (200, "text/html; charset=utf-8", True, None),
        (200, "TEXT/HTML", True, None),
        (200, None, True, None),
        (200, "", True, None),
        (None, "text/html", True, None),
        (301, "text/html", True, None),
        (404, "text/html", False, "HTTP 404"),
        (500, None, False, "HTTP 500"),
        (200, "application/pdf", False, "skipped non-html content (application/pdf)"),
        (200, "application/json", False, "skipped non-html content (application/json)"),
        (200, "application/zip", False, "skipped non-html content (application/zip)"),
    ],
)
def test_should_analyze(status, content_type, ok, reason):
    decision = should_analyze(status, content_type)
    assert decision.ok is ok
    assert bool(decision) is ok
    assert decision.reason == reason


def test_status_checked_before_content_type():
    assert should_analyze(503, "application/pdf").reason == "HTTP 503"
