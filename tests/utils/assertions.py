"""
Test Assertions
===============

Custom assertion helpers for inlining results.
"""

import base64

from rasterinline.core.urls import extract_css_url, is_data_uri
from rasterinline.models.schemas import InlineReport, ResourceKind


def assert_data_uri(value: str, mime_type: str, content: bytes) -> None:
    """Assert that a value is a base64 data URI holding the given content."""
    assert is_data_uri(value), f"Not a data URI: {value[:40]!r}"
    header, payload = value.split(",", 1)
    assert header == f"data:{mime_type};base64"
    assert base64.b64decode(payload) == content


def assert_css_data_uri(token: str, mime_type: str, content: bytes) -> None:
    """Assert that a url() token wraps a data URI holding the given content."""
    assert_data_uri(extract_css_url(token), mime_type, content)


def assert_report(
    report: InlineReport, inlined: int = 0, skipped: int = 0, failed: int = 0
) -> None:
    """Assert the counters of an inlining report."""
    assert report.inlined == inlined
    assert report.skipped == skipped
    assert len(report.failures) == failed
    assert report.succeeded is (failed == 0)


def assert_failed_url(report: InlineReport, url: str, kind: ResourceKind) -> None:
    """Assert that a report lists a failure for the given URL."""
    matching = [failure for failure in report.failures if failure.url == url]
    assert matching, f"No failure recorded for {url}"
    assert matching[0].kind == kind
