"""
Test Configuration
==================

Pytest configuration with shared fixtures: testing settings, in-memory fetchers
and sample documents.
"""

import os

# Logging is configured when rasterinline.config.logging is first imported
os.environ.setdefault("RASTERINLINE_ENVIRONMENT", "testing")
os.environ.setdefault("RASTERINLINE_LOG_LEVEL", "DEBUG")

import pytest
from pathlib import Path
from typing import Generator

from rasterinline.config.settings import Settings
from pydantic_settings import SettingsConfigDict
from rasterinline.models.schemas import (
    ImageReference,
    InlineDocument,
    StyleDeclaration,
    StylesheetLink,
)

from tests.utils.mocks import MockResourceFetcher, PNG_BYTES


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    max_concurrent_fetches: int = 4
    fail_on_missing_resource: bool = False

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="RASTERINLINE_TEST_")


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture
def strict_settings() -> TestSettings:
    """Settings that make missing resources fatal."""
    return TestSettings(fail_on_missing_resource=True)


@pytest.fixture
def mock_fetcher() -> MockResourceFetcher:
    """In-memory fetcher serving a small site under http://example.com/."""
    return MockResourceFetcher(
        {
            "http://example.com/images/logo.png": PNG_BYTES,
            "http://example.com/images/bg.gif": b"GIF89a",
            "http://example.com/css/site.css": (
                "body { background: url(../images/bg.gif); }\n"
                ".logo { background-image: url('logo.svg'); }"
            ),
            "http://example.com/css/logo.svg": b"<svg/>",
        }
    )


@pytest.fixture
def sample_document() -> InlineDocument:
    """Document with one reference of each kind plus an already inlined image."""
    return InlineDocument(
        base_url="http://example.com/pages/index.html",
        images=[
            ImageReference(src="../images/logo.png"),
            ImageReference(src="data:image/png;base64,AAA="),
        ],
        styles=[
            StyleDeclaration(property="background-image", value='url("/images/bg.gif")'),
        ],
        stylesheets=[StylesheetLink(href="/css/site.css")],
    )


@pytest.fixture
def local_site(tmp_path: Path) -> Generator[Path, None, None]:
    """Directory with a stylesheet and an image on disk."""
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "some.css").write_text("p { font-size: 14px; }", encoding="utf-8")
    (tmp_path / "green.png").write_bytes(PNG_BYTES)
    yield tmp_path
