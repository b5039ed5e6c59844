"""
Test configuration and fixtures for the SEO Page Analyzer API.

File logging is switched off before the app is imported so test runs do not
write into ./logs.
"""

import os
from typing import Generator

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    Dependency overrides are cleared after each test.
    """
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()


def build_page(
    *,
    title: str = "Welcome to Example Widgets Store",
    description: str = None,
    head_extra: str = "",
    body: str = "",
) -> str:
    """Minimal HTML document with the given head and body content."""
    description_tag = (
        f'<meta name="description" content="{description}">' if description is not None else ""
    )
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title>{description_tag}{head_extra}"
        f"</head><body>{body}</body></html>"
    )


@pytest.fixture
def page_builder():
    return build_page
