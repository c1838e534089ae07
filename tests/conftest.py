"""
Pytest configuration and shared fixtures.
"""
from pathlib import Path

import pytest

from kbase.models.config import SiteConfig

CONTENT_DIR = Path(__file__).parent / "content"


@pytest.fixture
def config():
    """Site configuration pointing at the fixture content tree."""
    return SiteConfig(
        base_url="",
        image_url="/images",
        content_dir=str(CONTENT_DIR),
        excerpt_length=400,
        page_sort_meta="sort",
        category_sort=True,
        show_on_home_default=True,
        searchExtraLanguages=["ru"],
        debug=False,
    )


@pytest.fixture
def write_tree(tmp_path):
    """Write a ``{relative path: text}`` mapping under a temporary root."""

    def _write(files):
        root = tmp_path.resolve()
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def content_dir():
    return CONTENT_DIR
