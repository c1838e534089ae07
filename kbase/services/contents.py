"""Flat category/page listing of the whole content root.

The build runs in two passes so that a page never depends on the order in
which its directory was enumerated:

1. every directory becomes a :class:`Category`, keyed by its slug;
2. every document becomes a :class:`Page` attached to the category of its
   parent directory.

Categories are then ordered by their sort key (the synthetic root always
stays first) and each category's pages by theirs.
"""

import logging
import posixpath
from pathlib import Path
from typing import Dict, List, Optional

from kbase.models.category import Category
from kbase.models.config import SiteConfig
from kbase.models.page import Page
from kbase.services.content_processor import (
    clean_string,
    meta_bool,
    process_meta,
    slug_to_title,
)
from kbase.services.files import Entry, list_entries, relative_slug_path
from kbase.services.page_resolver import content_root, page_slug, page_sort, page_title

logger = logging.getLogger(__name__)

ROOT_SLUG = "."


class ContentTreeError(Exception):
    """A document was found whose directory has no category."""


def normalize_active(active_slug: Optional[str]) -> Optional[str]:
    """``"/sub/page/"`` -> ``"sub/page"``; ``None`` stays ``None``."""
    if active_slug is None:
        return None
    return active_slug.strip().replace("\\", "/").strip("/")


def _root_category(active: Optional[str]) -> Category:
    return Category(
        slug=ROOT_SLUG,
        title="",
        is_index=True,
        css_class="category-index",
        sort=0,
        show_on_home=True,
        active=active == ROOT_SLUG,
    )


def _read_sort_file(directory: Path, config: SiteConfig) -> int:
    sort_file = directory / config.sort_file_name
    if not sort_file.is_file():
        return 0
    try:
        return int(sort_file.read_text(encoding="utf-8").strip())
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("Ignoring unreadable sort file %s: %s", sort_file, exc)
        return 0


def _read_dir_meta(directory: Path, config: SiteConfig) -> Dict[str, str]:
    meta_file = directory / config.meta_file_name
    if not meta_file.is_file():
        return {}
    try:
        return process_meta(meta_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable meta file %s: %s", meta_file, exc)
        return {}


def _directory_category(entry: Entry, slug: str, active: Optional[str], config: SiteConfig) -> Category:
    meta = _read_dir_meta(entry.path, config)
    return Category(
        slug=slug,
        title=meta.get("title") or slug_to_title(slug),
        is_index=False,
        css_class="category-" + clean_string(slug),
        sort=_read_sort_file(entry.path, config) if config.category_sort else 0,
        show_on_home=meta_bool(meta, "show_on_home", config.show_on_home_default),
        active=active == slug,
    )


def _document_page(entry: Entry, relative: str, active: Optional[str], config: SiteConfig) -> Optional[Page]:
    try:
        raw = entry.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable document %s: %s", entry.path, exc)
        return None

    slug = page_slug(relative, config.document_extension)
    meta = process_meta(raw)
    return Page(
        slug=slug,
        title=page_title(meta, slug, entry.path),
        sort=page_sort(meta, config, entry.path),
        show_on_home=meta_bool(meta, "show_on_home", config.show_on_home_default),
        active=active is not None and active == slug,
    )


def build_contents(active_slug: Optional[str], config: SiteConfig) -> List[Category]:
    """Return the flat, sorted category list for the content root."""
    root = content_root(config)
    active = normalize_active(active_slug)
    entries = list_entries(root)
    directories = [entry for entry in entries if entry.is_dir]

    index = _root_category(active)
    categories: Dict[str, Category] = {ROOT_SLUG: index}

    for entry in directories:
        slug = relative_slug_path(entry.path, root)
        categories[slug] = _directory_category(entry, slug, active, config)

    for entry in entries:
        if not entry.is_file or entry.path.suffix != config.document_extension:
            continue
        relative = relative_slug_path(entry.path, root)
        parent = posixpath.dirname(relative) or ROOT_SLUG
        category = categories.get(parent)
        if category is None:
            if config.debug:
                raise ContentTreeError(f"No category {parent!r} for document {relative!r}")
            logger.warning("Skipping document without category", extra={"document": relative})
            continue
        page = _document_page(entry, relative, active, config)
        if page is not None:
            category.files.append(page)

    others = sorted((c for slug, c in categories.items() if slug != ROOT_SLUG), key=lambda c: c.sort)
    ordered = [index] + others
    for category in ordered:
        category.files = sorted(category.files, key=lambda page: page.sort)

    logger.info("Built contents", extra={"categories": len(ordered), "active": active})
    return ordered
