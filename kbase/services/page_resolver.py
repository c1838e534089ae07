import logging
import posixpath
from pathlib import Path
from typing import Optional

from kbase.models.config import SiteConfig
from kbase.models.page import Page
from kbase.services.content_processor import (
    meta_bool,
    meta_int,
    process_meta,
    process_vars,
    slug_to_title,
    strip_meta,
)
from kbase.services.renderer import html_to_text, prune, render

logger = logging.getLogger(__name__)


def content_root(config: SiteConfig) -> Path:
    return Path(config.content_dir).resolve()


def page_slug(relative: str, extension: str) -> str:
    """Turn a root-relative document path into its page slug.

    ``"sub/page.md"`` -> ``"sub/page"``; ``"sub/index.md"`` -> ``"sub"``;
    ``"index.md"`` -> ``""``.
    """
    relative = relative.replace("\\", "/").strip().lstrip("/")
    if relative.endswith(extension):
        relative = relative[: -len(extension)]
    head, name = posixpath.split(relative)
    if name == "index":
        return head
    return relative


def page_title(meta: dict, slug: str, path: Path) -> str:
    """Metadata title, else one derived from the slug (or file name for the root index)."""
    if meta.get("title"):
        return meta["title"]
    return slug_to_title(slug) or slug_to_title(path.name)


def page_sort(meta: dict, config: SiteConfig, path: Path) -> int:
    sort = meta_int(meta, config.page_sort_meta)
    if sort is None:
        logger.warning(
            "Ignoring malformed sort value in %s",
            path,
            extra={"value": meta.get(config.page_sort_meta)},
        )
        return 0
    return sort


def resolve_page(file_path: Path, config: SiteConfig) -> Optional[Page]:
    """Read and render the document at *file_path*.

    Returns ``None`` when the file cannot be read; callers treat that as
    "page does not exist".
    """
    file_path = Path(file_path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Page %s not readable: %s", file_path, exc)
        return None

    root = content_root(config)
    try:
        relative = file_path.resolve().relative_to(root).as_posix()
    except ValueError:
        logger.debug("Page %s lies outside the content root %s", file_path, root)
        return None

    slug = page_slug(relative, config.document_extension)
    meta = process_meta(raw)
    html = render(process_vars(strip_meta(raw), config))

    return Page(
        slug=slug,
        title=page_title(meta, slug, file_path),
        body=html,
        excerpt=prune(html_to_text(html), config.excerpt_length),
        sort=page_sort(meta, config, file_path),
        show_on_home=meta_bool(meta, "show_on_home", config.show_on_home_default),
    )
