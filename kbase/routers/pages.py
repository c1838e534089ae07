import logging
import time
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from kbase.config import get_config
from kbase.models.category import Category
from kbase.models.config import SiteConfig
from kbase.models.response import CategoryResponse, ContentsResponse, PageResponse
from kbase.services.category import resolve_category
from kbase.services.content_processor import clean_string, process_meta
from kbase.services.contents import build_contents
from kbase.services.nesting import nest
from kbase.services.page_resolver import content_root, resolve_page

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Whoops. Looks like this page doesn't exist."


@router.get("/api/contents", response_model=ContentsResponse, summary="Flat category list")
def contents(
    active: Optional[str] = Query(None, description="Slug to mark as active"),
    config: SiteConfig = Depends(get_config),
) -> ContentsResponse:
    return ContentsResponse(categories=build_contents(active, config))


@router.get("/api/tree", response_model=List[Category], summary="Nested category tree")
def tree(
    active: Optional[str] = Query(None, description="Slug to mark as active"),
    config: SiteConfig = Depends(get_config),
) -> List[Category]:
    return nest(build_contents(active, config))


@router.get("/api/categories/{slug:path}", response_model=CategoryResponse, summary="One category")
def category(slug: str, config: SiteConfig = Depends(get_config)) -> CategoryResponse:
    found = resolve_category(nest(build_contents(slug, config)), slug)
    if found is None:
        logger.info("Category not found: %s", slug)
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return CategoryResponse(category=found, body_class="page-" + clean_string(slug))


@router.get("/api/pages/{slug:path}", response_model=PageResponse, summary="One rendered page")
def page(slug: str, config: SiteConfig = Depends(get_config)) -> PageResponse:
    """Render the page at *slug*; the empty slug is the home page.

    Without an ``index`` document the home page is a bare navigation view.
    """
    slug = slug.strip("/") or "index"
    file_path = _document_path(slug, config)
    pages = build_contents(slug, config)

    if slug == "index" and (file_path is None or not file_path.is_file()):
        return PageResponse(body_class="page-home", pages=pages)

    resolved = resolve_page(file_path, config) if file_path is not None else None
    if resolved is None:
        logger.info("Page not found: %s", slug)
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    try:
        raw = file_path.read_text(encoding="utf-8")
        modified = time.localtime(file_path.stat().st_mtime)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Page %s vanished while rendering: %s", slug, exc)
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    return PageResponse(
        page=resolved,
        meta=process_meta(raw),
        last_modified=time.strftime(config.datetime_format, modified),
        body_class="page-" + clean_string(slug),
        pages=pages,
    )


def _document_path(slug: str, config: SiteConfig) -> Optional[Path]:
    """Map *slug* to its document path, or ``None`` if it escapes the content root.

    A directory slug maps to the directory's ``index`` document.
    """
    root = content_root(config)
    candidate = (root / (slug + config.document_extension)).resolve()
    if not candidate.is_file():
        landing = (root / slug / ("index" + config.document_extension)).resolve()
        if landing.is_file():
            candidate = landing
    try:
        candidate.relative_to(root)
    except ValueError:
        logger.warning("Rejected path outside content root: %s", slug)
        return None
    return candidate
