from typing import Dict, List, Optional

from pydantic import BaseModel

from kbase.models.category import Category
from kbase.models.page import Page


class ContentsResponse(BaseModel):
    categories: List[Category]


class PageResponse(BaseModel):
    page: Optional[Page] = None
    """The requested page; ``None`` for a home view without an index document."""
    meta: Dict[str, str] = {}
    last_modified: Optional[str] = None
    body_class: str
    pages: List[Category]


class CategoryResponse(BaseModel):
    category: Category
    body_class: str


class SearchResponse(BaseModel):
    query: str
    results: List[Page]
    pages: List[Category]
    body_class: str = "page-search"
