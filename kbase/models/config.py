from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Variable(BaseModel):
    """A custom ``%name%`` placeholder substituted into page content."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: str


class SiteConfig(BaseModel):
    """Settings consumed by every build and query call.

    Instances are immutable; each call receives the config explicitly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    site_title: str = "Knowledge Base"
    base_url: Optional[str] = None
    image_url: Optional[str] = None
    content_dir: str = "content"
    excerpt_length: int = 400
    page_sort_meta: str = "sort"
    category_sort: bool = True
    show_on_home_default: bool = True
    search_extra_languages: List[str] = Field(default=[], alias="searchExtraLanguages")
    variables: List[Variable] = []
    datetime_format: str = "%d %b %Y"
    debug: bool = False

    document_extension: str = ".md"
    sort_file_name: str = "sort"
    meta_file_name: str = "meta"
    title_boost: float = 10.0
