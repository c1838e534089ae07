from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field

from kbase.models.page import Page


class Category(BaseModel):
    """A directory-level grouping node of the content tree.

    In the flat contents list ``files`` only holds pages.  Once nested, it
    holds the child categories followed by the pages of the directory.
    """

    model_config = ConfigDict(populate_by_name=True)

    slug: str
    title: str
    is_index: bool = False
    is_directory: bool = True
    css_class: str = Field(alias="class")
    sort: int = 0
    show_on_home: bool = True
    active: bool = False
    files: List[Union["Category", Page]] = []

    def pages(self) -> List[Page]:
        return [item for item in self.files if isinstance(item, Page)]

    def children(self) -> List["Category"]:
        return [item for item in self.files if isinstance(item, Category)]


Category.model_rebuild()
