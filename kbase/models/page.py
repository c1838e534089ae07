from pydantic import BaseModel


class Page(BaseModel):
    """One document of the knowledge base, rebuilt on every read."""

    slug: str  # forward-slash path, no extension, no trailing "index"
    title: str
    body: str = ""  # rendered HTML; empty in navigation listings
    excerpt: str = ""
    sort: int = 0
    show_on_home: bool = True
    active: bool = False
