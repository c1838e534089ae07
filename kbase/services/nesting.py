"""Conversion between the flat category list and the nested navigation tree."""

import posixpath
from typing import Dict, List, Union

from kbase.models.category import Category
from kbase.models.page import Page

SEPARATOR = "/"

Node = Union[Category, Page]


def parent_slug(slug: str) -> str:
    """``"a/b/c"`` -> ``"a/b"``; a single segment has no parent (``""``)."""
    return posixpath.dirname(slug)


def nest(categories: List[Category]) -> List[Category]:
    """Nest flat *categories* by path segment.

    Each category is placed under the category whose slug is its slug minus
    the last segment; a category without such a parent stays at the top
    level.  Child categories precede the pages of their parent and keep the
    relative order they had in *categories*.  The input is left untouched.
    """
    copies = [category.model_copy(update={"files": category.pages()}) for category in categories]
    by_slug: Dict[str, Category] = {category.slug: category for category in copies}
    children: Dict[str, List[Category]] = {}

    tree: List[Category] = []
    for category in copies:
        parent = by_slug.get(parent_slug(category.slug))
        if parent is None or parent is category:
            tree.append(category)
        else:
            children.setdefault(parent.slug, []).append(category)

    for slug, nested in children.items():
        parent = by_slug[slug]
        parent.files = list(nested) + parent.files
    return tree


def flatten(tree: List[Category]) -> List[Category]:
    """Return the flat projection of a nested *tree* in pre-order."""
    flat: List[Category] = []

    def visit(category: Category) -> None:
        flat.append(category.model_copy(update={"files": category.pages()}))
        for child in category.children():
            visit(child)

    for category in tree:
        visit(category)
    return flat
