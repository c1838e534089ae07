from typing import List, Optional

from kbase.models.category import Category
from kbase.services.nesting import SEPARATOR


def normalize_category_slug(slug: str) -> List[str]:
    """Split *slug* into path segments, ignoring outer and doubled separators."""
    return [segment for segment in slug.replace("\\", SEPARATOR).split(SEPARATOR) if segment]


def resolve_category(tree: List[Category], slug: str) -> Optional[Category]:
    """Find the nested category addressed by *slug*, one segment at a time.

    An empty slug addresses the root category.  Returns ``None`` as soon as a
    segment has no matching child.
    """
    segments = normalize_category_slug(slug)
    if not segments:
        return next((category for category in tree if category.is_index), None)

    level: List[Category] = [category for category in tree if not category.is_index]
    found: Optional[Category] = None
    for depth in range(1, len(segments) + 1):
        target = SEPARATOR.join(segments[:depth])
        found = next((category for category in level if category.slug == target), None)
        if found is None:
            return None
        level = found.children()
    return found
