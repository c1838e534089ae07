import re

import markdown
from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")

_EXTENSIONS = ["fenced_code", "tables", "toc"]


def render(text: str) -> str:
    """Render Markdown *text* to an HTML fragment."""
    return markdown.markdown(text, extensions=_EXTENSIONS)


def html_to_text(html: str) -> str:
    """Strip tags and entities from *html*, collapsing whitespace."""
    text = BeautifulSoup(html, "lxml").get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def prune(text: str, length: int, suffix: str = "...") -> str:
    """Truncate *text* to at most *length* characters on a word boundary."""
    if len(text) <= length:
        return text
    head = text[:length]
    # Cutting mid-word: drop the partial word
    if not text[length].isspace() and _WHITESPACE_RE.search(head):
        head = head.rsplit(None, 1)[0]
    return head.rstrip() + suffix
