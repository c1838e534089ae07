"""Metadata extraction, template variables and slug/title conversion."""

import os
import re
from typing import Dict, NamedTuple, Optional

from kbase.models.config import SiteConfig

_BOM = "\ufeff"

# Separators and whitespace runs collapsed into a single dash or underscore
_SEPARATOR_RE = re.compile(r"[\s/\\_-]+")

# Leading metadata blocks, tried in order.  Both are anchored to the start of
# the document and non-greedy so only the first block is ever consumed.
_BLOCK_STYLES = (
    ("comment", re.compile(r"\A/\*(.*?)\*/", re.DOTALL)),
    ("yaml", re.compile(r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*\r?$", re.DOTALL | re.MULTILINE)),
)

# One "key: value" line inside a block
_META_LINE_RE = re.compile(r"^(.*?): (.*)$")


class MetaBlock(NamedTuple):
    style: str  # "comment" or "yaml"
    raw: str  # text between the delimiters
    remainder: str  # document text after the block


def clean_string(value: str, underscore: bool = False) -> str:
    """Lower-case *value* and join its words with ``-`` (or ``_``).

    Path separators count as word breaks, so ``"/some/dir/"`` becomes
    ``"some-dir"``.
    """
    sep = "_" if underscore else "-"
    token = _SEPARATOR_RE.sub(sep, value.strip().lower())
    return token.strip(sep)


def slug_to_title(slug: str) -> str:
    """``"dir/some-example-file.md"`` -> ``"Some Example File"``."""
    name = os.path.splitext(slug.replace("\\", "/").rstrip("/").split("/")[-1])[0]
    words = re.sub(r"[-_]+", " ", name).split()
    return " ".join(word.capitalize() for word in words)


def parse_block(text: str) -> Optional[MetaBlock]:
    """Return the first leading metadata block of *text*, if any."""
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    for style, pattern in _BLOCK_STYLES:
        match = pattern.match(text)
        if match:
            return MetaBlock(style, match.group(1), text[match.end():])
    return None


def process_meta(text: str) -> Dict[str, str]:
    """Extract the metadata mapping from the leading block of *text*.

    Keys are cleaned in underscore mode (``"Multi word"`` -> ``"multi_word"``);
    values are kept as raw strings.  Lines that are not ``key: value`` pairs
    are ignored, and a document without a block yields ``{}``.
    """
    block = parse_block(text)
    meta: Dict[str, str] = {}
    if block is None:
        return meta

    for line in block.raw.strip().splitlines():
        match = _META_LINE_RE.match(line.strip())
        if not match:
            continue
        key, value = match.group(1).strip(), match.group(2).strip()
        if key and value:
            meta[clean_string(key, underscore=True)] = value
    return meta


def strip_meta(text: str) -> str:
    """Remove the first metadata block and the whitespace around it."""
    block = parse_block(text)
    if block is None:
        return text.lstrip(_BOM).strip()
    return block.remainder.strip()


def process_vars(text: str, config: SiteConfig) -> str:
    """Substitute ``%base_url%``, ``%image_url%`` and custom ``%name%`` variables."""
    if config.base_url is not None:
        text = text.replace("%base_url%", config.base_url)
    if config.image_url is not None:
        text = text.replace("%image_url%", config.image_url)
    for variable in config.variables:
        text = text.replace(f"%{variable.name}%", variable.content)
    return text


def meta_int(meta: Dict[str, str], key: str, default: int = 0) -> Optional[int]:
    """Return ``meta[key]`` as an int, *default* when absent, ``None`` when malformed."""
    if not key or key not in meta:
        return default
    try:
        return int(meta[key].strip())
    except ValueError:
        return None


def meta_bool(meta: Dict[str, str], key: str, default: bool) -> bool:
    """Return ``meta[key]`` as a bool, falling back to *default*."""
    raw = meta.get(key, "").strip().lower()
    if raw in ("true", "yes", "1"):
        return True
    if raw in ("false", "no", "0"):
        return False
    return default
