"""Full-text search over every document of the content root.

A fresh index is built for each query.  Title and body are scored as two
BM25+ fields and combined with the title weighted by ``title_boost``.
Tokens are reduced with the Snowball stemmer of English plus every extra
language configured, so a document matches when it shares any stem with
the query under any of those languages.
"""

import logging
import re
from typing import Dict, List, Optional, Set

from bs4 import BeautifulSoup
from nltk.stem.snowball import SnowballStemmer
from rank_bm25 import BM25Plus

from kbase.models.config import SiteConfig
from kbase.models.page import Page
from kbase.models.search import SearchDocument, SearchHit
from kbase.services.content_processor import process_meta, slug_to_title
from kbase.services.files import list_entries, relative_slug_path
from kbase.services.page_resolver import content_root, resolve_page

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

# ISO 639-1 codes accepted in ``searchExtraLanguages``
SNOWBALL_LANGUAGES: Dict[str, str] = {
    "ar": "arabic",
    "da": "danish",
    "de": "german",
    "en": "english",
    "es": "spanish",
    "fi": "finnish",
    "fr": "french",
    "hu": "hungarian",
    "it": "italian",
    "nl": "dutch",
    "no": "norwegian",
    "pt": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "sv": "swedish",
}

HIGHLIGHT_TEMPLATE = r'<span class="search-query">\1</span>'

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


class Analyzer:
    """Tokenizer plus per-language stemming."""

    def __init__(self, languages: List[str]):
        self.stemmers: List[SnowballStemmer] = []
        for code in [DEFAULT_LANGUAGE] + [c for c in languages if c != DEFAULT_LANGUAGE]:
            name = SNOWBALL_LANGUAGES.get(code.lower())
            if name is None:
                logger.warning("No stemmer for search language %r; ignoring it", code)
                continue
            self.stemmers.append(SnowballStemmer(name))

    def terms(self, text: str) -> List[str]:
        terms: List[str] = []
        for token in _TOKEN_RE.findall(text.lower()):
            seen: Set[str] = set()
            for stemmer in self.stemmers:
                stem = stemmer.stem(token)
                if stem not in seen:
                    seen.add(stem)
                    terms.append(stem)
        return terms


class SearchIndex:
    """In-memory two-field index over a fixed list of documents."""

    def __init__(self, documents: List[SearchDocument], analyzer: Analyzer, title_boost: float = 10.0):
        self.documents = documents
        self.analyzer = analyzer
        self.title_boost = title_boost
        self._titles = [analyzer.terms(doc.title) for doc in documents]
        self._bodies = [analyzer.terms(doc.body) for doc in documents]
        self._vocabulary = [set(t) | set(b) for t, b in zip(self._titles, self._bodies)]
        self._title_bm25 = self._field_index(self._titles)
        self._body_bm25 = self._field_index(self._bodies)

    @staticmethod
    def _field_index(corpus: List[List[str]]) -> Optional[BM25Plus]:
        # BM25 divides by the average field length
        if not corpus or not any(corpus):
            return None
        return BM25Plus(corpus)

    def query(self, text: str) -> List[SearchHit]:
        terms = self.analyzer.terms(text)
        if not terms or not self.documents:
            return []

        title_scores = self._title_bm25.get_scores(terms) if self._title_bm25 else None
        body_scores = self._body_bm25.get_scores(terms) if self._body_bm25 else None
        wanted = set(terms)

        hits: List[SearchHit] = []
        for position, doc in enumerate(self.documents):
            if not wanted & self._vocabulary[position]:
                continue
            score = 0.0
            if title_scores is not None:
                score += self.title_boost * float(title_scores[position])
            if body_scores is not None:
                score += float(body_scores[position])
            hits.append(SearchHit(ref=doc.id, score=score))

        # sorted() is stable: equal scores keep document order
        return sorted(hits, key=lambda hit: hit.score, reverse=True)


def collect_documents(config: SiteConfig) -> List[SearchDocument]:
    """Read every document under the content root into a search document."""
    root = content_root(config)
    documents: List[SearchDocument] = []
    for entry in list_entries(root, "**/*" + config.document_extension):
        if not entry.is_file:
            continue
        ref = relative_slug_path(entry.path, root)
        try:
            raw = entry.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Leaving %s out of the search index: %s", ref, exc)
            continue
        meta = process_meta(raw)
        documents.append(
            SearchDocument(id=ref, title=meta.get("title") or slug_to_title(ref), body=raw)
        )
    return documents


def build_index(config: SiteConfig) -> SearchIndex:
    return SearchIndex(
        collect_documents(config),
        Analyzer(config.search_extra_languages),
        title_boost=config.title_boost,
    )


def sanitize_query(query: str) -> str:
    """Strip markup from a user query."""
    if not query:
        return ""
    return BeautifulSoup(query, "lxml").get_text().strip()


def highlight(text: str, query: str) -> str:
    """Wrap each case-insensitive occurrence of *query* in *text*."""
    if not query:
        return text
    pattern = re.compile("(" + re.escape(query) + ")", re.IGNORECASE)
    return pattern.sub(HIGHLIGHT_TEMPLATE, text)


def search(query: str, config: SiteConfig) -> List[Page]:
    """Run *query* against a freshly built index and return the matching pages.

    Pages come back in descending relevance with the query highlighted in
    their excerpts.  An empty query or no match gives an empty list.
    """
    query = sanitize_query(query)
    if not query:
        return []

    hits = build_index(config).query(query)
    root = content_root(config)

    results: List[Page] = []
    for hit in hits:
        page = resolve_page(root / hit.ref, config)
        if page is None:
            logger.warning("Search hit %s could not be resolved", hit.ref)
            continue
        page.excerpt = highlight(page.excerpt, query)
        results.append(page)

    logger.info("Search finished", extra={"query": query, "results": len(results)})
    return results
