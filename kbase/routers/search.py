import logging

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from kbase.config import get_config
from kbase.models.config import SiteConfig
from kbase.models.response import SearchResponse
from kbase.services.contents import build_contents
from kbase.services.search import sanitize_query, search

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.get("/api/search", response_model=SearchResponse, summary="Full-text search")
@limiter.limit("30/minute")
def search_endpoint(
    request: Request,
    q: str = Query("", description="Search terms; markup is stripped"),
    config: SiteConfig = Depends(get_config),
) -> SearchResponse:
    """Search every document; titles weigh more than body text.

    Each call builds its own index from the files on disk, so the endpoint is
    rate limited per client address.
    """
    # search() sanitizes q itself; echo the same single-pass result
    query = sanitize_query(q)
    logger.info("Search request received", extra={"query": query})
    return SearchResponse(
        query=query,
        results=search(q, config),
        pages=build_contents(None, config),
    )
