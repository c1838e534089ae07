import logging
import logging.config
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from kbase.routers.pages import router as pages_router
from kbase.routers.search import limiter, router as search_router

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="kbase",
    description=(
        "Read-only knowledge base over a directory of Markdown documents: "
        "category navigation, rendered pages and ranked full-text search."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(search_router)
app.include_router(pages_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"status": "ok", "service": "kbase", "version": app.version}


def serve() -> None:
    """Run the API with uvicorn on KBASE_HOST:KBASE_PORT (default 127.0.0.1:8000)."""
    uvicorn.run(
        "kbase.main:app",
        host=os.environ.get("KBASE_HOST", "127.0.0.1"),
        port=int(os.environ.get("KBASE_PORT", "8000")),
    )
