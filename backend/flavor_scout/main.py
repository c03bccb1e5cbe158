"""
Main FastAPI application and routing layer.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flavor_scout.config import CORS_ALLOW_ORIGINS, LOG_FORMAT, LOG_LEVEL, TARGET_SOURCES, TARGET_SUBREDDITS
from flavor_scout.errors import UpstreamFetchError, failure_response
from flavor_scout.schemas import AnalysisResult, ErrorBody
from flavor_scout.services.cache import StaleResponseCache
from flavor_scout.services.credentials import REDDIT_VARS
from flavor_scout.services.orchestrator import AnalysisOrchestrator
from flavor_scout.settings import Settings, get_settings
from flavor_scout.sources.demo_data import demo_content
from flavor_scout.sources.news_api import NewsApiSource
from flavor_scout.sources.reddit import RedditSource
from flavor_scout.utils import now_utc

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

FRESH_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=120"
DIAGNOSTIC_FETCH_LIMIT = 50

router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.orchestrator.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app with its process-wide cache and orchestrator."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Flavor Scout API",
        version="0.1.0",
        description="Flavor trend discovery from news and social content",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.orchestrator = AnalysisOrchestrator(settings=settings, cache=StaleResponseCache())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    return request.app.state.orchestrator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_json())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "as_of": now_utc().isoformat(),
        "service": "flavor-scout-api",
    }


@router.get("/analyze")
async def analyze(
    refresh: str = Query("false", description="\"true\" bypasses the content source's fetch cache"),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Run the flavor analysis pipeline.

    Returns the fresh analysis, the last good analysis marked as a fallback,
    or an error body when neither is available.
    """
    try:
        outcome = await orchestrator.run(force_refresh=refresh == "true")
    except Exception as e:
        # Anything the pipeline did not classify still prefers the last good copy
        logger.exception("Unexpected analysis failure")
        message = str(e) or type(e).__name__
        fallback = orchestrator.cache.get(message)
        if fallback is not None:
            return JSONResponse(content=fallback.to_json())
        status_code, title, hint = failure_response(message)
        return error_response(status_code, ErrorBody(error=title, message=message, hint=hint))

    if not isinstance(outcome, AnalysisResult):
        return error_response(outcome.status_code, outcome.body)

    headers = {} if outcome.cache_info.is_fallback else {"Cache-Control": FRESH_CACHE_CONTROL}
    return JSONResponse(content=outcome.to_json(), headers=headers)


@router.get("/content")
async def content(settings: Settings = Depends(get_app_settings)):
    """Raw fetched and deduplicated news items, for debugging."""
    if not settings.NEWS_API_KEY:
        return error_response(
            401,
            ErrorBody(
                error="NewsAPI key not configured",
                message=(
                    "Please add NEWS_API_KEY to your environment variables. "
                    "Get your free key at https://newsapi.org/register"
                ),
            ),
        )

    source = NewsApiSource(api_key=settings.NEWS_API_KEY, limit=DIAGNOSTIC_FETCH_LIMIT)
    try:
        fetched = await source.fetch(force_refresh=True)
    except UpstreamFetchError as e:
        logger.error("Content fetch failed: %s", e)
        return error_response(500, ErrorBody(error="Failed to fetch news data", message=e.message))

    return {
        "articles": [item.to_dict() for item in fetched.batch.items],
        "contentExcerpts": [excerpt.to_dict() for excerpt in fetched.batch.excerpts],
        "sources": TARGET_SOURCES,
        "fetchedAt": fetched.batch.fetched_at.isoformat(),
    }


@router.get("/social")
async def social(settings: Settings = Depends(get_app_settings)):
    """Reddit posts and comments; demo data when Reddit is not configured."""
    if not all(getattr(settings, name) for name in REDDIT_VARS):
        logger.warning("Reddit API credentials not configured. Using demo data.")
        posts, comments = demo_content()
        is_demo = True
    else:
        source = RedditSource(
            client_id=settings.REDDIT_CLIENT_ID,
            client_secret=settings.REDDIT_CLIENT_SECRET,
            username=settings.REDDIT_USERNAME,
            password=settings.REDDIT_PASSWORD,
        )
        try:
            fetched = await source.fetch(force_refresh=True)
        except UpstreamFetchError as e:
            logger.error("Reddit fetch failed: %s", e)
            return error_response(500, ErrorBody(error="Failed to fetch Reddit data", message=e.message))
        posts, comments = fetched.batch.items, fetched.batch.excerpts
        is_demo = False

    return {
        "posts": [item.to_dict() for item in posts],
        "comments": [excerpt.to_dict() for excerpt in comments],
        "subreddits": TARGET_SUBREDDITS,
        "isDemo": is_demo,
        "fetchedAt": now_utc().isoformat(),
    }


app = create_app()


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("flavor_scout.main:app", host="0.0.0.0", port=app.state.settings.PORT, reload=True)
