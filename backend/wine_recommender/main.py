"""
Wine Recommendation Engine - Main FastAPI Application

Personalized wine recommendations for the marketplace storefront:
- Personalized ranking from a learned taste profile and declared filters
- Similar wines
- Trending wines (last 30 days of activity)
- Seasonal selections
- Meal pairings
"""

from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .api import api_router
from .services.state_store import RedisStateStore
from .utils.dependencies import registry
from .utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_uvicorn_logging,
    get_logger,
    setup_logging,
)
from .utils.metrics import setup_metrics
from .utils.rate_limit import limiter

setup_logging(log_level=settings.LOG_LEVEL)
configure_uvicorn_logging(version=settings.VERSION)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    logger.info("Starting Wine Recommendation Engine", version=settings.VERSION)

    store = registry.state_store
    if isinstance(store, RedisStateStore) and not store.health_check():
        logger.warning("Redis connection failed - sessions will not be persisted")

    yield

    logger.info("Shutting down Wine Recommendation Engine", sessions=len(registry))


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # Wine Recommendation Engine API

    Personalized recommendations for one storefront session at a time.

    Record interactions (`viewed`, `added_to_cart`, `removed_from_cart`,
    `favorited`, `unfavorited`, `purchased`, `rated_high`, `rated_low`) and the
    session's taste profile and preferences are updated immediately.

    ## Views

    - `personalized`: relevance ranking within the session's filters
    - `similar`: wines close to a given wine
    - `trending`: most active wines of the last 30 days
    - `seasonal`: wines for the current season
    - `meal-pairing`: wines for a meal description
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "recommendations", "description": "Recommendation views"},
        {"name": "interactions", "description": "Interaction tracking"},
        {"name": "profile", "description": "Taste profile and preference filters"},
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

setup_metrics(app)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with the request path bound to every event"""
    clear_request_context()
    bind_request_context(method=request.method, path=request.url.path)

    logger.info("Request received", client=request.client.host if request.client else None)

    response = await call_next(request)

    logger.info("Request completed", status_code=response.status_code)

    return response


@app.get("/", tags=["root"])
def root():
    """Root endpoint"""
    return {
        "message": "Wine Recommendation Engine API",
        "version": settings.VERSION,
        "docs": "/docs",
        "status": "operational"
    }


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint"""

    store = registry.state_store
    redis_healthy = store.health_check() if isinstance(store, RedisStateStore) else True

    return {
        "status": "healthy" if redis_healthy else "degraded",
        "redis": "connected" if redis_healthy else "disconnected",
        "sessions": len(registry),
        "version": settings.VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wine_recommender.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
