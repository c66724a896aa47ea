"""Prometheus metrics configuration"""

from prometheus_client import Counter, Histogram, Info
from prometheus_fastapi_instrumentator import Instrumentator
from typing import Callable
import time
from functools import wraps

# Application info
app_info = Info('wine_recommender', 'Wine Recommendation Engine Information')
app_info.info({
    'version': '1.0.0',
    'service': 'wine-recommender'
})

# Recommendation metrics
recommendations_generated_total = Counter(
    'wine_recommendations_generated_total',
    'Total recommended items returned',
    ['view']
)

recommendation_generation_duration_seconds = Histogram(
    'wine_recommendation_generation_duration_seconds',
    'Time taken to generate a recommendation view',
    ['view']
)

# Interaction metrics
interactions_recorded_total = Counter(
    'wine_interactions_recorded_total',
    'Total interactions recorded',
    ['kind']
)

# Degradation metrics
catalog_load_failures_total = Counter(
    'wine_catalog_load_failures_total',
    'Catalog loads that fell back to an empty catalog'
)

persistence_errors_total = Counter(
    'wine_persistence_errors_total',
    'Persisted state reads/writes that failed',
    ['operation']
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def track_view_time(view: str):
    """
    Decorator to track recommendation view generation time

    Usage:
        @track_view_time("trending")
        def trending(...):
            pass
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                recommendation_generation_duration_seconds.labels(
                    view=view
                ).observe(duration)

        return wrapper

    return decorator


def record_recommendations(view: str, count: int) -> None:
    """Record items returned by a view"""
    recommendations_generated_total.labels(view=view).inc(count)


def record_interaction(kind: str) -> None:
    """Record an accepted interaction"""
    interactions_recorded_total.labels(kind=kind).inc()


def record_catalog_failure() -> None:
    catalog_load_failures_total.inc()


def record_persistence_error(operation: str) -> None:
    persistence_errors_total.labels(operation=operation).inc()
