"""Main FastAPI application."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .api import health, routes
from .core.config import settings
from .models.configuration import WeatherConfiguration
from .services.weather import WeatherClient


def setup_logging():
    """Configure the loguru stderr sink at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )
    logger.info("Logging configured", level=settings.LOG_LEVEL)


def setup_metrics():
    """Install an OpenTelemetry meter provider exporting to Prometheus.

    The provider request counter created by the weather client reports through
    this provider once it is installed.
    """
    reader = PrometheusMetricReader()
    resource = Resource.create(
        {
            "service.name": "unified-weather",
            "service.version": "0.1.0",
            "deployment.environment": settings.ENVIRONMENT,
        }
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))
    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared WeatherClient on startup and close it on shutdown."""
    configuration = WeatherConfiguration.from_settings(settings)
    logger.info(
        "Starting Unified Weather API",
        provider_strategy=configuration.provider_strategy.value,
        temperature_unit=configuration.temperature_unit.value,
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        retry_max_attempts=settings.RETRY_MAX_ATTEMPTS,
        retry_base_delay=settings.RETRY_BASE_DELAY,
        environment=settings.ENVIRONMENT,
    )

    async with WeatherClient(configuration) as client:
        app.state.weather_client = client
        logger.info(
            "Application ready to serve requests",
            providers=[provider.info.name for provider in client.providers],
        )
        yield

    logger.info("Shut down Unified Weather API")


setup_logging()
setup_metrics()

app = FastAPI(
    title="Unified Weather API",
    description="Current weather and forecasts from NWS (US) and Open-Meteo (global) with automatic fallback",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(routes.router, tags=["Weather"])


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus metrics endpoint, open to everyone."""
    return PlainTextResponse(
        content=generate_latest(REGISTRY).decode("utf-8"),
        media_type=CONTENT_TYPE_LATEST,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and return a generic 500 without internal details."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
