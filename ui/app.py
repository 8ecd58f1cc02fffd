"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import IdError
from generation.generator import IdGenerator
from internal.health import HealthChecker, create_clock_check, create_sequence_check
from internal.logging import get_logger, LogLevel, StructuredLogger
from ui.routes import api, codec, health, ids

VERSION = "1.0.0"


def create_app(config=None, clock=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    # Configure structured logging
    StructuredLogger.configure(min_level=LogLevel.parse(config.logging.level))
    logger_instance = get_logger()

    generator = IdGenerator(config.generator, clock)
    health_checker = HealthChecker()
    health_checker.register("clock", create_clock_check(generator.snowflakes), critical=True)
    health_checker.register("sequence", create_sequence_check(generator.counter), critical=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger_instance.info("Application starting", version=VERSION, **generator.config.to_dict())
        yield
        logger_instance.info("Application shutting down", **generator.stats())

    app = FastAPI(
        title="idmint",
        version=VERSION,
        description="record identifier generation service",
        lifespan=lifespan,
    )
    app.state.generator = generator

    @app.exception_handler(IdError)
    async def id_error(request: Request, exc: IdError):
        logger_instance.warn("Request rejected", error=exc, path=request.url.path, kind=type(exc).__name__)
        return JSONResponse(status_code=400, content=jsonable_encoder(exc.to_dict()))

    # Initialize route modules with dependencies
    ids.init(generator)
    codec.init(generator)
    health.init(generator, health_checker)
    api.init(generator)

    app.include_router(ids.router)
    app.include_router(codec.router)
    app.include_router(health.router)
    app.include_router(api.router)

    return app
