from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from csv_categorizer.core.config import config
from csv_categorizer.core.logging import setup_logging, set_correlation_id, get_logger, log_with_context
from csv_categorizer.routers import categorize, admin

# Configure structured logging
setup_logging(config.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log application startup and shutdown"""
    log_with_context(
        logger, "info", "Application starting up",
        model=config.gemini_model,
        batch_size=config.categorization_batch_size,
        api_key_configured=bool(config.gemini_api_key)
    )

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title=config.title,
    description=config.description,
    version=config.version,
    lifespan=lifespan
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID") or None)

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id

    return response


app.include_router(categorize.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    """Root endpoint for API status"""
    logger.info("Root endpoint accessed")
    return {"message": f"{config.title} API is running", "version": config.version}
