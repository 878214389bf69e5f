from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tinylink.core.config import settings
from tinylink.core.errors import (
    DependencyError,
    FatalAllocationError,
    LinkNotFoundError,
    LinkValidationError,
    MalformedShortCodeError,
)
from tinylink.core.logging_config import configure_logging
from tinylink.db.Connection import database
from tinylink.db.Models import models
from tinylink.api import links
from tinylink.services.counter import CounterAllocator

logger = configure_logging()


def build_counter(cache) -> CounterAllocator:
    return CounterAllocator(
        cache,
        key=settings.URL_COUNTER_KEY,
        initial_value=settings.INITIAL_URL_COUNTER,
        auto_initialize=settings.AUTO_INITIALIZE_COUNTER,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database models initialized/checked.")

    database.verify_database_connection()
    if database.verify_redis_connection():
        build_counter(database.get_cache()).initialize()

    yield

    logger.info("Shutting down gracefully...")
    database.engine.dispose()
    database.redis_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Counter based URL shortener",
    lifespan=lifespan,
)


@app.get("/health", tags=["health"])
def health_check(cache=Depends(database.get_cache), db: Session = Depends(database.get_db)):
    redis_ok = cache.ping()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning(f"Health check database failure: {e}")
        db_ok = False
    counter = build_counter(cache).current() if redis_ok else None
    return {
        "status": "healthy" if redis_ok and db_ok else "degraded",
        "service": "tinylink",
        "redis": "ok" if redis_ok else "unavailable",
        "db": "ok" if db_ok else "unavailable",
        "counter": counter,
    }


app.include_router(links.router)


@app.exception_handler(MalformedShortCodeError)
async def malformed_short_code_handler(request: Request, exc: MalformedShortCodeError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"errors": {"message": str(exc)}})


@app.exception_handler(LinkValidationError)
async def validation_error_handler(request: Request, exc: LinkValidationError):
    return JSONResponse(
        status_code=422,
        content={"errors": {"resource": exc.resource, "details": exc.details}},
    )


@app.exception_handler(LinkNotFoundError)
async def not_found_handler(request: Request, exc: LinkNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"errors": {"message": str(exc)}})


@app.exception_handler(FatalAllocationError)
async def allocation_error_handler(request: Request, exc: FatalAllocationError):
    logger.error(f"Short code allocation failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"errors": {"message": "Could not allocate a short code, try again later"}},
    )


@app.exception_handler(DependencyError)
async def dependency_error_handler(request: Request, exc: DependencyError):
    logger.error(f"Dependency failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"errors": {"message": "A backing service is unavailable"}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"errors": {"message": "An unexpected error occurred"}})
