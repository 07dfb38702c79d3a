"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.routers import health, images, products, storefront
from src.catalog.api.utils.app_startup import configure_logging
from src.catalog.core.errors import (
    CatalogError,
    DuplicateIdError,
    ImageReadError,
    ImageSlotError,
    NotFoundError,
    PersistenceCorruptionError,
    ValidationError,
)
from src.catalog.core.services import create_product_storage
from src.catalog.core.storage.kv_store import close_kv_store, get_kv_store
from src.catalog.runtime.context import get_config

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Catalog Editor",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]

if get_config().app.environment == "production" and (
    "*" in get_config().app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


_ERROR_STATUS: dict[type[CatalogError], int] = {
    NotFoundError: 404,
    DuplicateIdError: 409,
    ValidationError: 422,
    ImageSlotError: 422,
    ImageReadError: 422,
}


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if isinstance(exc, PersistenceCorruptionError):
        logger.bind(error_type=type(exc).__name__).error(
            "Catalog storage is corrupt: {}", exc.key
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Catalog storage is corrupt; fix or clear the stored collection"},
        )

    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)), 400
    )
    content: dict = {"detail": str(exc)}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=content)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


app.include_router(health.router)
app.include_router(products.router)
app.include_router(images.router)
app.include_router(storefront.router)


async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    kv_store = await get_kv_store()
    product_storage = create_product_storage(kv_store, config.storage.key)

    app.state.app_dependencies = ApplicationDependencies(
        kv_store=kv_store,
        product_storage=product_storage,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    await close_kv_store()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
