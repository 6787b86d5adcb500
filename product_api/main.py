# product_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .database import ProductStore, create_store
from .errors import ProductAPIError, StoreError
from .logs import access_log_middleware, configure_logging
from .routes import router

logger = logging.getLogger(__name__)


# ---------------------------
# Error handlers
# ---------------------------
async def product_error_handler(request: Request, exc: ProductAPIError):
    debug = request.app.state.settings.debug
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(debug))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"] if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": err["msg"]})
    return JSONResponse(
        status_code=400,
        content={"status": "error", "message": "Invalid request", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    body = {"status": "error", "message": "Internal Server Error"}
    if request.app.state.settings.debug:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


# ---------------------------
# Application factory
# ---------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await store.connect()
            logger.info("Connected to %s store", store.name)
        except StoreError as exc:
            # keep serving; requests will surface store errors individually
            logger.error("Store connection error: %s", exc.detail)
        yield
        await store.close()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.middleware("http")(access_log_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProductAPIError, product_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/")
    async def welcome():
        return {"message": "Welcome to the Product API"}

    @app.get("/health")
    async def health():
        database = "up" if await app.state.store.ping() else "down"
        return {"status": "ok", "message": "Server is running", "database": database}

    app.include_router(router)
    return app


def run():
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Server is starting on port %s (%s)", settings.port, settings.node_env)
    uvicorn.run(
        "product_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
