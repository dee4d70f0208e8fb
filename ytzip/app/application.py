"""FastAPI application setup"""
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ytzip import __version__
from ytzip.config import get_downloads_dir, get_server_config
from ytzip.routes import formats_router, jobs_router, pages_router, push_router

from .logging_setup import setup_logging
from .middleware import request_logging_middleware

_logger = logging.getLogger("ytzip")


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc)
    _logger.info("Rejected request path=%s error=%s", request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    setup_logging()
    downloads_dir = get_downloads_dir()
    downloads_dir.mkdir(parents=True, exist_ok=True)
    _logger.info("Downloads dir ready path=%s", downloads_dir)

    app = FastAPI(
        title="ytzip",
        description="Download a video with yt-dlp and fetch it as a ZIP archive",
        version=__version__,
    )
    app.middleware("http")(request_logging_middleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(pages_router)
    app.include_router(jobs_router)
    app.include_router(formats_router)
    app.include_router(push_router)
    return app


def start_api(app: Optional[FastAPI] = None) -> None:
    """Serve ``app`` (a new one if not given) with uvicorn."""
    cfg = get_server_config()
    _logger.info("Starting uvicorn host=%s port=%s", cfg["host"], cfg["port"])
    uvicorn.run(app if app is not None else create_app(), host=cfg["host"], port=cfg["port"])
