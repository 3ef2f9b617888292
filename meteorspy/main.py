import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import client
from .catalog import resolve_designation
from .errors import MeteorSpyError, MissingParameterError, http_status_for
from .normalize import normalize
from .observability import setup_logging
from .schemas import HealthResponse, WelcomeResponse
from .settings import settings

logger = logging.getLogger(__name__)

PARSED = "parsed"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_format)
    app.state.http = httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )
    logger.info("MeteorSpy API started")
    try:
        yield
    finally:
        await app.state.http.aclose()
        logger.info("MeteorSpy API shutting down")


app = FastAPI(title="MeteorSpy API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(MeteorSpyError)
async def meteorspy_error_handler(request: Request, exc: MeteorSpyError):
    logger.error(
        exc.message,
        extra={"error_kind": exc.kind.value, "path": request.url.path},
    )
    return JSONResponse(status_code=http_status_for(exc), content=exc.to_response())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s: %s", request.url.path, exc, exc_info=True
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _http(request: Request) -> Optional[httpx.AsyncClient]:
    return getattr(request.app.state, "http", None)


def _render(payload: Dict[str, Any], fmt: Optional[str]) -> Dict[str, Any]:
    if fmt == PARSED:
        return normalize(payload).to_wire()
    return payload


@app.get("/", response_model=WelcomeResponse)
def root():
    return WelcomeResponse(message="Welcome to MeteorSpy API")


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))


@app.get("/api/close-approaches")
async def get_close_approaches(
    request: Request,
    date_min: str = Query("now", alias="date-min"),
    date_max: str = Query("+60", alias="date-max"),
    dist_max: str = Query("0.05", alias="dist-max"),
    fmt: Optional[str] = Query(None, alias="format"),
):
    payload = await client.earth_approaches(
        date_min, date_max, dist_max, http=_http(request)
    )
    return _render(payload, fmt)


@app.get("/api/asteroid/{designation}")
async def get_asteroid(
    request: Request,
    designation: str,
    date_min: str = Query("1900-01-01", alias="date-min"),
    date_max: str = Query("2100-12-31", alias="date-max"),
    dist_max: str = Query("1", alias="dist-max"),
    fmt: Optional[str] = Query(None, alias="format"),
):
    payload = await client.object_approaches(
        designation, date_min, date_max, dist_max, http=_http(request)
    )
    return _render(payload, fmt)


@app.get("/api/search")
async def search(
    request: Request,
    name: Optional[str] = None,
    date_min: str = Query("1900-01-01", alias="date-min"),
    date_max: str = Query("2100-12-31", alias="date-max"),
    dist_max: str = Query("1", alias="dist-max"),
    fmt: str = Query(PARSED, alias="format"),
):
    if not name:
        raise MissingParameterError("name")
    designation = resolve_designation(name)
    logger.info("Resolved search %r to designation %s", name, designation)
    payload = await client.object_approaches(
        designation, date_min, date_max, dist_max, http=_http(request)
    )
    return _render(payload, fmt)


def serve():
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
