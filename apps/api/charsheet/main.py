from fastapi import FastAPI
import os

from charsheet.core.db import db_health, dispose_engine, init_db, new_session
from charsheet.modules.catalog.router import router as catalog_router
from charsheet.modules.catalog.seed import seed_all
from charsheet.modules.characters.router import router as characters_router

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")


def _cors_origins() -> list:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


# === OBSERVABILITY FOUNDATIONS ===
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - errors are rendered as text/plain carrying the message only
import uuid
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from charsheet.core.observability import emit


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    with new_session() as session:
        counts = seed_all(session)
    emit("info", "app.startup", "catalog ready", None, __name__, version=APP_VERSION, seeded=counts)
    yield
    dispose_engine()
    emit("info", "app.shutdown", "engine disposed", None, __name__)


app = FastAPI(title="Character Sheet API", version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)


def _plain_error(message: str, request_id: Optional[str], status_code: int) -> PlainTextResponse:
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return PlainTextResponse(message, status_code=status_code, headers=headers)


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp,'status_code',None)}", rid, __name__)
    return resp


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    return _plain_error(str(exc.detail), rid, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    emit("error", "http.request.invalid", "request validation failed", rid, __name__, details=exc.errors())
    return _plain_error("Invalid request", rid, 400)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    rid = getattr(request.state, "request_id", None)
    return _plain_error(f"Internal server error: {type(exc).__name__}", rid, 500)
# === END OBSERVABILITY FOUNDATIONS ===


app.include_router(catalog_router, prefix="/api")
app.include_router(characters_router, prefix="/api")


@app.get("/health")
def health():
    db = db_health()
    return {
        "status": "ok" if db.get("status") == "ok" else "degraded",
        "version": APP_VERSION,
        "db": db,
        "last_error_summary": db.get("error"),
    }
