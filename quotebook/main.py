# quotebook/main.py
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from quotebook import __version__
from quotebook import models  # noqa: F401  (registers SQLAlchemy models)
from quotebook.auth.bootstrap import ensure_default_admin
from quotebook.core.errors import QuotebookError, StorageError
from quotebook.core.logging_config import logger, setup_logging
from quotebook.core.rate_limit import limiter
from quotebook.core.settings import settings
from quotebook.db import Base, SessionLocal, engine
from quotebook.routers import auth, dashboard, materials, pop, pricing, quotations

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.SEED_DEFAULT_ADMIN:
        with SessionLocal() as db:
            ensure_default_admin(db)
    logger.info("startup", service="quotebook", version=__version__)
    yield
    logger.info("shutdown", service="quotebook")


app = FastAPI(title="Quotebook", version=__version__, lifespan=lifespan)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    client_ip = request.client.host if request.client else "unknown"

    bound_logger = logger.bind(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------------------------------
# Error handlers
# ----------------------------------------------------
@app.exception_handler(RateLimitExceeded)
def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse(str(exc), status_code=429)


@app.exception_handler(QuotebookError)
def quotebook_error_handler(request: Request, exc: QuotebookError):
    if isinstance(exc, StorageError):
        # details are in the log, not in the response
        logger.error("storage_error", endpoint=str(request.url.path), error=exc.message)
        return JSONResponse({"error": "Internal server error"}, status_code=exc.status_code)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(SQLAlchemyError)
def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", endpoint=str(request.url.path), exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg')}" if where else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        {"error": message, "details": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
        status_code=400,
    )


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(auth.router)
app.include_router(quotations.router)
app.include_router(pop.router)
app.include_router(pricing.router)
app.include_router(materials.router)
app.include_router(dashboard.router)
