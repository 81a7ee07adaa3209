"""
Career Clarified - FastAPI application entry point.

API backend for the career-coaching dashboard: AI generation with tier
quotas, resume parsing, an auth proxy, blog drafting and the job tracker.
"""
from fastapi import FastAPI, Request, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import os

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import __version__
from .config import settings
from .database import check_connection
from .rate_limit import limiter, RATE_LIMIT_READ
from .routers import ai, resume, auth_proxy, admin, blog, usage, jobs
from .schemas import FIELD_LABELS, AIStatusResponse, PromptListResponse
from .services.ai_service import AIService, get_ai_service
from .services.ai_prompts import ALL_PROMPTS, get_prompt as get_prompt_template

# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("clarified")

CORS_ALLOW_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
CORS_ALLOW_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version, Authorization"
)


def setup_database():
    """Create tables if fresh DB, run migrations if existing."""
    import subprocess
    from sqlalchemy import inspect as sa_inspect
    from .database import engine, Base

    inspector = sa_inspect(engine)
    existing = inspector.get_table_names()

    if "profiles" not in existing:
        logger.info("Fresh database, creating all tables...")
        from . import models  # noqa: F401
        Base.metadata.create_all(bind=engine, checkfirst=True)
        subprocess.run(["alembic", "stamp", "head"], check=True)
        logger.info("Tables created and alembic stamped to head.")
    else:
        logger.info("Existing database, running migrations...")
        subprocess.run(["alembic", "upgrade", "head"], check=True)
        logger.info("Migrations complete.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Career Clarified API...")
    if settings.manage_schema:
        os.makedirs("data", exist_ok=True)
        setup_database()
    if not settings.ai.openai_api_key:
        logger.warning("CLARIFIED_OPENAI_API_KEY is not set; AI endpoints will return 500")
    if not settings.supabase.supabase_url:
        logger.warning("CLARIFIED_SUPABASE_URL is not set; storage and auth proxy are disabled")
    logger.info("Career Clarified API ready!")
    yield
    logger.info("Shutting down Career Clarified API...")


app = FastAPI(
    title="Career Clarified",
    description="Career coaching API - AI content generation, resume parsing, usage quotas and job tracking",
    version=__version__,
    lifespan=lifespan
)

# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# --- Error Rendering ---

def _field_label(loc) -> str:
    for part in reversed(loc):
        if isinstance(part, str) and part != "body":
            return FIELD_LABELS.get(part, part)
    return "Request body"


def validation_message(errors) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = tuple(error.get("loc", ()))
    kind = error.get("type", "")

    if kind == "json_invalid":
        return "Invalid JSON body"
    if loc == ("body",):
        if kind == "missing":
            return "Request body is required"
        return "Request body must be a JSON object"

    label = _field_label(loc)
    if kind in ("missing", "string_too_short"):
        return f"{label} is required"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "value_error":
        ctx = error.get("ctx") or {}
        if ctx.get("error"):
            return str(ctx["error"])
    return f"{label}: {error.get('msg', 'invalid value')}"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        content = {"error": "Method not allowed"}
    elif isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


# --- Middleware ---
# Parse allowed origins from config
_allowed_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]


def allow_origin_for(origin: str) -> str:
    """Value for Access-Control-Allow-Origin given the request's Origin header."""
    if "*" in _allowed_origins:
        return origin or "*"
    if origin in _allowed_origins:
        return origin
    return ""


class CORSMiddleware(BaseHTTPMiddleware):
    """Fixed CORS headers on every response; preflight requests get 200 and no body."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        allow_origin = allow_origin_for(request.headers.get("origin", ""))
        if allow_origin:
            response.headers["Access-Control-Allow-Origin"] = allow_origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CORSMiddleware)

# Include routers
app.include_router(ai.router, prefix="/api", tags=["ai"])
app.include_router(resume.router, prefix="/api", tags=["resume"])
app.include_router(auth_proxy.router, prefix="/api", tags=["auth"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(blog.router, prefix="/api/blog", tags=["blog"])
app.include_router(usage.router, prefix="/api/usage", tags=["usage"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])


# --- System Endpoints ---

@app.get("/api/health", tags=["system"])
def health_check():
    """Health check endpoint for monitoring."""
    database_ok = check_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/api/ai/status", response_model=AIStatusResponse, tags=["ai"])
@limiter.limit(RATE_LIMIT_READ)
async def ai_status(request: Request, ai_service: AIService = Depends(get_ai_service)):
    """Check completion API availability and list models."""
    available = await ai_service.is_available()
    models = await ai_service.list_models() if available else []
    return AIStatusResponse(
        configured=ai_service.is_configured(),
        available=available,
        model=ai_service.model,
        models=models,
    )


@app.get("/api/ai/prompts", response_model=PromptListResponse, tags=["ai"])
@limiter.limit(RATE_LIMIT_READ)
async def get_all_prompts(request: Request):
    """Prompt templates in use, for prompt engineering."""
    return PromptListResponse(
        prompts={
            name: {
                "template": template,
                "character_count": len(template),
            }
            for name, template in ALL_PROMPTS.items()
        },
        available_names=list(ALL_PROMPTS.keys()),
    )


@app.get("/api/ai/prompts/{prompt_name}", tags=["ai"])
@limiter.limit(RATE_LIMIT_READ)
async def get_prompt(request: Request, prompt_name: str):
    if prompt_name not in ALL_PROMPTS:
        raise HTTPException(
            status_code=404,
            detail=f"Prompt '{prompt_name}' not found. Available: {list(ALL_PROMPTS.keys())}"
        )
    template = get_prompt_template(prompt_name)
    return {
        "name": prompt_name,
        "template": template,
        "character_count": len(template)
    }
