import hmac
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from voyagerisk.api.routes import router
from voyagerisk.config import settings
from voyagerisk.modules.risk_zones import RiskFactor, load_risk_zones

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

__version__ = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the risk zone table at startup and report live-source configuration."""
    table = load_risk_zones()
    for factor in RiskFactor:
        if not table[factor]:
            logger.warning("No risk zones for factor '%s' — simulated %s scores will be jitter only", factor.value, factor.value)
    if not settings.AISSTREAM_API_KEY:
        logger.info("AISSTREAM_API_KEY not set — traffic risk will use simulated data")
    yield


app = FastAPI(
    title="VoyageRisk",
    description=(
        "Composite maritime voyage risk scoring from route waypoints. "
        "Live weather and traffic data where available, zone-based estimates otherwise."
    ),
    version=__version__,
    lifespan=lifespan,
)

# CORS — origins from settings (supports comma-separated env var)
cors_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# API key authentication middleware
class APIKeyMiddleware(BaseHTTPMiddleware):
    """Simple API key check. If VOYAGERISK_API_KEY is unset, all requests pass."""

    async def dispatch(self, request: Request, call_next):
        if settings.VOYAGERISK_API_KEY is not None:
            # Allow health check and OpenAPI docs without auth
            if request.url.path not in ("/health", "/docs", "/openapi.json", "/redoc"):
                api_key = request.headers.get("X-API-Key")
                if not hmac.compare_digest(api_key or "", settings.VOYAGERISK_API_KEY):
                    return JSONResponse(
                        status_code=401,
                        content={"error": "Unauthorized", "detail": "Invalid or missing API key"},
                    )
        return await call_next(request)


app.add_middleware(APIKeyMiddleware)

# Rate limiting — every risk request fans out to external feeds
limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(router, prefix="/api/v1")


# ── Structured error handlers ─────────────────────────────────────────────────

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"error": "Validation error", "detail": str(exc)})


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s:\n%s", request.method, request.url.path, traceback.format_exc())
    return JSONResponse(status_code=500, content={"error": "Internal server error", "detail": "Failed to calculate risk."})


@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "version": __version__,
        "traffic_source": "aisstream" if settings.AISSTREAM_API_KEY else "simulated",
    }
