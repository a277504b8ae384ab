import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from vidgraph.config import settings
from vidgraph.core.errors import VidgraphError
from vidgraph.db.session import init_db
from vidgraph.playlists.routing import router as playlists_router
from vidgraph.comments.routing import router as comments_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

logger = logging.getLogger("vidgraph")

# CORS
origins = [origin for origin in settings.CORS_ORIGINS if origin]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"Request failed: {request.method} {request.url.path} - {str(e)} ({process_time:.2f}s)")
            raise

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} from {client} -> {response.status_code} ({process_time:.2f}s)"
        )
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-API-Version"] = "1.0.0"
        return response


app = FastAPI(
    title="vidgraph API",
    description=(
        "vidgraph serves playlist and comment views over a video graph. Reads are "
        "filtered for the requesting user and writes are checked against ownership.\n\n"
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(VidgraphError)
async def vidgraph_error_handler(request: Request, exc: VidgraphError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Rate limit error handler with retry information."""
    retry_after = getattr(exc, "retry_after", None) or 60

    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "message": f"Too many requests. Please try again in {retry_after} seconds.",
            "retry_after": retry_after,
            "limit": settings.RATE_LIMIT,
            "type": "rate_limit_exceeded",
        },
        headers={"Retry-After": str(retry_after)},
    )


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(playlists_router, prefix='/api/playlists')
app.include_router(comments_router, prefix='/api/comments')


@app.get("/healthChecker")
def read_api_health():
    return {"status": "ok"}
