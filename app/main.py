import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import config
from app.errors import ServiceError
from app.models.error_models import ErrorResponse
from app.routers import search, videos

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("search-api")

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: expose configuration and open the upstream HTTP client
    print("🚀 Initializing Search API...")
    app.state.config = config
    app.state.http_client = httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT)
    if not config.has_credentials:
        logger.warning("TWELVELABS_API_KEY or TWELVELABS_API_BASE_URL is not set; upstream calls will fail")
    print("✅ Search API initialization completed")

    yield

    # Shutdown: close pooled connections
    print("🔥 Search API shutting down...")
    await app.state.http_client.aclose()


app = FastAPI(
    title="Creator/Brand Search API",
    description="Proxy for Twelve Labs search and video listing across brand and creator indexes",
    version=API_VERSION,
    lifespan=lifespan
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, details=exc.details).model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request", details=details).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=ErrorResponse(error="Unexpected error").model_dump(exclude_none=True))


# Incluir routers
app.include_router(search.router, tags=["search"])
app.include_router(videos.router, tags=["videos"])


@app.get("/")
async def root():
    return {
        "name": "Creator/Brand Search API",
        "version": API_VERSION,
        "endpoints": {
            "text_search": "POST /search/text",
            "image_search": "POST /search/image",
            "search_by_token": "GET /search/by-token",
            "videos": "GET /videos",
            "video": "GET /videos/{video_id}",
            "update_user_metadata": "PUT /videos/updateUserMetadata",
            "health": "GET /health",
        }
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
