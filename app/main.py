from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from typing import Optional
import os
import logging

from app.middleware import (
    AuthenticationMiddleware,
    ClientRateLimiter,
    RateLimitMiddleware,
    RecoverPanicMiddleware,
    RequestLoggingMiddleware,
)
from app.routes import actors, movies, users
from app.services.base import Models
from app.utils.errors import (
    NOT_FOUND_MESSAGE,
    SERVER_ERROR_MESSAGE,
    bad_request,
    describe_request_error,
    method_not_allowed,
)

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def default_models() -> Models:
    """Stores picked by STORE_BACKEND: sql (default) or memory"""
    backend = os.getenv("STORE_BACKEND", "sql").lower()
    if backend == "memory":
        return Models.in_memory(seed=os.getenv("MEMORY_SEED", "true").lower() == "true")

    from app.database import Base, SessionLocal, engine
    import app.models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=engine)
    return Models.from_session_factory(SessionLocal)


def create_app(models: Optional[Models] = None, limiter: Optional[ClientRateLimiter] = None) -> FastAPI:
    """
    Build the API.

    `models` and `limiter` default to what the environment configures; tests
    pass their own.
    """
    if limiter is None:
        limiter = ClientRateLimiter.from_env()

    # ============================================
    # Application Lifespan Management
    # ============================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
        - Open the stores (creating tables for the SQL backend)
        - Start the rate limiter's idle-client sweep

        Shutdown:
        - Stop the sweep
        """
        logger.info("=" * 60)
        logger.info("Filmoteka API Starting...")
        logger.info(f"   Environment: {os.getenv('ENVIRONMENT', 'development')}")

        if getattr(app.state, "models", None) is None:
            app.state.models = default_models()

        try:
            limiter.start()
        except Exception as e:
            logger.error(f"Failed to start rate limiter sweep: {str(e)}")
        logger.info("=" * 60)

        yield

        logger.info("Filmoteka API Shutting Down...")
        limiter.shutdown()

    app = FastAPI(
        title="Filmoteka API",
        description="Movie catalog: actors, movies and users with role-based access",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.models = models
    app.state.limiter = limiter

    # ============================================
    # Exception Handlers
    # ============================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render every HTTP error as {"error": detail}"""
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = NOT_FOUND_MESSAGE
        elif exc.status_code == 405 and detail == "Method Not Allowed":
            detail = method_not_allowed(request.method).detail

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Undecodable bodies are client errors, not validation failures"""
        error = bad_request(describe_request_error(exc.errors()))
        return JSONResponse(status_code=error.status_code, content={"error": error.detail})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": SERVER_ERROR_MESSAGE})

    # ============================================
    # Middleware (last added runs first)
    # ============================================

    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(RequestLoggingMiddleware)

    if allowed_origins := [o for o in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if o]:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    app.add_middleware(RecoverPanicMiddleware)

    # ============================================
    # Routes
    # ============================================

    @app.get("/healthcheck", tags=["Health"])
    async def healthcheck():
        """Liveness probe, no authentication"""
        return {
            "status": "available",
            "system_info": {
                "environment": os.getenv("ENVIRONMENT", "development"),
            },
        }

    app.include_router(users.router)
    app.include_router(actors.router)
    app.include_router(movies.router)
    app.include_router(movies.search_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        log_level="info"
    )
