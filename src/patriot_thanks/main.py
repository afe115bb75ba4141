"""Main FastAPI application for Patriot Thanks."""

import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text

from . import __version__
from .api import businesses, lookups, schools
from .api.middleware import ProblemDetailsMiddleware, register_exception_handlers
from .config import get_config
from .db.database import SessionLocal
from .utils.logging_config import get_logger, initialize_logging

initialize_logging()
logger = get_logger("main")

config = get_config()

# Create FastAPI app
app = FastAPI(
    title=config.app.app_name,
    description=config.app.description,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(ProblemDetailsMiddleware)

# Add CORS middleware
allowed_origins = list(config.server.allowed_origins)

# In development mode, allow the usual frontend dev server ports
if config.server.debug:
    allowed_origins.extend([
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
)

register_exception_handlers(app)

# Register API routers
app.include_router(businesses.router)
app.include_router(lookups.router)
app.include_router(schools.router)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to the API docs."""
    return RedirectResponse(url="/docs")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "patriot-thanks", "version": __version__}


@app.get("/ready")
async def readiness_check():
    """Readiness check endpoint that validates database connectivity."""
    start_time = time.time()
    checks = {"database": False}
    errors = []

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.error(f"Readiness database check failed: {e}")
        errors.append(f"Database check failed: {str(e)}")
    finally:
        db.close()

    response_time_ms = round((time.time() - start_time) * 1000, 2)
    all_ready = all(checks.values())

    response = {
        "status": "ready" if all_ready else "not_ready",
        "service": "patriot-thanks",
        "version": __version__,
        "checks": checks,
        "response_time_ms": response_time_ms,
    }

    if errors:
        response["errors"] = errors

    status_code = 200 if all_ready else 503
    return JSONResponse(content=response, status_code=status_code)


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    logger.info(f"Starting Patriot Thanks on {config.server.host}:{config.server.port}")
    uvicorn.run(
        "patriot_thanks.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.auto_reload,
        workers=config.server.workers,
        log_level=config.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
