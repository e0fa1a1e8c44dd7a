"""FastAPI app entry point for the Build Planner API."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from build_planner.api.routes import router
from build_planner.config import get_settings
from build_planner.core.logging import log_request, log_response, logger, setup_logging
from build_planner.services.engine import get_engine

settings = get_settings()
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load the catalog once on startup."""
    logger.info("Starting Build Planner API...")
    engine = get_engine()
    logger.info(
        f"Catalog ready: {len(engine.graph.upgrades)} upgrades, "
        f"{engine.graph.edge_count} edges"
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Build Planner API",
    description="Upgrade compatibility, impact and cost analysis for performance builds",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# Routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health():
    engine = get_engine()
    return {
        "status": "ok",
        "service": "build-planner",
        "upgrades": len(engine.graph.upgrades),
        "requires_cycles": len(engine.graph.requires_cycles),
    }
