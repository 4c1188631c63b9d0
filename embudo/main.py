"""EMBUDO — FastAPI Application Entry Point.

Funnel sheet normalizer: import daily / monthly marketing sheets, keep one
record per day and recompute the sales-funnel formulas.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from embudo.config import settings
from embudo.database import check_connection, get_session, init_db
from embudo.analyzer.pipeline import run_sync
from embudo.scheduler.jobs import start_scheduler, stop_scheduler
from embudo.api.import_routes import router as import_router
from embudo.api.record_routes import router as record_router
from embudo.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


async def _initial_sync() -> None:
    """Load the published sheet once at startup; keep stored data on failure."""
    if not (settings.sync_on_startup and settings.sheet_csv_url):
        return
    session_gen = get_session()
    session = next(session_gen)
    try:
        result = await run_sync(session)
        logger.info(f"Startup sync loaded {len(result.records)} records")
    except Exception as e:
        logger.error(f"Startup sync failed, keeping stored records: {e}")
    finally:
        session_gen.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("EMBUDO starting up...")
    db_ok = check_connection()
    if db_ok:
        try:
            init_db()
            await _initial_sync()
        except Exception as e:
            logger.error(f"Startup failed: {e}")
    else:
        logger.error("Database NOT connected — endpoints will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("EMBUDO shut down")


app = FastAPI(
    title="EMBUDO",
    description="Normalize marketing-funnel spreadsheets and compute CPL, ROAS, ROI and close rates.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(import_router)
app.include_router(record_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "embudo",
        "version": "1.0.0",
    }
