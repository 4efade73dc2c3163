"""
CNV Header Reader - FastAPI Backend

Main application entry point and configuration.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cnv_reader.api.headers import router as headers_router, folder_router, metrics_router
from cnv_reader.services.repository import init_repository, get_repository


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "CNV Header Reader"
APP_VERSION = "0.1.0"

# Folder of .cnv casts indexed at startup; POST /folder switches it
DEFAULT_DATA_FOLDER = Path("./data/cnv")
DATA_FOLDER_ENV = "CNV_DATA_FOLDER"


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = get_repository()
    if repo.data_folder is None:
        cast_folder = Path(os.getenv(DATA_FOLDER_ENV, str(DEFAULT_DATA_FOLDER)))
        if cast_folder.is_dir():
            count = init_repository(cast_folder).header_count
            logger.info(f"Indexed {count} CNV casts from {cast_folder}")
        else:
            logger.warning(f"No cast folder at {cast_folder}; waiting for POST /folder")

    yield


app = FastAPI(
    title=APP_NAME,
    description="""
    Read header metadata from CNV oceanographic instrument recordings.

    ## Features
    - Plain and key/value header lines
    - Per-column metric descriptors (name, type, unit, tags)
    - Cast position and NMEA UTC time

    ## Data Flow
    1. Set data folder via POST /folder
    2. List available headers via GET /headers
    3. Get one header via GET /headers/{id}
    4. Browse column descriptors via GET /metrics
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)


# Browser clients read headers from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(headers_router)
app.include_router(metrics_router)
app.include_router(folder_router)


@app.get("/")
async def root():
    """Service name and version."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Indexed folder and cast count."""
    repo = get_repository()

    return {
        "status": "healthy",
        "data_folder": str(repo.data_folder) if repo.data_folder else None,
        "header_count": repo.header_count,
    }
