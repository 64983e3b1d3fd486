import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from app.core.config import get_settings
from app.api import api_router
from app.services.provider.adapter import build_provider
from app.services.reference_data import load_reference_data

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Reference data is built once here and shared read-only by all requests
    app.state.reference_data = load_reference_data(settings)
    app.state.provider = build_provider(settings)
    yield


app = FastAPI(
    title="NYC Precinct Locator",
    description="""
    ## NYC Precinct Locator API

    Resolves a coordinate or address to its NYPD precinct and patrol sector,
    and computes squad RDO calendars.

    ### Features

    * **Jurisdiction lookup**: boundary containment, nearby precinct search and nearest-centroid fallback
    * **Sectors**: patrol sector boundaries per precinct
    * **RDO calendars**: rotating and steady squad schedules for any month
    * **Opening hours**: precinct opening hours laid out over a month

    ### API Endpoints

    * `/api/v1/health` - Service health and loaded reference data
    * `/api/v1/jurisdiction` - Point and address resolution
    * `/api/v1/precincts` - Precinct listing, search, sectors and hours
    * `/api/v1/schedules` - Squads and monthly RDO calendars
    """,
    version="1.0.0",
    lifespan=lifespan,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    openapi_tags=[
        {
            "name": "Health",
            "description": "Service health and reference data status",
        },
        {
            "name": "Jurisdiction",
            "description": "Resolve a coordinate or address to a precinct and patrol sector",
        },
        {
            "name": "Precincts",
            "description": "Precinct listing and search, patrol sectors and opening hours",
        },
        {
            "name": "Schedules",
            "description": "Squads and monthly regular-day-off calendars",
        },
    ],
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get(
    "/",
    summary="API root",
    description="Basic information about the API",
    tags=["Health"]
)
def root():
    return {
        "name": "NYC Precinct Locator",
        "version": "1.0.0",
        "status": "running",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        }
    }


def custom_openapi():
    """Custom OpenAPI schema generator"""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=app.openapi_tags,
    )

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
