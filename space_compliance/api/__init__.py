"""
FastAPI application factory and API package.

Run with:
    uvicorn space_compliance.api:app --reload --port 8000

Or via main.py:
    python -m space_compliance --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from space_compliance.config import get_settings
from space_compliance.api.routes import (
    assessment_router,
    catalog_router,
    copuos_router,
    health_router,
    incident_router,
    national_router,
    nis2_router,
    us_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="Space Compliance API",
        description="Applicability matching and compliance scoring across space regulatory frameworks",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS — allow any dashboard origin (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(catalog_router, prefix="/api/catalogs", tags=["Catalogs"])
    application.include_router(assessment_router, prefix="/api/assessments", tags=["Assessments"])
    application.include_router(incident_router, prefix="/api/incidents", tags=["Incidents"])
    application.include_router(nis2_router, prefix="/api/nis2", tags=["NIS2"])
    application.include_router(us_router, prefix="/api/us-regulatory", tags=["US Regulatory"])
    application.include_router(copuos_router, prefix="/api/copuos", tags=["COPUOS"])
    application.include_router(national_router, prefix="/api/national", tags=["National Space Law"])

    logger.info(f"{settings.app_name} API ready")
    return application


app = create_app()
