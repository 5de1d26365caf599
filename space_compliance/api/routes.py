"""
API routes — thin HTTP layer that delegates to the orchestration.

Routes:
  GET  /health                               → API health check
  GET  /api/catalogs                         → Catalog headers for every framework
  GET  /api/catalogs/{framework}             → One catalog with its requirements
  POST /api/assessments/{framework}          → Full assessment for a profile
  POST /api/assessments/{framework}/summary  → Status-count summary
  POST /api/incidents/classify               → Incident severity and deadline
  POST /api/nis2/classify                    → NIS2 entity classification
  POST /api/us-regulatory/deorbit-calculator → Dated FCC disposal deadline
  GET  /api/copuos/debris-guidelines         → Debris, disposal and passivation guidelines
  GET  /api/national/jurisdictions           → National space laws covered
  GET  /api/national/jurisdictions/{code}    → One jurisdiction's law
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from space_compliance.catalog.loader import load_all_catalogs, load_catalog
from space_compliance.config import get_settings
from space_compliance.exceptions import ProfileValidationError, UnknownFrameworkError
from space_compliance.frameworks.copuos import CopuosFramework
from space_compliance.frameworks.us_regulatory import calculate_deorbit
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import (
    AssessmentResult,
    Catalog,
    ComplianceSummary,
    DeorbitCalculation,
    Incident,
    IncidentClassification,
    Jurisdiction,
    Nis2Result,
    Requirement,
    RequirementAssessment,
)
from space_compliance.orchestration.runner import generate_compliance_summary, perform_assessment
from space_compliance.rules.incident_rules import classify_incident
from space_compliance.rules.nis2_scoping import classify_nis2
from space_compliance.rules.profile_validation import validate_profile

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
catalog_router = APIRouter()
assessment_router = APIRouter()
incident_router = APIRouter()
nis2_router = APIRouter()
us_router = APIRouter()
copuos_router = APIRouter()
national_router = APIRouter()


# ── Request / response schemas ───────────────────────────
class AssessmentRequest(BaseModel):
    profile: dict[str, Any]
    assessments: list[RequirementAssessment] = []


class CatalogHeader(BaseModel):
    framework: str
    title: str
    version: str
    requirement_count: int
    categories: list[str] = []
    fingerprint: str = ""


class IncidentRequest(BaseModel):
    incident: Incident
    now: Optional[datetime] = None


class DeorbitRequest(BaseModel):
    profile: dict[str, Any]
    launch_date: Optional[date] = None
    mission_end_date: Optional[date] = None
    planned_disposal_date: Optional[date] = None
    today: Optional[date] = None


def _http_error(e: Exception) -> HTTPException:
    logger.warning(f"Request rejected: {e}")
    if isinstance(e, UnknownFrameworkError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ProfileValidationError):
        return HTTPException(status_code=422, detail={"code": e.code, "message": e.detail})
    return HTTPException(status_code=400, detail=str(e))


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Catalogs ─────────────────────────────────────────────

@catalog_router.get("", response_model=list[CatalogHeader])
async def list_catalogs():
    return [
        CatalogHeader(
            framework=fw.value,
            title=catalog.title,
            version=catalog.version,
            requirement_count=len(catalog.requirements),
            categories=list(catalog.categories),
            fingerprint=catalog.fingerprint,
        )
        for fw, catalog in load_all_catalogs().items()
    ]


@catalog_router.get("/{framework}", response_model=Catalog)
async def get_catalog(framework: str):
    try:
        return load_catalog(framework)
    except UnknownFrameworkError as e:
        raise _http_error(e)


# ── Assessments ──────────────────────────────────────────

@assessment_router.post("/{framework}", response_model=AssessmentResult)
async def assess(framework: str, body: AssessmentRequest):
    try:
        return perform_assessment(framework, body.profile, body.assessments)
    except (UnknownFrameworkError, ProfileValidationError) as e:
        raise _http_error(e)


@assessment_router.post("/{framework}/summary", response_model=ComplianceSummary)
async def summarize(framework: str, body: AssessmentRequest):
    try:
        return generate_compliance_summary(framework, body.profile, assessments=body.assessments)
    except (UnknownFrameworkError, ProfileValidationError) as e:
        raise _http_error(e)


# ── Incidents ────────────────────────────────────────────

@incident_router.post("/classify", response_model=IncidentClassification)
async def classify(body: IncidentRequest):
    return classify_incident(body.incident, body.now)


# ── NIS2 ─────────────────────────────────────────────────

@nis2_router.post("/classify", response_model=Nis2Result)
async def nis2_classify(profile: dict[str, Any]):
    try:
        return classify_nis2(validate_profile(profile))
    except ProfileValidationError as e:
        raise _http_error(e)


# ── US deorbit calculator ────────────────────────────────

@us_router.post("/deorbit-calculator", response_model=DeorbitCalculation)
async def deorbit_calculator(body: DeorbitRequest):
    try:
        profile = validate_profile(body.profile, Framework.US_REGULATORY)
    except ProfileValidationError as e:
        raise _http_error(e)
    return calculate_deorbit(
        profile,
        launch_date=body.launch_date,
        mission_end_date=body.mission_end_date,
        planned_disposal_date=body.planned_disposal_date,
        today=body.today,
    )


# ── COPUOS ───────────────────────────────────────────────

@copuos_router.get("/debris-guidelines", response_model=list[Requirement])
async def debris_guidelines():
    return CopuosFramework().debris_guidelines()


# ── National space laws ──────────────────────────────────

@national_router.get("/jurisdictions", response_model=list[Jurisdiction])
async def list_jurisdictions():
    return list(load_catalog(Framework.NATIONAL_SPACE_LAW).jurisdictions)


@national_router.get("/jurisdictions/{code}", response_model=Jurisdiction)
async def get_jurisdiction(code: str):
    jurisdiction = load_catalog(Framework.NATIONAL_SPACE_LAW).jurisdiction(code)
    if jurisdiction is None:
        raise HTTPException(status_code=404, detail=f"No national space law data for '{code}'")
    return jurisdiction
