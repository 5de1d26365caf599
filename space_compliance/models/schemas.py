"""
Reusable data schemas for the compliance engine.
Catalog records are frozen; profiles and assessments are caller inputs;
everything else is derived and recomputed on every call.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import (
    AssessmentStatus,
    BindingLevel,
    ConstellationTier,
    DeorbitCompliance,
    DocumentStatus,
    Effort,
    EntityNationality,
    EntitySize,
    Establishment,
    EuRelationship,
    Framework,
    IncidentCategory,
    IncidentSeverity,
    IncidentStatus,
    LiabilityRegime,
    LicensingStatus,
    ModuleStatusType,
    Nis2Classification,
    OrbitRegime,
    Priority,
    RiskLevel,
    SatelliteCategory,
    Severity,
)


# ── Catalog ──────────────────────────────────────────────


class Applicability(BaseModel):
    """Declarative constraints; every populated field must hold for a match."""
    model_config = {"frozen": True, "extra": "forbid"}

    orbit_regimes: Optional[tuple[OrbitRegime, ...]] = None
    operator_types: Optional[tuple[str, ...]] = None
    excluded_operator_types: Optional[tuple[str, ...]] = None
    activity_types: Optional[tuple[str, ...]] = None
    mission_types: Optional[tuple[str, ...]] = None
    satellite_categories: Optional[tuple[SatelliteCategory, ...]] = None
    constellation_tiers: Optional[tuple[ConstellationTier, ...]] = None
    agencies: Optional[tuple[str, ...]] = None
    entity_sizes: Optional[tuple[EntitySize, ...]] = None
    establishments: Optional[tuple[Establishment, ...]] = None
    jurisdictions: Optional[tuple[str, ...]] = None
    min_mass_kg: Optional[float] = None
    max_mass_kg: Optional[float] = None
    min_altitude_km: Optional[float] = None
    max_altitude_km: Optional[float] = None
    min_constellation_size: Optional[int] = None
    constellations_only: bool = False
    requires_propulsion: bool = False
    requires_maneuverability: bool = False
    leo_only: bool = False
    ngso_only: bool = False
    remote_sensing_only: bool = False
    launch_from_uk_only: bool = False
    orbital_only: bool = False
    suborbital_only: bool = False
    human_spaceflight_only: bool = False
    commercial_only: bool = False


class Penalty(BaseModel):
    model_config = {"frozen": True}

    description: str
    max_fine: Optional[float] = None
    per_violation: bool = False


class Requirement(BaseModel):
    """One obligation or guideline from a regulatory framework."""
    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    reference: str
    title: str
    description: str = ""
    framework: Framework
    category: str
    binding_level: BindingLevel
    severity: Severity
    applicability: Applicability = Field(default_factory=Applicability)
    source: Optional[str] = None  # COPUOS | IADC | ISO
    agency: Optional[str] = None  # FCC | FAA | NOAA
    jurisdiction: Optional[str] = None  # national country code
    article_number: Optional[int] = None
    compliance_type: Optional[str] = None
    license_types: tuple[str, ...] = ()
    compliance_question: str = ""
    evidence_required: tuple[str, ...] = ()
    implementation_guidance: tuple[str, ...] = ()
    cross_references: dict[Framework, tuple[str, ...]] = Field(default_factory=dict)
    guidance_ref: Optional[str] = None
    iso_reference: Optional[str] = None
    iadc_reference: Optional[str] = None
    penalty: Optional[Penalty] = None

    @property
    def is_mandatory(self) -> bool:
        return self.binding_level == BindingLevel.MANDATORY


class FrameworkComparison(BaseModel):
    """Side-by-side note comparing a national requirement with its EU equivalent."""
    model_config = {"frozen": True}

    requirement: str
    eu_equivalent: str
    notes: str = ""
    implications: str = ""


# ── National jurisdictions ────────────────────────────


class Legislation(BaseModel):
    model_config = {"frozen": True}

    name: str
    name_local: str = ""
    year_enacted: int
    year_amended: Optional[int] = None
    status: str = "enacted"  # enacted | draft | none
    official_url: Optional[str] = None
    key_articles: str = ""


class LicensingAuthority(BaseModel):
    model_config = {"frozen": True}

    name: str
    name_local: str = ""
    website: Optional[str] = None
    contact_email: Optional[str] = None
    parent_ministry: Optional[str] = None


class JurisdictionRule(BaseModel):
    """When a national law does (or does not) reach an operator."""
    model_config = {"frozen": True}

    id: str
    description: str
    condition: str = ""
    applies: bool = True
    activity_types: Optional[tuple[str, ...]] = None
    entity_types: Optional[tuple[EntityNationality, ...]] = None
    article_ref: Optional[str] = None


class InsuranceLiability(BaseModel):
    model_config = {"frozen": True}

    mandatory: bool
    minimum_coverage: Optional[str] = None
    coverage_formula: Optional[str] = None
    government_indemnification: bool = False
    indemnification_cap: Optional[str] = None
    liability_regime: LiabilityRegime
    liability_cap: Optional[str] = None
    third_party_required: bool = False


class DebrisMitigation(BaseModel):
    model_config = {"frozen": True}

    deorbit_required: bool
    deorbit_timeline: Optional[str] = None
    passivation_required: bool = False
    mitigation_plan: bool = False
    collision_avoidance: bool = False
    standards: tuple[str, ...] = ()


class DataSensing(BaseModel):
    model_config = {"frozen": True}

    remote_sensing_license: bool = False
    distribution_restrictions: bool = False
    resolution_restrictions: Optional[str] = None
    data_policy_url: Optional[str] = None


class WeeksRange(BaseModel):
    model_config = {"frozen": True}

    min: int
    max: int

    @property
    def average(self) -> float:
        return (self.min + self.max) / 2


class LicensingTimeline(BaseModel):
    model_config = {"frozen": True}

    processing_weeks: WeeksRange
    application_fee: Optional[str] = None
    annual_fee: Optional[str] = None
    other_costs: tuple[str, ...] = ()


class Registration(BaseModel):
    model_config = {"frozen": True}

    national_registry: bool = False
    registry_name: Optional[str] = None
    un_registration_required: bool = True


class EuSpaceActRelation(BaseModel):
    model_config = {"frozen": True}

    relationship: EuRelationship
    description: str = ""
    key_articles: tuple[str, ...] = ()
    transition_notes: Optional[str] = None


class LimitedScope(BaseModel):
    """A jurisdiction whose law only reaches some activities."""
    model_config = {"frozen": True}

    activity_types: tuple[str, ...]
    reason: str


class FavorabilityBonus(BaseModel):
    """Extra favorability points a jurisdiction grants a kind of operator."""
    model_config = {"frozen": True}

    points: int
    factor: str
    activity_type: Optional[str] = None
    entity_size: Optional[EntitySize] = None


class Jurisdiction(BaseModel):
    """National space law of one country, as covered by the national catalog."""
    model_config = {"frozen": True}

    code: str
    name: str
    legislation: Legislation
    authority: LicensingAuthority
    applicability_rules: tuple[JurisdictionRule, ...] = ()
    insurance: InsuranceLiability
    debris: DebrisMitigation
    data_sensing: DataSensing = Field(default_factory=DataSensing)
    timeline: LicensingTimeline
    registration: Registration = Field(default_factory=Registration)
    eu_space_act: EuSpaceActRelation
    limited_scope: Optional[LimitedScope] = None
    favorability_bonuses: tuple[FavorabilityBonus, ...] = ()
    notes: tuple[str, ...] = ()
    last_updated: Optional[str] = None


# ── Operator checklists ──────────────────────────────────


class ChecklistAction(BaseModel):
    model_config = {"frozen": True}

    action: str
    article_reference: str
    deadline: str = ""
    criticality: BindingLevel = BindingLevel.MANDATORY


class Catalog(BaseModel):
    """The static, versioned collection of all requirements for one framework."""
    model_config = {"frozen": True}

    framework: Framework
    title: str
    version: str
    licensing_category: Optional[str] = None
    categories: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()
    agencies: tuple[str, ...] = ()
    license_types: tuple[str, ...] = ()
    total_articles: Optional[int] = None
    requirements: tuple[Requirement, ...] = ()
    comparisons: tuple[FrameworkComparison, ...] = ()
    jurisdictions: tuple[Jurisdiction, ...] = ()
    # operator checklist key -> phase -> actions
    operator_checklists: dict[str, dict[str, tuple[ChecklistAction, ...]]] = Field(default_factory=dict)
    fingerprint: str = ""

    def get(self, requirement_id: str) -> Optional[Requirement]:
        for requirement in self.requirements:
            if requirement.id == requirement_id:
                return requirement
        return None

    def jurisdiction(self, code: str) -> Optional[Jurisdiction]:
        for jurisdiction in self.jurisdictions:
            if jurisdiction.code == code.upper():
                return jurisdiction
        return None


# ── Operator profile ─────────────────────────────────────


class OperatorProfile(BaseModel):
    """
    Mission and organisation facts used for applicability matching.

    Derived fields (is_ngso, satellite_category, constellation_tier,
    is_light_regime, is_third_country, operator_roles) are filled in once
    when the model is validated.
    """

    operator_types: list[str] = Field(min_length=1)
    activity_types: list[str] = Field(min_length=1)
    mission_type: Optional[str] = None
    orbit_regime: Optional[OrbitRegime] = None
    altitude_km: Optional[float] = None
    mass_kg: Optional[float] = None
    has_propulsion: Optional[bool] = None
    has_maneuverability: Optional[bool] = None
    is_constellation: Optional[bool] = None
    constellation_size: Optional[int] = None
    mission_duration_years: Optional[float] = None
    planned_disposal_years: Optional[float] = None
    entity_size: Optional[EntitySize] = None
    establishment: Optional[Establishment] = None
    offers_eu_services: bool = False

    # US
    is_us_entity: Optional[bool] = None
    us_nexus: Optional[str] = None
    provides_remote_sensing: Optional[bool] = None
    agencies: list[str] = []

    # UK
    has_uk_nexus: Optional[bool] = None
    launch_from_uk: Optional[bool] = None
    launch_to_orbit: Optional[bool] = None
    is_suborbital: Optional[bool] = None
    involves_people: Optional[bool] = None
    is_commercial: Optional[bool] = None

    # National space law
    jurisdictions: list[str] = []
    entity_nationality: Optional[EntityNationality] = None
    licensing_status: Optional[LicensingStatus] = None

    # NIS2 scoping
    operates_ground_infra: bool = False
    operates_satcom: bool = False
    provides_launch_services: bool = False

    # Derived
    is_ngso: Optional[bool] = None
    satellite_category: Optional[SatelliteCategory] = None
    constellation_tier: Optional[ConstellationTier] = None
    is_light_regime: bool = False
    is_third_country: bool = False
    operator_roles: list[str] = []

    @model_validator(mode="after")
    def _derive(self) -> "OperatorProfile":
        if self.is_ngso is None:
            self.is_ngso = self.orbit_regime != OrbitRegime.GEO
        if self.mass_kg is not None:
            self.satellite_category = satellite_category_for(self.mass_kg)
        self.constellation_tier = constellation_tier_for(self.is_constellation, self.constellation_size)
        self.is_light_regime = self.entity_size in (EntitySize.SMALL, EntitySize.RESEARCH)
        self.is_third_country = self.establishment == Establishment.THIRD_COUNTRY_EU_SERVICES
        roles = list(dict.fromkeys(self.operator_types))
        if self.is_third_country and "third_country_operator" not in roles:
            roles.append("third_country_operator")
        self.operator_roles = roles
        return self


def satellite_category_for(mass_kg: float) -> SatelliteCategory:
    if mass_kg < 10:
        return SatelliteCategory.CUBESAT
    if mass_kg < 100:
        return SatelliteCategory.SMALLSAT
    if mass_kg < 1000:
        return SatelliteCategory.MEDIUM
    if mass_kg < 5000:
        return SatelliteCategory.LARGE
    return SatelliteCategory.MEGA


def constellation_tier_for(
    is_constellation: Optional[bool], size: Optional[int]
) -> Optional[ConstellationTier]:
    if not is_constellation:
        return ConstellationTier.SINGLE
    if size is None:
        return None
    if size >= 1000:
        return ConstellationTier.MEGA
    if size >= 100:
        return ConstellationTier.LARGE
    if size >= 10:
        return ConstellationTier.MEDIUM
    if size >= 2:
        return ConstellationTier.SMALL
    return ConstellationTier.SINGLE


# ── Assessments ──────────────────────────────────────────


class RequirementAssessment(BaseModel):
    """Caller-owned assessment state for one requirement."""
    requirement_id: str
    status: AssessmentStatus = AssessmentStatus.NOT_ASSESSED
    notes: str = ""
    evidence_notes: str = ""
    assessed_at: Optional[datetime] = None
    target_date: Optional[date] = None


# ── Derived results ──────────────────────────────────────


class ComplianceScore(BaseModel):
    overall: int = 100
    by_category: dict[str, int] = {}
    by_license_type: dict[str, int] = {}
    by_agency: dict[str, int] = {}
    by_source: dict[str, int] = {}
    mandatory: int = 100
    recommended: int = 100


class GapAnalysisResult(BaseModel):
    requirement_id: str
    reference: str
    title: str
    status: AssessmentStatus
    priority: Priority
    gap: str
    recommendation: str
    estimated_effort: Effort
    dependencies: list[str] = []
    guidance_ref: Optional[str] = None
    agency: Optional[str] = None
    potential_penalty: Optional[str] = None
    cross_references: dict[Framework, list[str]] = {}


class ModuleStatus(BaseModel):
    id: str
    name: str
    article_range: str
    status: ModuleStatusType
    article_count: int = 0
    summary: str = ""


class StatusCounts(BaseModel):
    total: int = 0
    compliant: int = 0
    partial: int = 0
    non_compliant: int = 0
    not_assessed: int = 0
    not_applicable: int = 0


class ComplianceSummary(BaseModel):
    """Status-count rollup; the five status counts sum to `applicable`."""
    framework: Framework
    total_requirements: int
    applicable: int
    compliant: int = 0
    partial: int = 0
    non_compliant: int = 0
    not_assessed: int = 0
    not_applicable: int = 0
    critical_gaps: int = 0
    major_gaps: int = 0
    required_licenses: list[str] = []
    required_agencies: list[str] = []
    by_agency: dict[str, StatusCounts] = {}


class ChecklistItem(BaseModel):
    document: str
    required: bool
    status: DocumentStatus
    agency: Optional[str] = None


class LicenseSummary(BaseModel):
    license_type: str
    agency: Optional[str] = None
    cfr_part: Optional[str] = None
    requirement_ids: list[str] = []
    compliance_score: int = 100
    gaps: list[GapAnalysisResult] = []


class AgencyStatus(BaseModel):
    agency: str
    full_name: str
    requirement_ids: list[str] = []
    assessed_count: int = 0
    compliant_count: int = 0
    partial_count: int = 0
    non_compliant_count: int = 0
    score: int = 100
    risk_level: RiskLevel = RiskLevel.LOW
    gaps: list[GapAnalysisResult] = []
    required_licenses: list[str] = []


class DeorbitCheck(BaseModel):
    is_leo: bool
    required_disposal_years: int
    planned_disposal_years: Optional[float] = None
    compliant: bool = True
    warnings: list[str] = []


class ComparisonSummary(BaseModel):
    overlapping_requirements: int = 0
    unique_requirements: int = 0
    considerations: list[str] = []


class KeyDate(BaseModel):
    on: date
    description: str


class RegimeDetails(BaseModel):
    """EU-specific classification of the operator."""
    operator_roles: list[str] = []
    offers_eu_services: bool = False
    regime: str = "standard"
    regime_label: str = ""
    regime_reason: str = ""
    constellation_tier: Optional[ConstellationTier] = None
    applicable_count: int = 0
    total_articles: int = 0
    applicable_percentage: int = 0
    key_dates: list[KeyDate] = []
    estimated_authorization_cost: str = ""
    authorization_path: str = ""


class DeorbitCalculation(BaseModel):
    """Dated FCC disposal deadline for a mission."""
    is_leo: bool
    required_disposal_years: int
    launch_date: Optional[date] = None
    mission_end_date: Optional[date] = None
    disposal_deadline: Optional[date] = None
    planned_disposal_date: Optional[date] = None
    days_remaining: Optional[int] = None
    compliance: DeorbitCompliance
    message: str = ""
    recommendations: list[str] = []


class OperatorChecklist(BaseModel):
    operator_type: str
    phases: dict[str, list[ChecklistAction]] = {}


class JurisdictionResult(BaseModel):
    code: str
    name: str
    is_applicable: bool
    applicability_reason: str
    total_requirements: int = 0
    mandatory_requirements: int = 0
    requirement_ids: list[str] = []
    compliance_score: int = 100
    authority: str = ""
    authority_website: Optional[str] = None
    estimated_timeline: Optional[WeeksRange] = None
    estimated_cost: str = ""
    insurance_mandatory: bool = False
    minimum_coverage: str = "Case-by-case"
    government_indemnification: bool = False
    deorbit_required: bool = False
    deorbit_timeline: str = "Not specified"
    legislation: str = ""
    legislation_status: str = ""
    year_enacted: Optional[int] = None
    favorability_score: int = 50
    favorability_factors: list[str] = []


class CriterionValue(BaseModel):
    value: str
    score: int
    notes: Optional[str] = None


class ComparisonCriterion(BaseModel):
    id: str
    label: str
    category: str
    values: dict[str, CriterionValue] = {}


class JurisdictionNote(BaseModel):
    relationship: EuRelationship
    description: str = ""
    key_changes: list[str] = []


class EuSpaceActPreview(BaseModel):
    overall_relationship: str
    jurisdiction_notes: dict[str, JurisdictionNote] = {}


class Nis2Result(BaseModel):
    classification: Nis2Classification
    reason: str
    article_ref: str


class AssessmentResult(BaseModel):
    """Top-level aggregate returned by the orchestrator."""
    framework: Framework
    catalog_version: str
    catalog_fingerprint: str = ""
    profile: OperatorProfile
    applicable_requirements: list[Requirement] = []
    assessments: list[RequirementAssessment] = []
    score: ComplianceScore
    risk_level: RiskLevel
    gap_analysis: list[GapAnalysisResult] = []
    overlaps: dict[Framework, list[str]] = {}
    recommendations: list[str] = []
    required_licenses: list[str] = []
    required_agencies: list[str] = []

    # Framework extras
    module_statuses: list[ModuleStatus] = []
    regime: Optional[RegimeDetails] = None
    nis2: Optional[Nis2Result] = None
    agency_statuses: list[AgencyStatus] = []
    deorbit: Optional[DeorbitCheck] = None
    license_summaries: list[LicenseSummary] = []
    comparison: Optional[ComparisonSummary] = None
    documentation_checklist: list[ChecklistItem] = []
    operator_checklist: Optional[OperatorChecklist] = None
    jurisdiction_results: list[JurisdictionResult] = []
    comparison_matrix: list[ComparisonCriterion] = []
    eu_space_act_preview: Optional[EuSpaceActPreview] = None


# ── Incidents ────────────────────────────────────────────


class IncidentFactors(BaseModel):
    affected_assets: int = 1
    debris_generated: bool = False
    data_breach: bool = False
    third_party_impact: bool = False
    media_attention: bool = False
    recurring: bool = False
    financial_impact_eur: Optional[float] = None


class Incident(BaseModel):
    """An incident tracked by the external workflow layer."""
    id: str = ""
    category: IncidentCategory
    detected_at: datetime
    status: IncidentStatus = IncidentStatus.DETECTED
    severity: Optional[IncidentSeverity] = None
    factors: IncidentFactors = Field(default_factory=IncidentFactors)
    reported_to_nca: bool = False
    reported_at: Optional[datetime] = None


class IncidentClassification(BaseModel):
    category: IncidentCategory
    severity: IncidentSeverity
    requires_nca_notification: bool
    requires_euspa_notification: bool
    deadline_hours: int
    notification_deadline: datetime
    articles: str
    overdue: bool = False
