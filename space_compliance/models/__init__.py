from .enums import *  # noqa: F401,F403
from .schemas import (
    AgencyStatus,
    Applicability,
    AssessmentResult,
    Catalog,
    ChecklistAction,
    ChecklistItem,
    ComparisonCriterion,
    ComparisonSummary,
    ComplianceScore,
    ComplianceSummary,
    CriterionValue,
    DeorbitCalculation,
    DeorbitCheck,
    EuSpaceActPreview,
    FrameworkComparison,
    GapAnalysisResult,
    Incident,
    IncidentClassification,
    IncidentFactors,
    Jurisdiction,
    JurisdictionNote,
    JurisdictionResult,
    KeyDate,
    LicenseSummary,
    ModuleStatus,
    Nis2Result,
    OperatorChecklist,
    OperatorProfile,
    Penalty,
    RegimeDetails,
    Requirement,
    RequirementAssessment,
    StatusCounts,
)
