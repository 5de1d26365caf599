from enum import Enum


class Framework(str, Enum):
    EU_SPACE_ACT = "eu_space_act"
    COPUOS = "copuos"
    UK_SPACE_ACT = "uk_space_act"
    US_REGULATORY = "us_regulatory"
    NATIONAL_SPACE_LAW = "national_space_law"


class BindingLevel(str, Enum):
    MANDATORY = "mandatory"
    RECOMMENDED = "recommended"
    BEST_PRACTICE = "best_practice"
    GUIDANCE = "guidance"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class AssessmentStatus(str, Enum):
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_ASSESSED = "not_assessed"
    NOT_APPLICABLE = "not_applicable"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ModuleStatusType(str, Enum):
    REQUIRED = "required"
    SIMPLIFIED = "simplified"
    RECOMMENDED = "recommended"
    NOT_APPLICABLE = "not_applicable"


class OrbitRegime(str, Enum):
    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    HEO = "HEO"
    GTO = "GTO"
    CISLUNAR = "cislunar"
    DEEP_SPACE = "deep_space"


class SatelliteCategory(str, Enum):
    CUBESAT = "cubesat"
    SMALLSAT = "smallsat"
    MEDIUM = "medium"
    LARGE = "large"
    MEGA = "mega"


class ConstellationTier(str, Enum):
    SINGLE = "single"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    MEGA = "mega"


class EntitySize(str, Enum):
    MICRO = "micro"
    SMALL = "small"
    RESEARCH = "research"
    MEDIUM = "medium"
    LARGE = "large"


class Establishment(str, Enum):
    EU = "eu"
    THIRD_COUNTRY_EU_SERVICES = "third_country_eu_services"
    THIRD_COUNTRY_NO_EU = "third_country_no_eu"


class DocumentStatus(str, Enum):
    MISSING = "missing"
    PARTIAL = "partial"
    COMPLETE = "complete"


class IncidentCategory(str, Enum):
    LOSS_OF_CONTACT = "loss_of_contact"
    DEBRIS_GENERATION = "debris_generation"
    CYBER_INCIDENT = "cyber_incident"
    SPACECRAFT_ANOMALY = "spacecraft_anomaly"
    CONJUNCTION_EVENT = "conjunction_event"
    REGULATORY_BREACH = "regulatory_breach"
    OTHER = "other"


class IncidentSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    DETECTED = "detected"
    INVESTIGATING = "investigating"
    CONTAINED = "contained"
    RESOLVED = "resolved"


class Nis2Classification(str, Enum):
    ESSENTIAL = "essential"
    IMPORTANT = "important"
    OUT_OF_SCOPE = "out_of_scope"


class EntityNationality(str, Enum):
    DOMESTIC = "domestic"
    EU_OTHER = "eu_other"
    NON_EU = "non_eu"
    ESA_MEMBER = "esa_member"


class LicensingStatus(str, Enum):
    NEW_APPLICATION = "new_application"
    EXISTING_LICENSE = "existing_license"
    RENEWAL = "renewal"
    PRE_ASSESSMENT = "pre_assessment"


class LiabilityRegime(str, Enum):
    CAPPED = "capped"
    TIERED = "tiered"
    NEGOTIABLE = "negotiable"
    UNLIMITED = "unlimited"


class EuRelationship(str, Enum):
    COMPLEMENTARY = "complementary"
    PARALLEL = "parallel"
    SUPERSEDED = "superseded"
    GAP = "gap"


class DeorbitCompliance(str, Enum):
    COMPLIANT = "compliant"
    AT_RISK = "at_risk"
    NON_COMPLIANT = "non_compliant"
    UNKNOWN = "unknown"
