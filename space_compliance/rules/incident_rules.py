"""
Incident Rules — severity and regulator notification deadlines.

Base severity and deadline come from the category table in
``IncidentConfig``. Impact factors add to a numeric severity score; severe
factors (debris, data breach, third-party impact, very large financial loss)
never leave an incident below ``high``. An explicit severity wins outright.
Naive timestamps are taken to be UTC.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from space_compliance.models.enums import IncidentCategory, IncidentSeverity
from space_compliance.models.schemas import Incident, IncidentClassification, IncidentFactors
from space_compliance.rules.rules_config import IncidentRule, RulesConfigStore, get_rules_store

logger = logging.getLogger(__name__)

_RANK = {
    IncidentSeverity.LOW: 0,
    IncidentSeverity.MEDIUM: 1,
    IncidentSeverity.HIGH: 2,
    IncidentSeverity.CRITICAL: 3,
}


def _as_utc(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


class IncidentRules:
    """Category lookup, severity scoring and deadline arithmetic."""

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self._config_store = config_store or get_rules_store()

    def rule_for(self, category: IncidentCategory | str) -> IncidentRule:
        config = self._config_store.get_incident_config()
        key = IncidentCategory(category).value
        return config.categories.get(key) or config.categories[IncidentCategory.OTHER.value]

    def severity_score(self, category: IncidentCategory | str, factors: IncidentFactors) -> float:
        config = self._config_store.get_incident_config()
        value = config.severity_scores[self.rule_for(category).severity]

        if factors.affected_assets > 1:
            value += config.multiple_assets_increment
        if factors.affected_assets > config.many_assets_threshold:
            value += config.many_assets_increment
        if factors.debris_generated:
            value += config.debris_increment
        if factors.data_breach:
            value += config.data_breach_increment
        if factors.third_party_impact:
            value += config.third_party_increment
        if factors.media_attention:
            value += config.media_increment
        if factors.recurring:
            value += config.recurring_increment

        financial = factors.financial_impact_eur or 0
        if financial >= config.financial_severe_eur:
            value += config.financial_severe_increment
        elif financial >= config.financial_notable_eur:
            value += config.financial_notable_increment
        return value

    def has_severe_factor(self, factors: IncidentFactors) -> bool:
        config = self._config_store.get_incident_config()
        return (
            factors.debris_generated
            or factors.data_breach
            or factors.third_party_impact
            or (factors.financial_impact_eur or 0) >= config.financial_severe_eur
        )

    def classify_severity(
        self,
        category: IncidentCategory | str,
        factors: Optional[IncidentFactors] = None,
        explicit: Optional[IncidentSeverity] = None,
    ) -> IncidentSeverity:
        if explicit is not None:
            return IncidentSeverity(explicit)

        config = self._config_store.get_incident_config()
        factors = factors or IncidentFactors()
        value = self.severity_score(category, factors)

        if value >= config.critical_at:
            severity = IncidentSeverity.CRITICAL
        elif value >= config.high_at:
            severity = IncidentSeverity.HIGH
        elif value >= config.medium_at:
            severity = IncidentSeverity.MEDIUM
        else:
            severity = IncidentSeverity.LOW

        if self.has_severe_factor(factors) and _RANK[severity] < _RANK[IncidentSeverity.HIGH]:
            severity = IncidentSeverity.HIGH
        return severity

    def notification_deadline(self, category: IncidentCategory | str, detected_at: datetime) -> datetime:
        return _as_utc(detected_at) + timedelta(hours=self.rule_for(category).deadline_hours)

    def requires_notification(self, category: IncidentCategory | str) -> bool:
        rule = self.rule_for(category)
        return rule.requires_nca or rule.requires_euspa

    def is_notification_overdue(self, incident: Incident, now: Optional[datetime] = None) -> bool:
        """True when a notifiable incident is still unreported past its deadline."""
        if incident.reported_to_nca or not self.rule_for(incident.category).requires_nca:
            return False
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        return now > self.notification_deadline(incident.category, incident.detected_at)

    def classify_incident(
        self, incident: Incident, now: Optional[datetime] = None
    ) -> IncidentClassification:
        rule = self.rule_for(incident.category)
        severity = self.classify_severity(incident.category, incident.factors, incident.severity)
        result = IncidentClassification(
            category=incident.category,
            severity=severity,
            requires_nca_notification=rule.requires_nca,
            requires_euspa_notification=rule.requires_euspa,
            deadline_hours=rule.deadline_hours,
            notification_deadline=self.notification_deadline(incident.category, incident.detected_at),
            articles=rule.articles,
            overdue=self.is_notification_overdue(incident, now),
        )
        logger.info(
            f"Incident {incident.id or '<new>'} ({incident.category.value}): "
            f"severity={severity.value}, notify by {result.notification_deadline.isoformat()}"
        )
        return result


def classify_severity(
    category: IncidentCategory | str,
    factors: Optional[IncidentFactors] = None,
    explicit: Optional[IncidentSeverity] = None,
) -> IncidentSeverity:
    return IncidentRules().classify_severity(category, factors, explicit)


def notification_deadline(category: IncidentCategory | str, detected_at: datetime) -> datetime:
    return IncidentRules().notification_deadline(category, detected_at)


def requires_notification(category: IncidentCategory | str) -> bool:
    return IncidentRules().requires_notification(category)


def is_notification_overdue(incident: Incident, now: Optional[datetime] = None) -> bool:
    return IncidentRules().is_notification_overdue(incident, now)


def classify_incident(incident: Incident, now: Optional[datetime] = None) -> IncidentClassification:
    return IncidentRules().classify_incident(incident, now)