"""
Tests: NIS2 entity classification.

Run with:
    pytest space_compliance/tests/test_nis2_scoping.py -v
"""

import pytest

from space_compliance.models.enums import Nis2Classification
from space_compliance.models.schemas import OperatorProfile
from space_compliance.rules.nis2_scoping import classify_nis2


def _profile(**fields) -> OperatorProfile:
    return OperatorProfile(
        operator_types=["spacecraft_operator"],
        activity_types=["spacecraft_operation"],
        **fields,
    )


class TestClassifyNis2:
    @pytest.mark.parametrize(
        "fields, expected, article_ref",
        [
            ({"entity_size": "large", "establishment": "third_country_eu_services"},
             Nis2Classification.OUT_OF_SCOPE, "NIS2 Art. 2, Art. 26"),
            ({"entity_size": "micro", "operates_satcom": True},
             Nis2Classification.IMPORTANT, "NIS2 Art. 2(2)(b)"),
            ({"entity_size": "micro", "operates_ground_infra": True},
             Nis2Classification.OUT_OF_SCOPE, "NIS2 Art. 2(1)"),
            ({"entity_size": "large"}, Nis2Classification.ESSENTIAL, "NIS2 Art. 3(1)(a)"),
            ({"entity_size": "medium", "operates_ground_infra": True},
             Nis2Classification.ESSENTIAL, "NIS2 Art. 3(1)(e)"),
            ({"entity_size": "medium"}, Nis2Classification.IMPORTANT, "NIS2 Art. 3(2)"),
            ({"entity_size": "small", "provides_launch_services": True},
             Nis2Classification.IMPORTANT, "NIS2 Art. 2(2)(b)"),
            ({"entity_size": "small"}, Nis2Classification.OUT_OF_SCOPE, "NIS2 Art. 2(1), Art. 2(2)"),
            ({"entity_size": "research"}, Nis2Classification.OUT_OF_SCOPE, "NIS2 Art. 2"),
        ],
    )
    def test_decision_list(self, fields, expected, article_ref):
        result = classify_nis2(_profile(**fields))
        assert result.classification == expected
        assert result.article_ref == article_ref
        assert result.reason

    def test_unknown_establishment_is_not_treated_as_non_eu(self):
        assert classify_nis2(_profile(entity_size="large")).classification == Nis2Classification.ESSENTIAL

    def test_eu_established_large_is_essential(self):
        result = classify_nis2(_profile(entity_size="large", establishment="eu"))
        assert result.classification == Nis2Classification.ESSENTIAL
