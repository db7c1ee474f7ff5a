"""Unit tests for the Material model and its source-shape normalization."""

import math

import pytest
from pydantic import ValidationError

from models.material import Material, parse_materials, to_finite
from tests.fixtures.mock_materials import HEMPCRETE_RECORD, STEEL_RECORD, TIMBER_RECORD


class TestToFinite:

    @pytest.mark.parametrize("value,expected", [
        (1, 1.0),
        ("2.5", 2.5),
        (None, None),
        (True, None),
        ("n/a", None),
        (math.nan, None),
        (math.inf, None),
    ])
    def test_values(self, value, expected):
        assert to_finite(value) == expected


class TestMaterialNormalization:

    def test_nested_ris_scores_and_pricing(self):
        material = Material.model_validate(TIMBER_RECORD)

        assert material.lis == 21.3
        assert material.ris == 72.0
        assert material.cost == 120.0
        assert material.total_carbon == 42.5
        assert material.better_alternatives[0].name == "Glulam"

    def test_nested_scores_fill_missing_fields(self):
        material = Material.model_validate(STEEL_RECORD)

        assert material.lis == 155.0
        assert material.cpi == 52.25
        assert material.functional_unit == "m²"

    def test_top_level_wins_over_scores(self):
        material = Material.model_validate({"id": 1, "cpi": 3.0, "scores": {"cpi": 9.0}})
        assert material.cpi == 3.0

    def test_carbon_aliases(self):
        assert Material.model_validate({"id": 1, "carbon": 10}).total_carbon == 10
        assert Material.model_validate({"id": 1, "total": 11}).total_carbon == 11

    def test_material_name_alias(self):
        assert Material.model_validate({"id": 1, "material": "Cork"}).name == "Cork"

    def test_non_finite_scores_become_none(self):
        material = Material.model_validate({"id": 1, "lis": "NaN", "ris": math.inf, "cpi": "abc"})
        assert material.lis is None
        assert material.ris is None
        assert material.cpi is None

    def test_empty_functional_unit_uses_default(self):
        assert Material.model_validate({"id": 1, "functionalUnit": ""}).functional_unit == "m²"

    def test_id_required(self):
        with pytest.raises(ValidationError):
            Material.model_validate({"name": "No id"})


class TestMaterialHelpers:

    def test_net_impact(self):
        assert Material.model_validate(HEMPCRETE_RECORD).net_impact == 75.0
        assert Material(id=1).net_impact == 0.0

    def test_api_dict_uses_camel_case(self):
        data = Material.model_validate(HEMPCRETE_RECORD).to_api_dict()
        assert data["totalCarbon"] == 12.0
        assert data["functionalUnit"] == "m²"
        assert "total_carbon" not in data

    def test_parse_materials_keeps_models(self):
        existing = Material(id=9)
        parsed = parse_materials([existing, HEMPCRETE_RECORD])
        assert parsed[0] is existing
        assert parsed[1].name == "Hempcrete"
