"""Unit tests for deterministic insight text."""

import pytest

from models.insight import (
    InsightDrivers,
    InsightRequestContext,
    InsightSource,
    Quadrant,
    StaticInsightInput,
)
from services.scoring import build_insight_scores
from services.static_insight import (
    QUADRANT_HEADLINES,
    build_static_copy,
    build_static_insight_text,
    describe_tier,
    render_static_insight,
)


class TestDescribeTier:

    @pytest.mark.parametrize("value,metric,expected", [
        (30, "LIS", "low"),
        (30.1, "LIS", "moderate"),
        (60, "LIS", "moderate"),
        (61, "LIS", "elevated"),
        (70, "RIS", "strong"),
        (40, "RIS", "balanced"),
        (39, "RIS", "emerging"),
        (35, "CPI", "efficient"),
        (65, "CPI", "mid-range"),
        (66, "CPI", "premium"),
        (None, "LIS", "undisclosed"),
        (10, "XYZ", "undisclosed"),
    ])
    def test_tiers(self, value, metric, expected):
        assert describe_tier(value, metric) == expected


class TestRenderStaticInsight:

    def test_complete_scores(self):
        insight = render_static_insight(StaticInsightInput(
            material_id="1",
            material_name="Hempcrete",
            lis=20,
            ris=75,
            cpi=9.1,
        ))

        assert insight.takeaway == (
            "Hempcrete sits in the low LIS tier with strong regenerative potential, "
            "driven by the current lifecycle profile."
        )
        assert insight.lis_drivers[0].startswith("Positive:")
        assert insight.ris_drivers[0].startswith("Positive:")
        assert insight.cpi_explainer == (
            "CPI sits at 9.10, indicating efficient cost intensity for this specification."
        )
        assert insight.comparison == "Compared to a Benchmark 2000 reference, LIS is lower than expected."
        assert insight.confidence == ["No major uncertainties flagged."]
        assert len(insight.next_actions) == 3
        assert "Hempcrete" in insight.next_actions[0]

    def test_missing_scores(self):
        insight = render_static_insight(StaticInsightInput(material_id="1"))

        assert insight.takeaway.startswith("This material sits in the undisclosed LIS tier")
        assert insight.lis_drivers == ["LIS data pending."]
        assert insight.ris_drivers == ["RIS data pending."]
        assert insight.cpi_explainer == "CPI data unavailable; confirm cost estimates before committing."
        assert insight.comparison is None
        assert insight.confidence == [
            "Scores derive from deterministic LIS/RIS/CPI values.",
            "LIS data missing for this version.",
            "RIS data missing for this version.",
            "CPI data missing for this version.",
        ]
        assert "this material" in insight.next_actions[0]

    def test_zero_cpi_is_treated_as_missing(self):
        insight = render_static_insight(StaticInsightInput(material_id="1", lis=10, ris=50, cpi=0))
        assert insight.cpi_explainer.startswith("CPI data unavailable")

    def test_watch_drivers_and_higher_benchmark(self):
        insight = render_static_insight(StaticInsightInput(material_id="1", lis=80, ris=20, cpi=120))

        assert insight.lis_drivers[0].startswith("Watch:")
        assert insight.ris_drivers[0].startswith("Area to grow:")
        assert "premium cost intensity" in insight.cpi_explainer
        assert insight.comparison.endswith("LIS is higher than expected.")

    def test_explicit_benchmark_and_driver_hint(self):
        insight = render_static_insight(StaticInsightInput(
            material_id="1",
            material_name="CLT",
            lis=25,
            ris=65,
            cpi=40,
            drivers=InsightDrivers(ris=["reclaimed timber content"]),
            comparison_benchmark="Matches the regional timber benchmark.",
        ))

        assert insight.takeaway.endswith("driven by reclaimed timber content.")
        assert insight.comparison == "Matches the regional timber benchmark."

    def test_cpi_matches_formatter(self):
        insight = render_static_insight(StaticInsightInput(material_id="1", cpi=12.345))
        assert "CPI sits at 12.35," in insight.cpi_explainer


class TestStaticInsightText:

    def test_headline_and_details(self):
        scores = build_insight_scores(42.4, 68.6, 9.1, Quadrant.REGENERATIVE, paris_alignment=80.2)

        text = build_static_insight_text(scores)

        assert text.short == QUADRANT_HEADLINES[Quadrant.REGENERATIVE]
        assert text.details == (
            "LIS 42 • RIS 69 • CPI 9.10 (good). "
            "Paris alignment meets 80% of the budget for this scope."
        )
        assert text.source == InsightSource.STATIC

    @pytest.mark.parametrize("quadrant", list(Quadrant))
    def test_every_quadrant_has_headline(self, quadrant):
        scores = build_insight_scores(10, 10, 10, quadrant)
        assert build_static_insight_text(scores).short == QUADRANT_HEADLINES[quadrant]


class TestStaticCopy:

    def test_with_context(self):
        context = InsightRequestContext(region="Pacific Northwest", climate_zone="4C")
        copy = build_static_copy("Hempcrete", 12, 78, 9.1, context)
        assert copy == "Hempcrete: LIS 12.0 • RIS 78.0 • CPI 9.10 • Pacific Northwest • 4C."

    def test_defaults(self):
        assert build_static_copy(None) == "This material: LIS — • RIS — • CPI —."
