"""Deterministic insight text for BlockPlane.

Everything here is rule-based and needs no provider or network: the
structured insight box content, the quadrant headline served by the
insight endpoint, and the one-line summary used as the static fallback
in an insight session.
"""

from typing import List, Optional

from models.insight import (
    InsightRequestContext,
    InsightScores,
    InsightSource,
    InsightText,
    Quadrant,
    StaticInsight,
    StaticInsightInput,
)
from services.formatting import format_cpi, format_number

UNDISCLOSED = "undisclosed"

# Tier cutoffs: LIS and CPI are "lower is better", RIS is "higher is better"
LIS_LOW_MAX = 30.0
LIS_MODERATE_MAX = 60.0
RIS_STRONG_MIN = 70.0
RIS_BALANCED_MIN = 40.0
CPI_EFFICIENT_MAX = 35.0
CPI_MID_RANGE_MAX = 65.0

LIS_DRIVER_POSITIVE_MAX = 30.0
RIS_DRIVER_POSITIVE_MIN = 60.0
BENCHMARK_LOWER_LIS_MAX = 35.0

DEFAULT_MATERIAL_LABEL = "This material"
DEFAULT_DRIVER_HINT = "the current lifecycle profile"

QUADRANT_HEADLINES = {
    Quadrant.REGENERATIVE: "Strong impact profile with regenerative upside.",
    Quadrant.TRANSITIONAL: "Balanced option—good impact, keep refining.",
    Quadrant.COSTLY: "Impact is decent but cost per impact is elevated.",
    Quadrant.PROBLEMATIC: "High-impact material; consider lower-impact alternatives.",
}


def describe_tier(value: Optional[float], metric: str) -> str:
    """Name the tier a score falls in.

    Args:
        value: Score, or None when the metric is not disclosed.
        metric: One of "LIS", "RIS", "CPI".

    Returns:
        Tier label, "undisclosed" for a missing value or unknown metric.
    """
    if value is None:
        return UNDISCLOSED
    if metric == "LIS":
        if value <= LIS_LOW_MAX:
            return "low"
        if value <= LIS_MODERATE_MAX:
            return "moderate"
        return "elevated"
    if metric == "RIS":
        if value >= RIS_STRONG_MIN:
            return "strong"
        if value >= RIS_BALANCED_MIN:
            return "balanced"
        return "emerging"
    if metric == "CPI":
        if value <= CPI_EFFICIENT_MAX:
            return "efficient"
        if value <= CPI_MID_RANGE_MAX:
            return "mid-range"
        return "premium"
    return UNDISCLOSED


# =============================================================================
# STRUCTURED INSIGHT BOX
# =============================================================================


def _lis_driver_statements(lis: Optional[float]) -> List[str]:
    if lis is None:
        return ["LIS data pending."]
    if lis <= LIS_DRIVER_POSITIVE_MAX:
        return [
            "Positive: low-carbon sourcing keeps the lifecycle impact grounded.",
            "Continue protecting low-carbon inputs to keep this score contained.",
        ]
    return [
        "Watch: energy-intensive processing pushes the score upward.",
        "Opportunity: revisit sourcing to reduce high-impact materials.",
    ]


def _ris_driver_statements(ris: Optional[float]) -> List[str]:
    if ris is None:
        return ["RIS data pending."]
    if ris >= RIS_DRIVER_POSITIVE_MIN:
        return [
            "Positive: higher regenerative strategies such as reclaimed content create lift.",
            "Maintain regenerative practices to preserve this momentum.",
        ]
    return [
        "Area to grow: limited regenerative inputs constrain overall potential.",
        "Opportunity: refresh program investments to help RIS improve.",
    ]


def _confidence_notes(data: StaticInsightInput) -> List[str]:
    missing = [
        f"{metric} data missing for this version."
        for metric, value in (("LIS", data.lis), ("RIS", data.ris), ("CPI", data.cpi))
        if value is None
    ]
    if not missing:
        return ["No major uncertainties flagged."]
    return ["Scores derive from deterministic LIS/RIS/CPI values."] + missing


def _next_actions(material_name: str) -> List[str]:
    return [
        f"Confirm local sourcing partners that can deliver {material_name or 'this material'} consistently.",
        "Verify maintenance and longevity expectations with the project team.",
        "Compare alternatives with higher RIS or lower CPI before finalizing the specification.",
    ]


def _comparison(data: StaticInsightInput) -> Optional[str]:
    if data.comparison_benchmark:
        return data.comparison_benchmark
    if data.lis is None:
        return None
    descriptor = "lower" if data.lis <= BENCHMARK_LOWER_LIS_MAX else "higher"
    return f"Compared to a Benchmark 2000 reference, LIS is {descriptor} than expected."


def _driver_hint(data: StaticInsightInput) -> str:
    drivers = data.drivers
    if drivers is not None:
        for hints in (drivers.lis, drivers.ris, drivers.cpi):
            if hints:
                return hints[0]
    return DEFAULT_DRIVER_HINT


def render_static_insight(data: StaticInsightInput) -> StaticInsight:
    """Build the deterministic insight box content for one material.

    A CPI of 0 is treated as "no cost data", the same as a missing CPI.
    """
    label = data.material_name or DEFAULT_MATERIAL_LABEL
    takeaway = (
        f"{label} sits in the {describe_tier(data.lis, 'LIS')} LIS tier with "
        f"{describe_tier(data.ris, 'RIS')} regenerative potential, driven by {_driver_hint(data)}."
    )

    if data.cpi:
        cpi_explainer = (
            f"CPI sits at {format_cpi(data.cpi)}, indicating {describe_tier(data.cpi, 'CPI')} "
            "cost intensity for this specification."
        )
    else:
        cpi_explainer = "CPI data unavailable; confirm cost estimates before committing."

    return StaticInsight(
        takeaway=takeaway,
        lis_drivers=_lis_driver_statements(data.lis),
        ris_drivers=_ris_driver_statements(data.ris),
        cpi_explainer=cpi_explainer,
        comparison=_comparison(data),
        confidence=_confidence_notes(data),
        next_actions=_next_actions(data.material_name),
    )


# =============================================================================
# ENDPOINT AND SESSION TEXT
# =============================================================================


def build_static_insight_text(scores: InsightScores) -> InsightText:
    """Quadrant headline plus a details line with the rounded scores."""
    details = (
        f"LIS {format_number(scores.lis, 0)} • RIS {format_number(scores.ris, 0)} • "
        f"CPI {format_cpi(scores.cpi)} ({scores.cpi_band.value}). "
        f"Paris alignment meets {format_number(scores.paris_alignment, 0)}% of the budget for this scope."
    )
    return InsightText(
        short=QUADRANT_HEADLINES[scores.quadrant],
        details=details,
        source=InsightSource.STATIC,
    )


def build_static_copy(
    material_name: Optional[str],
    lis: Optional[float] = None,
    ris: Optional[float] = None,
    cpi: Optional[float] = None,
    context: Optional[InsightRequestContext] = None,
) -> str:
    """One-line summary, e.g. ``"Hempcrete: LIS 12.0 • RIS 78.0 • CPI 9.10."``"""
    values = f"LIS {format_number(lis, 1)} • RIS {format_number(ris, 1)} • CPI {format_cpi(cpi)}"
    context_summary = context.summary() if context is not None else ""
    suffix = f" • {context_summary}" if context_summary else ""
    return f"{material_name or DEFAULT_MATERIAL_LABEL}: {values}{suffix}."
