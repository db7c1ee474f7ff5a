"""Cost-Carbon Analysis for BlockPlane.

Functions for analyzing trade-offs between material cost and carbon
impact, calculating break-even points, and optimizing material
selections within budget constraints.

All functions are pure. Division by a zero baseline follows IEEE float
semantics (``inf`` / ``nan``) instead of raising; formatting renders
those values as placeholders.
"""

import math
from typing import Dict, List, Optional, Sequence, Union

import structlog

from models.cost_carbon import (
    BreakEvenAnalysis,
    BreakEvenAssumptions,
    BudgetOptimization,
    CostCarbonMetrics,
)
from models.material import Material
from services.formatting import format_number
from utils.numeric import ieee_divide

logger = structlog.get_logger(__name__)

# $50/ton CO2e reference price
REFERENCE_CARBON_PRICE_PER_TON = 50.0
KG_PER_TON = 1000.0


def _cost(material: Material) -> float:
    return material.cost if material.cost is not None else 0.0


def _carbon(material: Material) -> float:
    return material.total_carbon if material.total_carbon is not None else 0.0


def calculate_cost_carbon_metrics(
    baseline: Material,
    alternative: Material,
    reference_price_per_ton: float = REFERENCE_CARBON_PRICE_PER_TON,
) -> CostCarbonMetrics:
    """Calculate cost-carbon metrics comparing an alternative to a baseline.

    Args:
        baseline: The material being replaced.
        alternative: The candidate replacement.
        reference_price_per_ton: Carbon price used for the equivalent value.

    Returns:
        CostCarbonMetrics. ``cost_per_kg_co2_saved`` is 0 when there are
        no carbon savings.
    """
    cost_premium = _cost(alternative) - _cost(baseline)
    cost_premium_percent = ieee_divide(cost_premium, _cost(baseline)) * 100

    carbon_savings = _carbon(baseline) - _carbon(alternative)
    carbon_savings_percent = ieee_divide(carbon_savings, _carbon(baseline)) * 100

    cost_per_kg = cost_premium / carbon_savings if carbon_savings != 0 else 0.0

    return CostCarbonMetrics(
        cost_premium=cost_premium,
        cost_premium_percent=cost_premium_percent,
        carbon_savings=carbon_savings,
        carbon_savings_percent=carbon_savings_percent,
        cost_per_kg_co2_saved=cost_per_kg,
        carbon_price_equivalent=carbon_savings * (reference_price_per_ton / KG_PER_TON),
    )


def calculate_break_even(
    baseline: Material,
    alternative: Material,
    assumptions: Optional[Union[BreakEvenAssumptions, Dict]] = None,
) -> BreakEvenAnalysis:
    """Perform break-even analysis for a premium sustainable material.

    The recommendation is chosen by an ordered ladder; the first matching
    rung wins:

    1. no cost premium: clear winner
    2. carbon value exceeds the premium: worth it
    3. operational payback within half the lifespan
    4. more than 50% carbon reduction: qualified positive
    5. otherwise: premium not justified
    """
    if assumptions is None:
        assumptions = BreakEvenAssumptions()
    elif isinstance(assumptions, dict):
        assumptions = BreakEvenAssumptions.model_validate(assumptions)

    metrics = calculate_cost_carbon_metrics(baseline, alternative)

    annual_savings = assumptions.annual_savings
    payback_years = metrics.cost_premium / annual_savings if annual_savings > 0 else None

    if metrics.carbon_savings > 0:
        carbon_price_break_even = (metrics.cost_premium / metrics.carbon_savings) * KG_PER_TON
    else:
        carbon_price_break_even = math.inf

    carbon_value = (metrics.carbon_savings / KG_PER_TON) * assumptions.carbon_price
    total_cost_advantage = carbon_value - metrics.cost_premium

    premium_pct = format_number(metrics.cost_premium_percent, 0)
    savings_pct = format_number(metrics.carbon_savings_percent, 0)

    if metrics.cost_premium <= 0:
        recommendation = "✅ Lower cost AND lower carbon - clear winner!"
    elif total_cost_advantage > 0:
        recommendation = (
            f"✅ Worth it! Carbon savings worth ${format_number(carbon_value, 2)} "
            f"at ${assumptions.carbon_price:g}/ton CO₂"
        )
    elif payback_years is not None and payback_years < assumptions.lifespan_years / 2:
        recommendation = (
            f"✅ Pays back in {format_number(payback_years, 1)} years through operational savings"
        )
    elif metrics.carbon_savings_percent > 50:
        recommendation = f"⚠️ {savings_pct}% carbon reduction, but {premium_pct}% cost premium"
    else:
        recommendation = f"❌ {premium_pct}% cost premium for {savings_pct}% carbon reduction"

    logger.debug(
        "break_even_calculated",
        baseline_id=baseline.id,
        alternative_id=alternative.id,
        cost_premium=metrics.cost_premium,
        carbon_savings=metrics.carbon_savings,
        payback_years=payback_years,
    )

    return BreakEvenAnalysis(
        payback_years=payback_years,
        carbon_price_break_even=carbon_price_break_even,
        total_cost_advantage=total_cost_advantage,
        recommendation=recommendation,
    )


def calculate_efficiency_score(material: Material) -> float:
    """Cost-carbon efficiency score (0-100), carbon weighted 60/40 over cost.

    Higher is better. Scales are fixed rather than normalized against the
    catalogue.
    """
    cost_score = max(0.0, 100 - (_cost(material) / 10))
    carbon_score = max(0.0, 100 - (_carbon(material) / 5))
    return (carbon_score * 0.6) + (cost_score * 0.4)


def optimize_within_budget(
    materials: Sequence[Material],
    budget: float,
    quantities: Optional[Dict[Union[int, str], float]] = None,
) -> BudgetOptimization:
    """Greedy selection of lowest carbon-per-dollar materials under a budget.

    Args:
        materials: Candidate materials.
        budget: Total budget ($).
        quantities: Units needed per material id (default 1 each).

    Returns:
        BudgetOptimization with the selection and its totals.
    """
    quantities = quantities or {}

    def quantity(material: Material) -> float:
        return quantities.get(material.id) or 1

    def carbon_per_dollar(material: Material) -> float:
        ratio = ieee_divide(_carbon(material), _cost(material))
        return math.inf if math.isnan(ratio) else ratio

    ranked = sorted(materials, key=carbon_per_dollar)

    selected: List[Material] = []
    total_cost = 0.0
    total_carbon = 0.0
    for material in ranked:
        material_cost = _cost(material) * quantity(material)
        if total_cost + material_cost <= budget:
            selected.append(material)
            total_cost += material_cost
            total_carbon += _carbon(material) * quantity(material)

    baseline_carbon = sum(_carbon(m) * quantity(m) for m in materials)

    logger.info(
        "budget_optimized",
        candidates=len(materials),
        selected=len(selected),
        budget=budget,
        total_cost=total_cost,
    )

    return BudgetOptimization(
        selected_materials=selected,
        total_cost=total_cost,
        total_carbon=total_carbon,
        carbon_savings=baseline_carbon - total_carbon,
        utilization_percent=ieee_divide(total_cost, budget) * 100,
    )


def filter_by_tradeoff_preference(
    materials: Sequence[Material],
    preference: float,
) -> List[Material]:
    """Rank materials by a cost/carbon preference.

    Args:
        materials: Materials to rank.
        preference: 0 = lowest cost, 100 = lowest carbon, 50 = balanced.

    Returns:
        Materials ordered best first; ties keep input order.
    """
    if not materials:
        return []
    max_cost = max(_cost(m) for m in materials)
    max_carbon = max(_carbon(m) for m in materials)

    def score(material: Material) -> float:
        cost_score = 100 - (_cost(material) / max_cost * 100 if max_cost > 0 else 0)
        carbon_score = 100 - (_carbon(material) / max_carbon * 100 if max_carbon > 0 else 0)
        return cost_score * (100 - preference) / 100 + carbon_score * preference / 100

    return sorted(materials, key=score, reverse=True)
