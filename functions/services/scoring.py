"""Scoring utilities for LIS/RIS/CPI.

Shared source of truth for lifecycle impact, regenerative impact,
cost-performance, RIS tiers, quadrants, CPI bands and Paris alignment.
"""

import math
from typing import Dict, Optional

from models.insight import (
    CPIBand,
    InsightScores,
    MaterialCost,
    MaterialScores,
    Quadrant,
    RISComponents,
    RISTier,
)
from utils.numeric import round_half_up

LIS_BENCHMARK = 200.0  # kg CO2e/m² baseline

RIS_WEIGHTS: Dict[str, float] = {
    "carbon_recovery": 0.30,
    "durability": 0.25,
    "circularity": 0.20,
    "material_health": 0.15,
    "biodiversity": 0.10,
}

QUADRANT_LIS_THRESHOLD = 50.0
QUADRANT_RIS_THRESHOLD = 50.0

CPI_GOOD_MAX = 50.0
CPI_WATCH_MAX = 150.0
CPI_WARNING_MAX = 300.0


def calculate_lis(total_carbon: float, benchmark: float = LIS_BENCHMARK) -> float:
    """Lifecycle Impact Score: carbon as a percentage of the benchmark, 1 decimal."""
    return round_half_up((total_carbon / benchmark) * 100, 1)


def calculate_ris(
    components: Optional[RISComponents] = None,
    fallback: Optional[float] = None,
) -> float:
    """Regenerative Impact Score from weighted components.

    Falls back to an explicit score when components are absent, then 0.
    The weighted sum is used as-is even if weights do not sum to 1.
    """
    if components is not None:
        weighted_sum = sum(
            getattr(components, name) * weight for name, weight in RIS_WEIGHTS.items()
        )
        return round_half_up(weighted_sum)
    if fallback is not None:
        return fallback
    return 0.0


def get_ris_tier(ris: float) -> RISTier:
    if ris >= 75:
        return RISTier.GOLD
    if ris >= 60:
        return RISTier.SILVER
    if ris >= 40:
        return RISTier.BRONZE
    return RISTier.PROBLEMATIC


def calculate_npv(annual_cost: float, years: int, discount_rate: float) -> float:
    """Net present value of a constant annual cost."""
    return sum(annual_cost / (1 + discount_rate) ** year for year in range(1, int(years) + 1))


def calculate_cpi(
    total_carbon: float,
    cost: Optional[MaterialCost] = None,
    years: int = 30,
    discount_rate: float = 0.03,
) -> float:
    """Cost-Performance Index: lifecycle cost (NPV) per kg CO2e.

    Lower is better. Returns 0 when cost data is missing or carbon is 0.
    """
    if cost is None or total_carbon == 0:
        return 0.0

    npv_maintenance = calculate_npv(cost.maint_per_year, years, discount_rate)
    npv_energy = calculate_npv(cost.energy_per_year, years, discount_rate)
    npv_salvage = cost.salvage_value / (1 + discount_rate) ** years

    total_cost = cost.capex + npv_maintenance + npv_energy - npv_salvage
    return round(total_cost / total_carbon, 2)


def classify_quadrant(lis: float, ris: float) -> Quadrant:
    if lis < QUADRANT_LIS_THRESHOLD and ris >= QUADRANT_RIS_THRESHOLD:
        return Quadrant.REGENERATIVE
    if lis >= QUADRANT_LIS_THRESHOLD and ris >= QUADRANT_RIS_THRESHOLD:
        return Quadrant.TRANSITIONAL
    if lis >= QUADRANT_LIS_THRESHOLD and ris < QUADRANT_RIS_THRESHOLD:
        return Quadrant.COSTLY
    return Quadrant.PROBLEMATIC


def classify_cpi_band(cpi: float) -> CPIBand:
    """Band a CPI value; negative or non-finite values are extreme."""
    if cpi is None or not math.isfinite(cpi) or cpi < 0:
        return CPIBand.EXTREME
    if cpi <= CPI_GOOD_MAX:
        return CPIBand.GOOD
    if cpi <= CPI_WATCH_MAX:
        return CPIBand.WATCH
    if cpi <= CPI_WARNING_MAX:
        return CPIBand.WARNING
    return CPIBand.EXTREME


def calculate_all_scores(
    total_carbon: float,
    ris_components: Optional[RISComponents] = None,
    ris_score_override: Optional[float] = None,
    cost: Optional[MaterialCost] = None,
    years: int = 30,
    benchmark: float = LIS_BENCHMARK,
    discount_rate: float = 0.03,
) -> MaterialScores:
    lis = calculate_lis(total_carbon, benchmark)
    ris = calculate_ris(ris_components, ris_score_override)
    return MaterialScores(
        lis=lis,
        ris=ris,
        ris_tier=get_ris_tier(ris),
        cpi=calculate_cpi(total_carbon, cost, years, discount_rate),
        quadrant=classify_quadrant(lis, ris),
    )


def compute_paris_alignment(project_lis: float, paris_lis_budget: float) -> float:
    """Share of the Paris-aligned LIS budget a project meets, clamped to 0-100."""
    if (
        not math.isfinite(project_lis)
        or not math.isfinite(paris_lis_budget)
        or paris_lis_budget <= 0
    ):
        return 0.0
    if project_lis == 0:
        return 100.0
    percent = (paris_lis_budget / project_lis) * 100
    return max(0.0, min(100.0, percent))


def build_insight_scores(
    lis: float,
    ris: float,
    cpi: float,
    quadrant: Quadrant,
    ris_components: Optional[RISComponents] = None,
    paris_alignment: float = 0.0,
) -> InsightScores:
    """Assemble insight scores, deriving the CPI band."""
    return InsightScores(
        lis=lis,
        ris=ris,
        cpi=cpi,
        quadrant=quadrant,
        ris_components=ris_components or RISComponents(),
        paris_alignment=paris_alignment,
        cpi_band=classify_cpi_band(cpi),
    )


def to_ris_chart_data(components: RISComponents):
    """RIS components as labelled chart rows."""
    return [
        {"key": "carbonRecovery", "label": "Carbon Recovery", "score": components.carbon_recovery},
        {"key": "durability", "label": "Durability", "score": components.durability},
        {"key": "circularity", "label": "Circularity", "score": components.circularity},
        {"key": "materialHealth", "label": "Material Health", "score": components.material_health},
        {"key": "biodiversity", "label": "Biodiversity", "score": components.biodiversity},
    ]
