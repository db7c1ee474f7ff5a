"""Cost-carbon analysis Pydantic models for BlockPlane.

Derived, ephemeral records produced by services.cost_carbon. They are
recomputed on every comparison and never persisted. Float fields may hold
``inf`` or ``nan`` when a baseline is zero; formatting renders those as
placeholders.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.material import Material


class CostCarbonMetrics(BaseModel):
    """Cost and carbon deltas of an alternative relative to a baseline."""

    cost_premium: float = Field(..., description="Alternative cost minus baseline cost ($)")
    cost_premium_percent: float = Field(..., description="Premium as % of baseline cost")
    carbon_savings: float = Field(..., description="Baseline carbon minus alternative carbon (kg CO2e)")
    carbon_savings_percent: float = Field(..., description="Savings as % of baseline carbon")
    cost_per_kg_co2_saved: float = Field(
        ..., description="Premium per kg CO2e saved; 0 when savings are 0"
    )
    carbon_price_equivalent: float = Field(
        ..., description="Value of the savings at the $50/ton reference price ($)"
    )


class BreakEvenAssumptions(BaseModel):
    """Operational assumptions for break-even analysis."""

    model_config = ConfigDict(populate_by_name=True)

    energy_savings_per_year: float = Field(default=0.0, alias="energySavingsPerYear", description="Annual energy cost savings ($)")
    maintenance_savings_per_year: float = Field(
        default=0.0, alias="maintenanceSavingsPerYear", description="Annual maintenance savings ($)"
    )
    lifespan_years: float = Field(default=30.0, gt=0, alias="lifespanYears", description="Expected service life (years)")
    carbon_price: float = Field(default=50.0, ge=0, alias="carbonPrice", description="Carbon price ($/ton CO2e)")

    @property
    def annual_savings(self) -> float:
        return self.energy_savings_per_year + self.maintenance_savings_per_year


class BreakEvenAnalysis(BaseModel):
    """Break-even outcome and the recommendation chosen for it."""

    payback_years: Optional[float] = Field(
        None, description="Years to recover the premium; None without recurring savings"
    )
    carbon_price_break_even: float = Field(
        ..., description="$/ton needed to justify the premium; inf without carbon savings"
    )
    total_cost_advantage: float = Field(..., description="Carbon value minus premium ($)")
    recommendation: str = Field(..., description="Human-readable recommendation")


class BudgetOptimization(BaseModel):
    """Greedy selection of materials under a budget."""

    selected_materials: List[Material] = Field(default_factory=list)
    total_cost: float = 0.0
    total_carbon: float = 0.0
    carbon_savings: float = 0.0
    utilization_percent: float = Field(0.0, description="% of budget used")


class CompareRequest(BaseModel):
    """Body of the compare endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    baseline: Material
    alternative: Material
    assumptions: Optional[BreakEvenAssumptions] = None
    region_id: Optional[str] = Field(None, alias="regionId")
