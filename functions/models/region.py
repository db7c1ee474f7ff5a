"""Regional cost models for BlockPlane.

Major US construction markets with cost multipliers relative to the
national average, based on RSMeans City Cost Indexes (2024).
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class Region(BaseModel):
    """A construction market and its cost multiplier."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Region identifier")
    name: str = Field(..., description="Display name")
    multiplier: float = Field(..., gt=0, description="Cost multiplier (1.0 = national average)")
    description: str = Field(default="", description="Market notes")


class RegionalDifference(BaseModel):
    """Cost of the same item in two regions."""

    from_cost: float
    to_cost: float
    difference: float
    percent_difference: float = Field(..., description="Difference as % of from_cost")


class RegionalCostRange(BaseModel):
    """Cheapest and most expensive adjusted cost across all regions."""

    min: float
    max: float
    min_region: Region
    max_region: Region


NATIONAL_REGION_ID = "national"

# Order matters: ties in multiplier keep this order when sorted.
REGIONS: Tuple[Region, ...] = (
    Region(
        id=NATIONAL_REGION_ID,
        name="National Average",
        multiplier=1.0,
        description="US national average construction costs",
    ),
    Region(
        id="nyc",
        name="New York City",
        multiplier=1.45,
        description="Manhattan and surrounding boroughs - highest labor and material costs",
    ),
    Region(
        id="sf",
        name="San Francisco Bay Area",
        multiplier=1.38,
        description="SF, Oakland, San Jose - high labor costs, strict building codes",
    ),
    Region(
        id="la",
        name="Los Angeles",
        multiplier=1.22,
        description="LA metro area - above average costs, seismic requirements",
    ),
    Region(
        id="seattle",
        name="Seattle",
        multiplier=1.28,
        description="Seattle metro - high labor costs, growing market",
    ),
    Region(
        id="boston",
        name="Boston",
        multiplier=1.32,
        description="Boston metro - high labor costs, historic preservation requirements",
    ),
    Region(
        id="chicago",
        name="Chicago",
        multiplier=1.18,
        description="Chicago metro - above average costs, strong union presence",
    ),
    Region(
        id="denver",
        name="Denver",
        multiplier=1.12,
        description="Denver metro - moderate premium, growing market",
    ),
    Region(
        id="miami",
        name="Miami",
        multiplier=1.08,
        description="Miami metro - hurricane requirements, moderate costs",
    ),
    Region(
        id="atlanta",
        name="Atlanta",
        multiplier=0.95,
        description="Atlanta metro - near national average",
    ),
    Region(
        id="dallas",
        name="Dallas-Fort Worth",
        multiplier=0.92,
        description="DFW metro - below average costs, business-friendly",
    ),
    Region(
        id="phoenix",
        name="Phoenix",
        multiplier=0.90,
        description="Phoenix metro - below average costs, desert climate",
    ),
    Region(
        id="rural",
        name="Rural / Small Town",
        multiplier=0.78,
        description="Rural areas and small towns - lowest costs, limited supplier access",
    ),
)
