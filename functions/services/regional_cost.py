"""Regional Cost Adjustment for BlockPlane.

Applies location-based cost multipliers to material base costs.
An unknown region id is not an error: the base cost is returned
unchanged (national baseline).
"""

from typing import List, Optional

import structlog

from models.region import REGIONS, Region, RegionalCostRange, RegionalDifference
from services.formatting import format_currency
from utils.numeric import ieee_divide

logger = structlog.get_logger(__name__)

_REGIONS_BY_ID = {region.id: region for region in REGIONS}


def get_region(region_id: str) -> Optional[Region]:
    """Get region by ID, or None if unknown."""
    return _REGIONS_BY_ID.get(region_id)


def list_regions() -> List[Region]:
    """All regions in table order."""
    return list(REGIONS)


def apply_regional_cost(base_cost: float, region_id: str) -> float:
    """Apply a regional multiplier to a base cost.

    Args:
        base_cost: National-average cost.
        region_id: Region identifier.

    Returns:
        base_cost x multiplier, or base_cost unchanged for an unknown region.
    """
    region = get_region(region_id)
    if region is None:
        logger.debug("region_not_found", region_id=region_id)
        return base_cost
    return base_cost * region.multiplier


def calculate_regional_difference(
    base_cost: float,
    from_region_id: str,
    to_region_id: str,
) -> RegionalDifference:
    """Calculate the cost difference between two regions.

    The percent difference is relative to the "from" cost; a zero
    "from" cost yields inf/nan rather than an error.
    """
    from_cost = apply_regional_cost(base_cost, from_region_id)
    to_cost = apply_regional_cost(base_cost, to_region_id)
    difference = to_cost - from_cost
    percent = ieee_divide(difference, from_cost) * 100

    return RegionalDifference(
        from_cost=from_cost,
        to_cost=to_cost,
        difference=difference,
        percent_difference=percent,
    )


def get_regions_sorted_by_cost() -> List[Region]:
    """All regions sorted by multiplier, lowest first; ties keep table order."""
    return sorted(REGIONS, key=lambda r: r.multiplier)


def format_regional_cost(base_cost: float, region_id: str) -> str:
    """Adjusted cost formatted as USD."""
    return format_currency(apply_regional_cost(base_cost, region_id))


def get_cost_range(base_cost: float) -> RegionalCostRange:
    """Cost range across all regions."""
    ordered = get_regions_sorted_by_cost()
    min_region = ordered[0]
    max_region = ordered[-1]
    return RegionalCostRange(
        min=apply_regional_cost(base_cost, min_region.id),
        max=apply_regional_cost(base_cost, max_region.id),
        min_region=min_region,
        max_region=max_region,
    )
