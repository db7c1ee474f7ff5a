"""Material filtering for BlockPlane.

A material passes when every predicate accepts it. Predicates are pure
functions of (material, filter state), so their order never changes the
result and applying the same filters twice is a no-op.
"""

from typing import Callable, Dict, List, Optional, Sequence

import structlog

from models.filters import (
    CARBON_MAX_DEFAULT,
    COST_RANGE_OPEN_END,
    DEFAULT_FILTERS,
    SCORE_RANGE_MAX,
    FilterState,
)
from models.material import Material

logger = structlog.get_logger(__name__)

# ris - lis must exceed this for the regenerative-only filter
REGENERATIVE_NET_IMPACT_MIN = 30.0

Predicate = Callable[[Material, FilterState], bool]


def matches_search(material: Material, state: FilterState) -> bool:
    """Case-insensitive substring match on name or category."""
    if not state.search:
        return True
    needle = state.search.lower()
    return needle in material.name.lower() or needle in material.category.lower()


def matches_category(material: Material, state: FilterState) -> bool:
    return not state.categories or material.category in state.categories


def matches_ris_range(material: Material, state: FilterState) -> bool:
    ris = material.ris or 0.0
    low, high = state.ris_range
    return low <= ris <= high


def matches_lis_range(material: Material, state: FilterState) -> bool:
    lis = material.lis or 0.0
    low, high = state.lis_range
    return low <= lis <= high


def matches_carbon_max(material: Material, state: FilterState) -> bool:
    """Materials without a carbon figure are never excluded by the ceiling."""
    if material.total_carbon is None:
        return True
    return material.total_carbon <= state.carbon_max


def matches_cost_range(material: Material, state: FilterState) -> bool:
    """Cost range check; an upper bound at the open-end sentinel has no ceiling."""
    cost = material.cost or 0.0
    low, high = state.cost_range
    if cost < low:
        return False
    return high >= COST_RANGE_OPEN_END or cost <= high


def matches_regenerative(material: Material, state: FilterState) -> bool:
    if not state.regenerative_only:
        return True
    return material.net_impact > REGENERATIVE_NET_IMPACT_MIN


PREDICATES: Dict[str, Predicate] = {
    "search": matches_search,
    "category": matches_category,
    "ris_range": matches_ris_range,
    "lis_range": matches_lis_range,
    "carbon_max": matches_carbon_max,
    "cost_range": matches_cost_range,
    "regenerative": matches_regenerative,
}

DEFAULT_PREDICATE_ORDER = tuple(PREDICATES)


def apply_filters(
    materials: Sequence[Material],
    state: FilterState = DEFAULT_FILTERS,
    predicate_order: Optional[Sequence[str]] = None,
) -> List[Material]:
    """Filter materials against a filter state.

    Args:
        materials: Candidate materials; input order is kept.
        state: Filter state.
        predicate_order: Names from PREDICATES in the order to evaluate
            them (default: declaration order). Must name every predicate.

    Returns:
        Materials accepted by every predicate.

    Raises:
        ValueError: If predicate_order is not a permutation of PREDICATES.
    """
    order = tuple(predicate_order) if predicate_order is not None else DEFAULT_PREDICATE_ORDER
    if sorted(order) != sorted(PREDICATES):
        raise ValueError(f"predicate_order must name each of {sorted(PREDICATES)}, got: {list(order)}")
    predicates = [PREDICATES[name] for name in order]

    result = [m for m in materials if all(p(m, state) for p in predicates)]

    logger.debug("filters_applied", total=len(materials), matched=len(result))
    return result


def has_active_filters(state: FilterState) -> bool:
    """True when any field differs from its unfiltered default."""
    return bool(
        state.search
        or state.categories
        or state.ris_range[0] > 0
        or state.ris_range[1] < SCORE_RANGE_MAX
        or state.lis_range[0] > 0
        or state.lis_range[1] < SCORE_RANGE_MAX
        or state.carbon_max < CARBON_MAX_DEFAULT
        or state.cost_range[0] > 0
        or state.cost_range[1] < COST_RANGE_OPEN_END
        or state.regenerative_only
    )
