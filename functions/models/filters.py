"""Filter state model for the material browser."""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


SCORE_RANGE_MAX = 100.0
CARBON_MAX_DEFAULT = 1000.0
# A cost range whose upper bound sits here has no ceiling ("1000+").
COST_RANGE_OPEN_END = 1000.0


class FilterState(BaseModel):
    """Multi-field filter; every active field must match (AND)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    search: str = ""
    categories: List[str] = Field(default_factory=list)
    ris_range: Tuple[float, float] = Field((0.0, SCORE_RANGE_MAX), alias="risRange")
    lis_range: Tuple[float, float] = Field((0.0, SCORE_RANGE_MAX), alias="lisRange")
    carbon_max: float = Field(CARBON_MAX_DEFAULT, alias="carbonMax")
    cost_range: Tuple[float, float] = Field((0.0, COST_RANGE_OPEN_END), alias="costRange")
    regenerative_only: bool = Field(False, alias="regenerativeOnly")

    @model_validator(mode="after")
    def validate_ranges(self) -> "FilterState":
        """Ensure each range is ordered low <= high."""
        for name in ("ris_range", "lis_range", "cost_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} must be low <= high, got: low={low}, high={high}")
        return self


DEFAULT_FILTERS = FilterState()
