"""Material Pydantic models for BlockPlane.

This module defines the normalized material record every scoring,
filtering and export surface consumes.

Source records arrive in several shapes (Supabase rows, seeded JSON,
API payloads): scores may sit under ``risScores``, price under
``pricing.costPerUnit``, CPI under ``scores.cpi``. They are flattened
once here so that no consumer has to dig through nested fields.
"""

import math
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_FUNCTIONAL_UNIT = "m²"


def to_finite(value: Any) -> Optional[float]:
    """Coerce a raw value to a finite float, or None.

    Booleans, non-numeric strings, NaN and infinities all become None so
    that absent scores render as placeholders rather than zero.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


# =============================================================================
# BETTER ALTERNATIVE MODEL
# =============================================================================


class BetterAlternative(BaseModel):
    """A suggested replacement listed in PDF reports."""

    name: str = Field(..., min_length=1, description="Alternative material name")
    reason: str = Field(..., description="Why it is better")
    cpi: Optional[float] = Field(None, description="Alternative's CPI, if known")

    @field_validator("cpi", mode="before")
    @classmethod
    def finite_cpi(cls, v):
        return to_finite(v)


# =============================================================================
# MAIN MATERIAL MODEL
# =============================================================================


class Material(BaseModel):
    """A comparison subject with its LIS/RIS/CPI scores.

    LIS, RIS and CPI are independently optional. A missing score is
    None, never 0.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str] = Field(..., description="Material identifier")
    name: str = Field(default="", description="Display name")
    category: str = Field(default="", description="Material category (e.g. 'Timber')")
    functional_unit: str = Field(
        default=DEFAULT_FUNCTIONAL_UNIT, alias="functionalUnit", description="Functional unit"
    )
    total_carbon: Optional[float] = Field(
        None, alias="totalCarbon", description="Total embodied carbon (kg CO2e per functional unit)"
    )
    cost: Optional[float] = Field(None, description="Cost per functional unit (USD)")
    lis: Optional[float] = Field(None, description="Lifecycle Impact Score (lower is better)")
    ris: Optional[float] = Field(None, description="Regenerative Impact Score 0-100 (higher is better)")
    cpi: Optional[float] = Field(None, description="Cost-Performance Index")

    benchmark_reference: Optional[str] = Field(None, alias="benchmarkReference")
    insight_summary: Optional[str] = Field(None, alias="insightSummary")
    insight_static: bool = Field(default=True, alias="insightStatic")
    better_alternatives: List[BetterAlternative] = Field(
        default_factory=list, alias="betterAlternatives"
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_source_shapes(cls, data: Any) -> Any:
        """Lift nested score/pricing fields to the top level.

        Nested values win over top-level ones, matching the precedence
        used by the original catalogue adapters.
        """
        if not isinstance(data, dict):
            return data
        flat: Dict[str, Any] = dict(data)

        ris_scores = flat.pop("risScores", None) or flat.pop("ris_scores", None)
        if isinstance(ris_scores, dict):
            for key in ("lis", "ris"):
                if ris_scores.get(key) is not None:
                    flat[key] = ris_scores[key]

        pricing = flat.pop("pricing", None)
        if isinstance(pricing, dict) and pricing.get("costPerUnit") is not None:
            flat["cost"] = pricing["costPerUnit"]

        scores = flat.pop("scores", None)
        if isinstance(scores, dict):
            for key in ("lis", "ris", "cpi"):
                if flat.get(key) is None and scores.get(key) is not None:
                    flat[key] = scores[key]

        if flat.get("totalCarbon") is None and flat.get("total_carbon") is None:
            for key in ("carbon", "total"):
                if flat.get(key) is not None:
                    flat["totalCarbon"] = flat[key]
                    break

        if not flat.get("name") and flat.get("material"):
            flat["name"] = flat["material"]

        for key in ("functionalUnit", "functional_unit"):
            if key in flat and not flat[key]:
                flat.pop(key)

        return flat

    @field_validator("total_carbon", "cost", "lis", "ris", "cpi", mode="before")
    @classmethod
    def finite_or_none(cls, v):
        """Non-finite or non-numeric values become None."""
        return to_finite(v)

    @field_validator("name", "category", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def net_impact(self) -> float:
        """RIS minus LIS, with missing scores counted as 0."""
        return (self.ris or 0.0) - (self.lis or 0.0)

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape the web client expects."""
        return self.model_dump(by_alias=True)


def parse_materials(records: List[Any]) -> List[Material]:
    """Validate a batch of raw records at the ingestion boundary."""
    return [r if isinstance(r, Material) else Material.model_validate(r) for r in records]
