"""Insight Pydantic models for BlockPlane.

Covers the three insight paths:
- scored insight text (static template or AI) served by the insight endpoint
- the deterministic structured insight shown in the insight box
- curated canonical insights matched against an InsightContext
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class Quadrant(str, Enum):
    """LIS/RIS quadrant classification."""

    REGENERATIVE = "Regenerative"
    TRANSITIONAL = "Transitional"
    COSTLY = "Costly"
    PROBLEMATIC = "Problematic"


class RISTier(str, Enum):
    """RIS certification-style tier."""

    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"
    PROBLEMATIC = "Problematic"


class CPIBand(str, Enum):
    """CPI band, ordered from best to worst."""

    GOOD = "good"
    WATCH = "watch"
    WARNING = "warning"
    EXTREME = "extreme"


class InsightSource(str, Enum):
    """Where insight text came from."""

    STATIC = "static"
    AI = "ai"


class InsightContextType(str, Enum):
    MATERIAL = "material"
    ASSEMBLY = "assembly"
    COMPARISON = "comparison"


# =============================================================================
# SCORE MODELS
# =============================================================================


class RISComponents(BaseModel):
    """Weighted inputs of the Regenerative Impact Score (0-100 each)."""

    model_config = ConfigDict(populate_by_name=True)

    carbon_recovery: float = Field(0.0, ge=0, le=100, alias="carbonRecovery")
    durability: float = Field(0.0, ge=0, le=100)
    circularity: float = Field(0.0, ge=0, le=100)
    material_health: float = Field(0.0, ge=0, le=100, alias="materialHealth")
    biodiversity: float = Field(0.0, ge=0, le=100)


class MaterialCost(BaseModel):
    """Lifecycle cost inputs for CPI."""

    model_config = ConfigDict(populate_by_name=True)

    capex: float = Field(..., ge=0, description="Upfront cost ($/unit)")
    maint_per_year: float = Field(0.0, ge=0, alias="maintPerYear")
    energy_per_year: float = Field(0.0, ge=0, alias="energyPerYear")
    salvage_value: float = Field(0.0, ge=0, alias="salvageValue")
    lifespan_years: float = Field(30.0, gt=0, alias="lifespanYears")


class MaterialScores(BaseModel):
    """Full score set for one material."""

    lis: float
    ris: float
    ris_tier: RISTier
    cpi: float
    quadrant: Quadrant


class InsightScores(BaseModel):
    """Scores an insight is derived from."""

    model_config = ConfigDict(populate_by_name=True)

    lis: float
    ris: float
    cpi: float
    quadrant: Quadrant
    ris_components: RISComponents = Field(default_factory=RISComponents, alias="risComponents")
    paris_alignment: float = Field(0.0, alias="parisAlignment")
    cpi_band: CPIBand = Field(..., alias="cpiBand")


class InsightText(BaseModel):
    """Headline plus optional details, tagged with its source."""

    short: str
    details: Optional[str] = None
    source: InsightSource = InsightSource.STATIC
    model: Optional[str] = None


# =============================================================================
# STRUCTURED STATIC INSIGHT
# =============================================================================


class InsightDrivers(BaseModel):
    """Free-text hints about what drives each score."""

    lis: List[str] = Field(default_factory=list)
    ris: List[str] = Field(default_factory=list)
    cpi: List[str] = Field(default_factory=list)


class StaticInsightInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    material_id: str = Field(..., alias="materialId")
    material_name: str = Field(default="", alias="materialName")
    lis: Optional[float] = None
    ris: Optional[float] = None
    cpi: Optional[float] = None
    drivers: Optional[InsightDrivers] = None
    comparison_benchmark: Optional[str] = Field(None, alias="comparisonBenchmark")


class StaticInsight(BaseModel):
    """Deterministic insight box content."""

    takeaway: str
    lis_drivers: List[str]
    ris_drivers: List[str]
    cpi_explainer: str
    comparison: Optional[str] = None
    confidence: List[str]
    next_actions: List[str]


# =============================================================================
# AI PROVIDER I/O
# =============================================================================


class InsightRequestContext(BaseModel):
    """Project context passed to AI providers."""

    model_config = ConfigDict(populate_by_name=True)

    climate_zone: Optional[str] = Field(None, alias="climateZone")
    region: Optional[str] = None
    building_type: Optional[str] = Field(None, alias="buildingType")

    def summary(self) -> str:
        return " • ".join(p for p in (self.region, self.climate_zone, self.building_type) if p)


class MaterialInsightInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    material_id: Optional[str] = Field(None, alias="materialId")
    material_name: Optional[str] = Field(None, alias="materialName")
    lis: Optional[float] = None
    ris: Optional[float] = None
    cpi: Optional[float] = None
    quadrant: Optional[Quadrant] = None
    cpi_band: Optional[CPIBand] = Field(None, alias="cpiBand")
    paris_alignment: Optional[float] = Field(None, alias="parisAlignment")
    category: Optional[str] = None
    context: Optional[InsightRequestContext] = None
    context_note: Optional[str] = Field(None, alias="contextNote")


class InsightGenerationResult(BaseModel):
    text: str


# =============================================================================
# CANONICAL INSIGHTS
# =============================================================================


class InsightContext(BaseModel):
    """Where an insight is being requested from."""

    model_config = ConfigDict(populate_by_name=True)

    type: InsightContextType
    primary_id: str = Field(..., alias="primaryId")
    secondary_id: Optional[str] = Field(None, alias="secondaryId")
    material_ids: List[str] = Field(default_factory=list, alias="materialIds")
    tags: List[str] = Field(default_factory=list)


class LISContext(BaseModel):
    summary: str
    relative_position: Optional[str] = None


class CPIContext(BaseModel):
    summary: str


class MetricsContext(BaseModel):
    LIS: Optional[LISContext] = None
    RIS: Optional[Dict[str, str]] = None
    CPI: Optional[CPIContext] = None


class WhyItScores(BaseModel):
    LIS: Optional[str] = None
    RIS: Optional[str] = None


class WhenItMakesSense(BaseModel):
    choose_this_when: List[str] = Field(default_factory=list)
    choose_alternative_when: List[str] = Field(default_factory=list)


class CanonicalSections(BaseModel):
    overview: str
    why_it_scores_this_way: Optional[WhyItScores] = None
    tradeoffs: List[str] = Field(default_factory=list)
    when_it_makes_sense: Optional[WhenItMakesSense] = None
    alternatives: List[str] = Field(default_factory=list)
    takeaway: Optional[str] = None


class UIHints(BaseModel):
    default_expanded: bool = False
    emphasis: Optional[str] = None
    tone: Optional[str] = None


class CanonicalInsight(BaseModel):
    """Human-authored insight loaded from a JSON document."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: InsightContextType
    status: str = "canonical"
    source: str = "human-authored"
    related_materials: List[str] = Field(default_factory=list)
    metrics_context: MetricsContext = Field(default_factory=MetricsContext)
    sections: CanonicalSections
    ui_hints: Optional[UIHints] = None


# =============================================================================
# ENDPOINT REQUEST
# =============================================================================


class InsightRequest(BaseModel):
    """Body of the insight endpoint.

    Quadrant is derived from LIS/RIS when omitted.
    """

    model_config = ConfigDict(populate_by_name=True)

    lis: float
    ris: float
    cpi: float
    quadrant: Optional[Quadrant] = None
    ris_components: Optional[RISComponents] = Field(None, alias="risComponents")
    paris_alignment: float = Field(0.0, alias="parisAlignment")
    material_name: Optional[str] = Field(None, alias="materialName")
    category: Optional[str] = None
    context_note: Optional[str] = Field(None, alias="contextNote")
    use_ai: bool = Field(False, alias="useAI")
