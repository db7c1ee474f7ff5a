"""Insight and comparison endpoint logic for BlockPlane.

Transport-independent handlers shared by the Firebase HTTPS functions
(main.py) and the local Flask server (serve_local.py). Each takes the
decoded JSON body and returns a JSON-ready dict; an invalid body raises
config.errors.ValidationError.
"""

import math
from typing import Any, Dict, Optional, Type, TypeVar

import pydantic
import structlog

from config.errors import ValidationError
from config.settings import settings
from models.cost_carbon import CompareRequest
from models.insight import (
    InsightContext,
    InsightRequest,
    InsightScores,
    InsightSource,
    InsightText,
    MaterialInsightInput,
)
from models.material import Material
from services.canonical_insights import find_canonical_insight
from services.cost_carbon import calculate_break_even, calculate_cost_carbon_metrics
from services.formatting import (
    format_carbon,
    format_currency,
    format_number,
    format_percent,
)
from services.insight_providers import (
    InsightProvider,
    get_insight_provider,
    resolve_provider_name,
)
from services.regional_cost import apply_regional_cost, get_region
from services.scoring import build_insight_scores, classify_quadrant
from services.static_insight import build_static_insight_text

logger = structlog.get_logger(__name__)

RequestModel = TypeVar("RequestModel", bound=pydantic.BaseModel)


def parse_request(model: Type[RequestModel], payload: Any) -> RequestModel:
    """Validate a request body, converting pydantic errors to ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        first_field = errors[0]["field"] if errors else None
        raise ValidationError(
            f"Invalid {model.__name__} body",
            field=first_field,
            details={"errors": errors},
        ) from e


def _json_number(value: Optional[float]) -> Optional[float]:
    """inf/nan have no JSON encoding; they travel as null next to a formatted string."""
    if value is None or not math.isfinite(value):
        return None
    return value


# =============================================================================
# INSIGHT
# =============================================================================


def _split_ai_text(text: str, fallback: InsightText) -> InsightText:
    """First non-empty line becomes the headline, the rest the details."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return fallback
    details = "\n".join(lines[1:]) or fallback.details
    return InsightText(short=lines[0], details=details, source=InsightSource.AI)


async def _generate_ai_text(
    provider: InsightProvider,
    request: InsightRequest,
    scores: InsightScores,
    static_text: InsightText,
) -> InsightText:
    data = MaterialInsightInput(
        material_name=request.material_name,
        lis=scores.lis,
        ris=scores.ris,
        cpi=scores.cpi,
        quadrant=scores.quadrant,
        cpi_band=scores.cpi_band,
        paris_alignment=scores.paris_alignment,
        category=request.category,
        context_note=request.context_note,
    )
    try:
        result = await provider.generate_material_insight(data)
    except Exception as e:
        logger.warning(
            "insight_ai_fallback",
            provider=provider.name,
            error=str(e),
        )
        return static_text

    text = _split_ai_text(result.text, static_text)
    if text.source == InsightSource.AI:
        text = text.model_copy(update={"model": provider.model})
    return text


async def handle_insight_request(
    payload: Any,
    provider: Optional[InsightProvider] = None,
) -> Dict[str, Any]:
    """Score a material and return static or AI insight text.

    AI text is attempted only when the body asks for it and a real
    provider is configured (or injected). Any provider failure falls
    back to the static text.

    Args:
        payload: Decoded JSON body (see InsightRequest).
        provider: Optional provider override.

    Returns:
        Dict with ``scores`` and ``insightText``.

    Raises:
        ValidationError: If the body is invalid.
    """
    request = parse_request(InsightRequest, payload)

    scores: InsightScores = build_insight_scores(
        lis=request.lis,
        ris=request.ris,
        cpi=request.cpi,
        quadrant=request.quadrant or classify_quadrant(request.lis, request.ris),
        ris_components=request.ris_components,
        paris_alignment=request.paris_alignment,
    )
    insight_text = build_static_insight_text(scores)

    if request.use_ai:
        if provider is None and resolve_provider_name() != "mock":
            provider = get_insight_provider()
        if provider is not None:
            insight_text = await _generate_ai_text(provider, request, scores, insight_text)

    logger.info(
        "insight_served",
        quadrant=scores.quadrant.value,
        source=insight_text.source.value,
        use_ai=request.use_ai,
    )

    return {
        "scores": scores.model_dump(by_alias=True, mode="json"),
        "insightText": insight_text.model_dump(mode="json", exclude_none=True),
    }


def handle_canonical_request(payload: Any) -> Optional[Dict[str, Any]]:
    """Find the canonical insight for an InsightContext body, or None."""
    ctx = parse_request(InsightContext, payload)
    insight = find_canonical_insight(ctx)
    logger.info(
        "canonical_insight_lookup",
        context_type=ctx.type.value,
        primary_id=ctx.primary_id,
        insight_id=insight.id if insight else None,
    )
    return insight.model_dump(mode="json") if insight else None


# =============================================================================
# COMPARE
# =============================================================================


def _regional(material: Material, region_id: Optional[str]) -> Material:
    if not region_id or material.cost is None:
        return material
    return material.model_copy(update={"cost": apply_regional_cost(material.cost, region_id)})


def handle_compare_request(payload: Any) -> Dict[str, Any]:
    """Cost-carbon comparison of an alternative against a baseline.

    With a region id, both costs are adjusted by the regional multiplier
    first; an unknown region leaves them unchanged.

    Returns:
        Dict with raw ``metrics`` and ``breakEven`` numbers (non-finite
        values as null) and their ``formatted`` display strings.
    """
    request = parse_request(CompareRequest, payload)
    baseline = _regional(request.baseline, request.region_id)
    alternative = _regional(request.alternative, request.region_id)

    metrics = calculate_cost_carbon_metrics(
        baseline,
        alternative,
        reference_price_per_ton=settings.carbon_reference_price,
    )
    break_even = calculate_break_even(baseline, alternative, request.assumptions)

    region = get_region(request.region_id) if request.region_id else None

    formatted: Dict[str, str] = {
        "costPremium": format_currency(metrics.cost_premium),
        "costPremiumPercent": format_percent(metrics.cost_premium_percent),
        "carbonSavings": format_carbon(metrics.carbon_savings),
        "carbonSavingsPercent": format_percent(metrics.carbon_savings_percent),
        "costPerKgCo2Saved": format_currency(metrics.cost_per_kg_co2_saved),
        "carbonPriceEquivalent": format_currency(metrics.carbon_price_equivalent),
        "paybackYears": format_number(break_even.payback_years, 1),
        "carbonPriceBreakEven": format_currency(break_even.carbon_price_break_even),
        "totalCostAdvantage": format_currency(break_even.total_cost_advantage),
    }

    metrics_json = {key: _json_number(value) for key, value in metrics.model_dump().items()}
    break_even_json: Dict[str, Any] = {
        key: _json_number(value) if isinstance(value, float) else value
        for key, value in break_even.model_dump().items()
    }

    logger.info(
        "compare_served",
        baseline_id=baseline.id,
        alternative_id=alternative.id,
        region_id=request.region_id,
        region_found=region is not None,
    )

    return {
        "baseline": baseline.to_api_dict(),
        "alternative": alternative.to_api_dict(),
        "region": region.model_dump() if region else None,
        "metrics": metrics_json,
        "breakEven": break_even_json,
        "formatted": formatted,
    }

