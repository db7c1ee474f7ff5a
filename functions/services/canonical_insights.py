"""Canonical insight registry for BlockPlane.

Curated, human-authored insights live as JSON documents under
``data/canonical/``. They are loaded once, validated into frozen
CanonicalInsight models and matched against an InsightContext.
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from models.insight import CanonicalInsight, InsightContext, InsightContextType

logger = structlog.get_logger(__name__)

CANONICAL_DIR = Path(__file__).parent.parent / "data" / "canonical"


@dataclass(frozen=True)
class CanonicalMatchRule:
    """An explicit rule pointing a context at one insight id."""

    insight_id: str
    match: Callable[[InsightContext], bool]


def _is_comparison_with(*material_ids: str) -> Callable[[InsightContext], bool]:
    def match(ctx: InsightContext) -> bool:
        return ctx.type == InsightContextType.COMPARISON and all(
            material_id in ctx.material_ids for material_id in material_ids
        )

    return match


def _is_comparison_tagged(tag: str) -> Callable[[InsightContext], bool]:
    def match(ctx: InsightContext) -> bool:
        return ctx.type == InsightContextType.COMPARISON and tag in ctx.tags

    return match


# Evaluated in order; the first matching rule wins.
MATCH_RULES: Tuple[CanonicalMatchRule, ...] = (
    CanonicalMatchRule("insight-001", _is_comparison_with("rammed_earth", "hempcrete", "wood_framing_2x6")),
    CanonicalMatchRule("insight-002", _is_comparison_with("fiberglass_batt_insulation", "dense_pack_cellulose")),
    CanonicalMatchRule("insight-003", _is_comparison_tagged("windows")),
)


@lru_cache(maxsize=1)
def _load_registry(directory: str = str(CANONICAL_DIR)) -> Tuple[CanonicalInsight, ...]:
    """Load and validate every canonical document, ordered by file name."""
    insights = []
    for path in sorted(Path(directory).glob("*.json")):
        with open(path, "r", encoding="utf-8") as f:
            insights.append(CanonicalInsight.model_validate(json.load(f)))

    logger.debug("canonical_insights_loaded", count=len(insights), directory=directory)
    return tuple(insights)


def list_canonical_insights() -> List[CanonicalInsight]:
    """All canonical insights in registry order."""
    return list(_load_registry())


def get_canonical_insight(insight_id: str) -> Optional[CanonicalInsight]:
    """Look up a canonical insight by id."""
    by_id: Dict[str, CanonicalInsight] = {insight.id: insight for insight in _load_registry()}
    return by_id.get(insight_id)


def find_canonical_insight(ctx: InsightContext) -> Optional[CanonicalInsight]:
    """Find the canonical insight for a context.

    Resolution order:
    1. The first explicit match rule whose insight exists in the registry.
    2. The first registry entry whose related materials overlap the
       context's material ids.
    3. None.
    """
    for rule in MATCH_RULES:
        if rule.match(ctx):
            hit = get_canonical_insight(rule.insight_id)
            if hit is not None:
                return hit
            break

    if ctx.material_ids:
        wanted = set(ctx.material_ids)
        for insight in _load_registry():
            if wanted.intersection(insight.related_materials):
                return insight

    return None
