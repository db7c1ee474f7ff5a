"""Prompt construction for AI material insights."""

from typing import List

from models.insight import MaterialInsightInput
from utils.numeric import plain_number

SYSTEM_PROMPT = (
    "You are BlockPlane's materials assistant. Turn lifecycle scores into short, "
    "practical insights for builders and architects. Be concrete, calm, and "
    "non-judgmental. Keep responses under 160 words."
)

EXPLAIN_SCORES = (
    "LIS (Lifecycle Impact Score) represents the materials’ total carbon burden over its life. "
    "RIS (Regenerative Impact Score) reflects how much recovery and circularity the material delivers. "
    "CPI (Cost-Performance Index) shows the dollars-per-kilogram CO₂e efficiency—lower is better."
)


def build_material_insight_prompt(data: MaterialInsightInput) -> str:
    """Build the user prompt for a material insight.

    Only facts that are present are listed; the model is told not to
    invent the rest.
    """
    facts: List[str] = []
    if data.material_name:
        facts.append(f"Material: {data.material_name}")
    if data.category:
        facts.append(f"Category: {data.category}")
    if data.lis is not None:
        facts.append(f"LIS: {plain_number(data.lis)}")
    if data.ris is not None:
        facts.append(f"RIS: {plain_number(data.ris)}")
    if data.cpi is not None:
        facts.append(f"CPI: {plain_number(data.cpi)}")
    if data.quadrant is not None:
        facts.append(f"Quadrant: {data.quadrant.value}")
    if data.cpi_band is not None:
        facts.append(f"CPI band: {data.cpi_band.value}")
    if data.paris_alignment is not None:
        facts.append(f"Paris alignment: {plain_number(data.paris_alignment)}%")

    context_lines: List[str] = []
    if data.context is not None:
        if data.context.region:
            context_lines.append(f"Region: {data.context.region}")
        if data.context.climate_zone:
            context_lines.append(f"Climate zone: {data.context.climate_zone}")
        if data.context.building_type:
            context_lines.append(f"Building type: {data.context.building_type}")
    if data.context_note:
        context_lines.append(f"Note: {data.context_note}")

    context_block = "Context:\n" + "\n".join(context_lines) if context_lines else ""

    return "\n".join([
        "You are a calm, practical sustainability advisor for designers and builders.",
        EXPLAIN_SCORES,
        "",
        "Facts:",
        "\n".join(facts),
        context_block,
        "",
        "Task:",
        "1. What this score suggests — interpret the LIS/RIS/CPI balance in accessible terms.",
        "2. Best next move — give a concrete, realistic action the team could take.",
        "3. Watch-outs / assumptions — surface any caveats and assumptions.",
        "Keep each section concise. Avoid fear or FOMO language. Stay under 160 words total. "
        "Use polite, steady tone.",
    ]).strip()
