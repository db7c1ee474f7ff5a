"""Export serialization for BlockPlane.

CSV rows, PDF table cells and shareable URLs for a material comparison.
Every numeric cell goes through services.formatting, so a CPI shown in
the API payload, the CSV and the PDF is the same string (apart from the
placeholder used when it is missing).
"""

import csv
import io
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import parse_qs, urlencode, urlsplit

import structlog

from config.settings import settings
from config.errors import BlockPlaneError, ErrorCode, ExportTargetNotFoundError
from models.material import Material
from services.formatting import PLACEHOLDER, format_cpi, format_number
from utils.numeric import plain_number, round_half_up

logger = structlog.get_logger(__name__)

CSV_HEADERS = [
    "ID",
    "Name",
    "Category",
    "Total Carbon (kg CO₂e)",
    "Functional Unit",
    "LIS",
    "RIS",
    "CPI",
    "Price per Unit ($)",
    "Benchmark Reference",
]

# Position of the CPI cell in a CSV row
CSV_CPI_COLUMN_INDEX = 7

PDF_TABLE_HEADERS = ["Material", "Carbon", "LIS", "RIS", "CPI", "Price ($)"]
PDF_NAME_MAX_LENGTH = 18
PDF_MISSING_PRICE = "N/A"

SHARE_PATH = "/analysis"


def _as_material(material: Union[Material, Dict[str, Any]]) -> Material:
    return material if isinstance(material, Material) else Material.model_validate(material)


def _quote_doubled(value: str) -> str:
    return value.replace('"', '""')


# =============================================================================
# CSV
# =============================================================================


def build_csv_row_for_material(material: Union[Material, Dict[str, Any]]) -> List[str]:
    """Build the ten CSV cells for one material.

    Name and category are wrapped in quotes with internal quotes doubled;
    the benchmark reference is quote-doubled only. Missing numbers are
    empty cells.
    """
    m = _as_material(material)
    return [
        str(m.id),
        f'"{_quote_doubled(m.name)}"',
        f'"{_quote_doubled(m.category)}"',
        format_number(m.total_carbon, 2, placeholder=""),
        m.functional_unit,
        format_number(m.lis, 1, placeholder=""),
        format_number(m.ris, 1, placeholder=""),
        format_cpi(m.cpi, placeholder=""),
        format_number(m.cost, 2, placeholder=""),
        _quote_doubled(m.benchmark_reference or ""),
    ]


def build_materials_csv(materials: Sequence[Union[Material, Dict[str, Any]]]) -> str:
    """Header plus one row per material, newline separated."""
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(build_csv_row_for_material(m)) for m in materials)
    return "\n".join(lines)


def export_materials_to_csv(
    materials: Sequence[Union[Material, Dict[str, Any]]],
    path: Union[str, Path],
) -> Path:
    """Write the materials CSV to ``path``.

    Raises:
        BlockPlaneError: If there is nothing to export.
        ExportTargetNotFoundError: If the output directory does not exist.
    """
    if not materials:
        raise BlockPlaneError(
            code=ErrorCode.EXPORT_FAILED,
            message="No materials to export",
        )

    path = Path(path)
    if not path.parent.exists():
        raise ExportTargetNotFoundError(str(path.parent))

    content = build_materials_csv(materials)
    path.write_text(content, encoding="utf-8")

    logger.info("materials_csv_exported", path=str(path), rows=len(materials))
    return path


def parse_materials_csv(content: str) -> List[Dict[str, str]]:
    """Read an exported CSV back into header-keyed rows."""
    return list(csv.DictReader(io.StringIO(content)))


# =============================================================================
# PDF TABLE
# =============================================================================


def get_pdf_cpi_string(material: Union[Material, Dict[str, Any]]) -> str:
    """CPI text for the PDF table; the CSV cell uses the same formatter."""
    return format_cpi(_as_material(material).cpi, placeholder=PLACEHOLDER)


def _ris_cell(ris: Optional[float]) -> str:
    if ris is None or not math.isfinite(ris):
        return PLACEHOLDER
    return str(int(round_half_up(ris)))


def _price_cell(cost: Optional[float]) -> str:
    if cost is None or not math.isfinite(cost):
        return PDF_MISSING_PRICE
    return f"${format_number(cost, 2)}"


def build_pdf_table_rows(materials: Sequence[Union[Material, Dict[str, Any]]]) -> List[List[str]]:
    """Six PDF table cells per material, in PDF_TABLE_HEADERS order."""
    rows = []
    for material in materials:
        m = _as_material(material)
        rows.append([
            m.name[:PDF_NAME_MAX_LENGTH],
            format_number(m.total_carbon, 1),
            format_number(m.lis, 1),
            _ris_cell(m.ris),
            get_pdf_cpi_string(m),
            _price_cell(m.cost),
        ])
    return rows


# =============================================================================
# SHAREABLE URL
# =============================================================================


def generate_shareable_url(
    base_url: Optional[str] = None,
    materials: Optional[Sequence[Union[int, str]]] = None,
    impact_weight: Optional[float] = None,
    carbon_weight: Optional[float] = None,
    cost_weight: Optional[float] = None,
    category: Optional[str] = None,
) -> str:
    """Build ``<base>/analysis?materials=1,2&impactWeight=..`` for a comparison.

    base_url defaults to APP_BASE_URL. Parameters that are None (or an
    empty material list / category) are left out.
    """
    base_url = base_url or settings.app_base_url
    params = []
    if materials:
        params.append(("materials", ",".join(str(m) for m in materials)))
    if impact_weight is not None:
        params.append(("impactWeight", plain_number(impact_weight)))
    if carbon_weight is not None:
        params.append(("carbonWeight", plain_number(carbon_weight)))
    if cost_weight is not None:
        params.append(("costWeight", plain_number(cost_weight)))
    if category:
        params.append(("category", category))

    return f"{base_url.rstrip('/')}{SHARE_PATH}?{urlencode(params, safe=',')}"


def _parse_id(value: str) -> Union[int, str]:
    try:
        return int(value)
    except ValueError:
        return value


def _parse_weight(value: str) -> Optional[float]:
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_shareable_url(url: str) -> Dict[str, Any]:
    """Recover comparison parameters from a shareable URL.

    Returns:
        Dict with ``materials`` (ids, numeric ones as int), the three
        weights (float or None) and ``category`` (str or None).
        Unparseable weights come back as None.
    """
    query = parse_qs(urlsplit(url).query)

    def first(name: str) -> Optional[str]:
        values = query.get(name)
        return values[0] if values else None

    raw_materials = first("materials")
    materials = [_parse_id(v) for v in raw_materials.split(",") if v] if raw_materials else []

    weights = {}
    for key, name in (
        ("impact_weight", "impactWeight"),
        ("carbon_weight", "carbonWeight"),
        ("cost_weight", "costWeight"),
    ):
        raw = first(name)
        weights[key] = _parse_weight(raw) if raw is not None else None

    return {
        "materials": materials,
        **weights,
        "category": first("category"),
    }
