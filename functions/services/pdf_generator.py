"""
PDF Comparison Report Generation for BlockPlane.

Generates material comparison reports using WeasyPrint and Jinja2 templates.
Reports include the compared materials, an optional chart image, the
comparison table, an insight summary and better alternatives.

Architecture:
- Uses Jinja2 for HTML template rendering
- Uses WeasyPrint for HTML to PDF conversion
- Table cells come from services.export_service, so PDF and CSV values agree
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Sequence, Union
from datetime import datetime
from pathlib import Path
import asyncio
import base64
import time

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.errors import ExportTargetNotFoundError
from models.material import Material
from services.export_service import PDF_TABLE_HEADERS, build_pdf_table_rows
from services.formatting import format_cpi, format_number

# Configure structlog logger
logger = structlog.get_logger(__name__)

# Template directory
TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_NAME = "comparison_report.html"

REPORT_TITLE = "Material Comparison Report"
REPORT_FOOTER = "Generated by BlockPlane Materials Explorer"


# =============================================================================
# Data Models
# =============================================================================


@dataclass
class PDFGenerationRequest:
    """
    Request parameters for PDF generation.

    Attributes:
        materials: Materials to compare, in display order
        chart_path: Optional PNG of the comparison chart to embed
        output_path: Optional file path to write the PDF to
        title: Report title
    """

    materials: List[Material]
    chart_path: Optional[str] = None
    output_path: Optional[str] = None
    title: str = REPORT_TITLE


@dataclass
class PDFGenerationResult:
    """
    Result of PDF generation.

    Attributes:
        pdf_bytes: Rendered PDF
        output_path: Where the PDF was written, if anywhere
        page_count: Number of pages in the generated PDF
        file_size_bytes: Size of the PDF in bytes
        generated_at: ISO timestamp when the PDF was generated
    """

    pdf_bytes: bytes = field(repr=False)
    output_path: Optional[str]
    page_count: int
    file_size_bytes: int
    generated_at: str


# =============================================================================
# Template Engine Setup
# =============================================================================


def _get_jinja_env() -> Environment:
    """
    Create and configure Jinja2 environment.

    Returns:
        Configured Jinja2 Environment
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    return env


# =============================================================================
# Report Context
# =============================================================================


def _load_chart_base64(chart_path: Optional[str]) -> str:
    """
    Load the chart PNG as a base64 string for embedding.

    Raises:
        ExportTargetNotFoundError: If a path is given but does not exist
    """
    if not chart_path:
        return ""
    path = Path(chart_path)
    if not path.is_file():
        raise ExportTargetNotFoundError(chart_path)
    with open(path, "rb") as f:
        return base64.b64encode(f.read()).decode("utf-8")


def _material_line(index: int, material: Material) -> str:
    carbon = format_number(material.total_carbon, 1, placeholder="N/A")
    return (
        f"{index}. {material.name} ({material.category}) - "
        f"{carbon} kg CO₂e per {material.functional_unit}"
    )


def _insight_section(materials: Sequence[Material]) -> Optional[Dict[str, str]]:
    """Insight summary of the first material that has one."""
    for material in materials:
        if material.insight_summary:
            return {
                "summary": material.insight_summary,
                "source": "static" if material.insight_static else "dynamic",
            }
    return None


def _alternatives_section(materials: Sequence[Material]) -> List[str]:
    """Better alternatives of the first material that lists any."""
    for material in materials:
        if material.better_alternatives:
            lines = []
            for alt in material.better_alternatives:
                cpi = format_cpi(alt.cpi, placeholder="")
                cpi_part = f" (CPI {cpi})" if cpi else ""
                lines.append(f"{alt.name}{cpi_part}: {alt.reason}")
            return lines
    return []


def build_report_context(
    materials: Sequence[Union[Material, Dict[str, Any]]],
    chart_path: Optional[str] = None,
    title: str = REPORT_TITLE,
    generated_on: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the template context for a comparison report.

    Args:
        materials: Materials (models or raw records) in display order
        chart_path: Optional chart PNG path
        title: Report title
        generated_on: Report date (default now)

    Returns:
        Dictionary passed to the Jinja2 template
    """
    parsed = [m if isinstance(m, Material) else Material.model_validate(m) for m in materials]
    generated_on = generated_on or datetime.now()

    return {
        "title": title,
        "report_date": generated_on.strftime("%B %d, %Y"),
        "material_lines": [_material_line(i, m) for i, m in enumerate(parsed, start=1)],
        "chart_base64": _load_chart_base64(chart_path),
        "table_headers": PDF_TABLE_HEADERS,
        "table_rows": build_pdf_table_rows(parsed),
        "insight": _insight_section(parsed),
        "alternatives": _alternatives_section(parsed),
        "footer": REPORT_FOOTER,
    }


# =============================================================================
# PDF Generation
# =============================================================================


def _render_html(context: Dict[str, Any]) -> str:
    """
    Render HTML from the Jinja2 template.

    Args:
        context: Output of build_report_context

    Returns:
        Rendered HTML string
    """
    env = _get_jinja_env()
    template = env.get_template(TEMPLATE_NAME)
    return template.render(**context)


def _html_to_pdf(html_content: str) -> bytes:
    """
    Convert HTML to PDF using WeasyPrint.

    Args:
        html_content: Rendered HTML string

    Returns:
        PDF content as bytes
    """
    from weasyprint import HTML

    html_doc = HTML(string=html_content, base_url=str(TEMPLATE_DIR))
    return html_doc.write_pdf()


def _count_pdf_pages(pdf_bytes: bytes) -> int:
    """
    Count the number of pages in a PDF.

    Args:
        pdf_bytes: PDF content as bytes

    Returns:
        Number of pages
    """
    content = pdf_bytes.decode("latin-1", errors="ignore")
    return content.count("/Type /Page") - content.count("/Type /Pages")


async def generate_comparison_pdf(
    materials: Sequence[Union[Material, Dict[str, Any]]],
    chart_path: Optional[str] = None,
    output_path: Optional[str] = None,
    title: str = REPORT_TITLE,
) -> PDFGenerationResult:
    """
    Generate a material comparison PDF.

    Rendering runs in a worker thread; WeasyPrint is synchronous.

    Args:
        materials: Materials to compare
        chart_path: Optional chart PNG to embed
        output_path: Optional file path to write the PDF to
        title: Report title

    Returns:
        PDFGenerationResult with the PDF bytes and metadata

    Raises:
        ExportTargetNotFoundError: If the chart or the output directory is missing
    """
    start_time = time.perf_counter()

    request = PDFGenerationRequest(
        materials=[m if isinstance(m, Material) else Material.model_validate(m) for m in materials],
        chart_path=chart_path,
        output_path=output_path,
        title=title,
    )

    logger.info(
        "pdf_generation_started",
        material_count=len(request.materials),
        has_chart=bool(request.chart_path),
    )

    try:
        if request.output_path and not Path(request.output_path).parent.exists():
            raise ExportTargetNotFoundError(str(Path(request.output_path).parent))

        context = build_report_context(request.materials, request.chart_path, request.title)
        html_content = _render_html(context)
        pdf_bytes = await asyncio.to_thread(_html_to_pdf, html_content)

        if request.output_path:
            Path(request.output_path).write_bytes(pdf_bytes)

        page_count = max(_count_pdf_pages(pdf_bytes), 1)
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "pdf_generated",
            material_count=len(request.materials),
            page_count=page_count,
            file_size_kb=round(len(pdf_bytes) / 1024, 2),
            duration_ms=round(duration_ms, 2),
            output_path=request.output_path,
        )

        return PDFGenerationResult(
            pdf_bytes=pdf_bytes,
            output_path=request.output_path,
            page_count=page_count,
            file_size_bytes=len(pdf_bytes),
            generated_at=datetime.now().isoformat(),
        )

    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            "pdf_generation_error",
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round(duration_ms, 2),
        )
        raise
