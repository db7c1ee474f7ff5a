"""
Unit Tests for the PDF Comparison Report.

Tests cover:
- Report context: material lines, table cells, insight and alternatives
- Template rendering
- PDF generation with a stubbed renderer
- Real WeasyPrint rendering when the library is installed

Usage:
    cd functions && python3 -m pytest tests/unit/test_pdf_generator.py -v
"""

import base64
from datetime import datetime
from unittest.mock import patch

import pytest

from config.errors import ExportTargetNotFoundError
from services.pdf_generator import (
    REPORT_FOOTER,
    PDFGenerationResult,
    _count_pdf_pages,
    _render_html,
    build_report_context,
    generate_comparison_pdf,
)

# On Windows, WeasyPrint can be installed but fail to import due to missing
# native libraries (Pango/GTK), raising OSError. Treat that as unavailable.
try:
    import weasyprint  # noqa: F401
    HAS_WEASYPRINT = True
except Exception:  # pragma: no cover
    HAS_WEASYPRINT = False

FAKE_PDF = b"%PDF-1.7\n<< /Type /Pages >>\n<< /Type /Page >>\n%%EOF"


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def chart_file(tmp_path):
    path = tmp_path / "chart.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake-chart")
    return path


# =============================================================================
# Report Context
# =============================================================================


class TestReportContext:

    def test_material_lines(self, sample_materials):
        context = build_report_context(sample_materials, generated_on=datetime(2024, 3, 5))

        assert context["report_date"] == "March 05, 2024"
        assert context["material_lines"][0] == "1. Cross-Laminated Timber (Timber) - 42.5 kg CO₂e per m²"
        assert context["material_lines"][2].startswith("3. Hempcrete (Insulation)")
        assert context["footer"] == REPORT_FOOTER
        assert context["chart_base64"] == ""

    def test_missing_carbon_shows_na(self):
        context = build_report_context([{"id": 1, "name": "Mystery", "category": "Other"}])
        assert context["material_lines"][0] == "1. Mystery (Other) - N/A kg CO₂e per m²"

    def test_table_uses_export_cells(self, sample_materials):
        context = build_report_context(sample_materials)

        assert context["table_headers"] == ["Material", "Carbon", "LIS", "RIS", "CPI", "Price ($)"]
        assert context["table_rows"][0][4] == "9.10"

    def test_insight_and_alternatives(self, sample_materials):
        context = build_report_context(sample_materials)

        assert context["insight"] == {
            "summary": "Low embodied carbon with strong regenerative potential.",
            "source": "static",
        }
        assert context["alternatives"] == ["Glulam (CPI 7.50): Similar carbon, lower cost"]

    def test_dynamic_insight_and_alternative_without_cpi(self):
        context = build_report_context([{
            "id": 1,
            "name": "Brick",
            "insightSummary": "Generated summary",
            "insightStatic": False,
            "betterAlternatives": [{"name": "Adobe", "reason": "Local earth"}],
        }])

        assert context["insight"]["source"] == "dynamic"
        assert context["alternatives"] == ["Adobe: Local earth"]

    def test_no_insight(self):
        context = build_report_context([{"id": 1, "name": "Brick"}])
        assert context["insight"] is None
        assert context["alternatives"] == []

    def test_chart_is_embedded(self, chart_file):
        context = build_report_context([{"id": 1}], chart_path=str(chart_file))
        assert base64.b64decode(context["chart_base64"]) == chart_file.read_bytes()

    def test_missing_chart(self, tmp_path):
        with pytest.raises(ExportTargetNotFoundError):
            build_report_context([{"id": 1}], chart_path=str(tmp_path / "nope.png"))


# =============================================================================
# Template Rendering
# =============================================================================


class TestTemplateRendering:

    def test_sections_render(self, sample_materials, chart_file):
        html = _render_html(build_report_context(sample_materials, chart_path=str(chart_file)))

        assert "Material Comparison Report" in html
        assert "Materials Compared:" in html
        assert "Detailed Comparison:" in html
        assert "Insight Summary" in html
        assert "Source: static" in html
        assert "Better Alternatives" in html
        assert "data:image/png;base64," in html
        assert REPORT_FOOTER in html

    def test_optional_sections_hidden(self):
        html = _render_html(build_report_context([{"id": 1, "name": "Brick"}]))

        assert "Insight Summary" not in html
        assert "Better Alternatives" not in html
        assert "data:image/png" not in html

    def test_names_are_escaped(self):
        html = _render_html(build_report_context([{"id": 1, "name": "<b>Bold</b>"}]))
        assert "<b>Bold</b>" not in html
        assert "&lt;b&gt;Bold&lt;/b&gt;" in html


# =============================================================================
# PDF Generation
# =============================================================================


class TestGenerateComparisonPDF:

    def test_count_pages(self):
        assert _count_pdf_pages(FAKE_PDF) == 1

    @pytest.mark.asyncio
    async def test_writes_output(self, tmp_path, sample_materials):
        output = tmp_path / "report.pdf"

        with patch("services.pdf_generator._html_to_pdf", return_value=FAKE_PDF) as to_pdf:
            result = await generate_comparison_pdf(sample_materials, output_path=str(output))

        assert isinstance(result, PDFGenerationResult)
        assert output.read_bytes() == FAKE_PDF
        assert result.page_count == 1
        assert result.file_size_bytes == len(FAKE_PDF)
        assert "Cross-Laminated Timber" in to_pdf.call_args.args[0]

    @pytest.mark.asyncio
    async def test_missing_output_directory(self, tmp_path, sample_materials):
        with pytest.raises(ExportTargetNotFoundError):
            await generate_comparison_pdf(
                sample_materials, output_path=str(tmp_path / "missing" / "report.pdf")
            )

    @pytest.mark.asyncio
    @pytest.mark.skipif(not HAS_WEASYPRINT, reason="WeasyPrint (or its native deps) not available on this system")
    async def test_real_pdf(self, sample_materials):
        result = await generate_comparison_pdf(sample_materials)

        assert result.pdf_bytes.startswith(b"%PDF")
        assert result.page_count >= 1
