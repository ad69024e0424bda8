"""
PDF Exporter Module

Renders a document plan as a paginated PDF with reportlab: one page per
section, styled tables with a colored header row, striped body rows, grey
footer rows and colored status cells. Amounts are printed with the
configured currency prefix.
"""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..config import SocietyConfig
from ..errors import ExportAssemblyError
from ..ledger.entries import FundStatus
from .files import atomic_output, format_money
from .report_builder import DocumentPlan, ReportRow, ReportSection, RowKind

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    "A4": A4,
    "LETTER": letter,
}

TABLE_KINDS = (RowKind.HEADER, RowKind.DATA, RowKind.FOOTER)

# Data cells longer than this are wrapped in a Paragraph
WRAP_AT = 30


def _rgb(values: list[int]) -> colors.Color:
    red, green, blue = values
    return colors.Color(red / 255, green / 255, blue / 255)


class PdfExporter:
    """Writes document plans to .pdf files."""

    SUFFIX = ".pdf"
    MEDIA_TYPE = "application/pdf"
    MARGIN = 14 * mm

    def __init__(self, config: SocietyConfig | None = None):
        """Initialize the exporter.

        Args:
            config: Society configuration (defaults loaded if None)
        """
        self.config = config or SocietyConfig()
        self.currency_prefix = self.config.reports["currency_prefix"]
        self._setup_styles()

    def _setup_styles(self) -> None:
        pdf = self.config.pdf
        self.page_size = PAGE_SIZES.get(str(pdf["page_size"]).upper(), A4)
        self.accent_color = _rgb(pdf["accent_color"])
        self.footer_color = _rgb(pdf["footer_color"])
        self.stripe_color = _rgb(pdf["stripe_color"])
        self.status_colors = {
            FundStatus.PAID: _rgb(pdf["status_colors"]["paid"]),
            FundStatus.UNPAID: _rgb(pdf["status_colors"]["unpaid"]),
        }

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "SectionTitle", parent=styles["Heading1"], fontSize=16, textColor=self.accent_color,
        )
        self.heading_style = ParagraphStyle("SectionHeading", parent=styles["Heading3"], fontSize=12)
        self.cell_style = ParagraphStyle("Cell", parent=styles["Normal"], fontSize=10, leading=12)

    @property
    def available_width(self) -> float:
        return self.page_size[0] - 2 * self.MARGIN

    def export(self, plan: DocumentPlan, output_dir: Path | str | None = None) -> Path:
        """Write a plan to ``<output_dir>/<plan.name>.pdf``.

        Args:
            plan: DocumentPlan to render
            output_dir: Target directory (configured output dir if None)

        Returns:
            Path to the written document

        Raises:
            ExportAssemblyError: If the plan is empty or the document cannot
                be built; no file is left behind in that case
        """
        if plan.is_empty:
            raise ExportAssemblyError(f"Report {plan.name} has no sections to export")

        output_dir = Path(output_dir) if output_dir else self.config.output_dir
        output_path = output_dir / f"{plan.name}{self.SUFFIX}"

        try:
            elements = self.build_elements(plan)
            with atomic_output(output_path) as tmp_path:
                doc = SimpleDocTemplate(
                    str(tmp_path),
                    pagesize=self.page_size,
                    rightMargin=self.MARGIN,
                    leftMargin=self.MARGIN,
                    topMargin=self.MARGIN,
                    bottomMargin=self.MARGIN,
                    title=plan.title,
                )
                doc.build(elements)
        except Exception as exc:
            logger.error(f"PDF export of {plan.name} failed: {exc}")
            raise ExportAssemblyError(f"Could not build document {plan.name}: {exc}") from exc

        logger.info(f"Generated PDF report: {output_path}")
        return output_path

    def build_elements(self, plan: DocumentPlan) -> list:
        """Flowables for the whole document, a page break between sections."""
        elements = []
        for index, section in enumerate(plan.sections):
            if index > 0:
                elements.append(PageBreak())
            elements.extend(self._section_elements(section))
        return elements

    def _section_elements(self, section: ReportSection) -> list:
        elements = []
        rows = section.rows
        index = 0

        while index < len(rows):
            row = rows[index]

            if row.kind == RowKind.TITLE:
                elements.append(Paragraph(escape(str(row.cells[0])), self.title_style))
                index += 1
            elif row.kind == RowKind.HEADING:
                elements.append(Paragraph(f"<b>{escape(str(row.cells[0]))}</b>", self.heading_style))
                index += 1
            elif row.kind == RowKind.BLANK:
                elements.append(Spacer(1, 4 * mm))
                index += 1
            else:
                # Consecutive rows of the same family share one table
                family = TABLE_KINDS if row.kind in TABLE_KINDS else (RowKind.STAT,)
                end = index
                while end < len(rows) and rows[end].kind in family:
                    end += 1
                run = rows[index:end]
                if row.kind == RowKind.STAT:
                    elements.append(self._stat_table(run))
                else:
                    elements.append(self._data_table(run, section.column_widths))
                index = end

        return elements

    def _text(self, value: Any) -> str:
        if isinstance(value, Decimal):
            return format_money(value, self.currency_prefix)
        if isinstance(value, date):
            return value.isoformat()
        if value is None:
            return ""
        return str(value)

    def _stat_table(self, rows: list[ReportRow]) -> Table:
        data = [[self._text(cell) for cell in row.cells] for row in rows]
        width = self.available_width
        table = Table(data, colWidths=[width * 0.35, width * 0.25], hAlign="LEFT")
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ]))
        return table

    def _data_table(self, rows: list[ReportRow], column_widths: list[int]) -> Table:
        columns = max(len(column_widths), max(len(row.cells) for row in rows))
        data = []
        commands = [
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ]

        data_index = 0
        for row_number, row in enumerate(rows):
            cells = list(row.cells) + [""] * (columns - len(row.cells))
            data.append([self._cell(row, col, value) for col, value in enumerate(cells)])

            for col, value in enumerate(cells):
                if isinstance(value, (Decimal, int)) and not isinstance(value, bool):
                    commands.append(("ALIGN", (col, row_number), (col, row_number), "RIGHT"))

            if row.kind == RowKind.HEADER:
                commands += [
                    ("BACKGROUND", (0, row_number), (-1, row_number), self.accent_color),
                    ("TEXTCOLOR", (0, row_number), (-1, row_number), colors.white),
                    ("FONTNAME", (0, row_number), (-1, row_number), "Helvetica-Bold"),
                    ("FONTSIZE", (0, row_number), (-1, row_number), 11),
                ]
            elif row.kind == RowKind.FOOTER:
                commands += [
                    ("BACKGROUND", (0, row_number), (-1, row_number), self.footer_color),
                    ("FONTNAME", (0, row_number), (-1, row_number), "Helvetica-Bold"),
                ]
            else:
                if data_index % 2 == 1:
                    commands.append(("BACKGROUND", (0, row_number), (-1, row_number), self.stripe_color))
                data_index += 1

                if row.status is not None and row.status_column is not None:
                    cell = (row.status_column, row_number)
                    commands += [
                        ("TEXTCOLOR", cell, cell, self.status_colors[row.status]),
                        ("FONTNAME", cell, cell, "Helvetica-Bold"),
                        ("FONTSIZE", cell, cell, 11),
                        ("ALIGN", cell, cell, "CENTER"),
                    ]

        total = sum(column_widths) or columns
        widths = [self.available_width * width / total for width in column_widths]
        widths += [self.available_width / columns] * (columns - len(widths))

        table = Table(data, colWidths=widths, repeatRows=1 if rows[0].kind == RowKind.HEADER else 0)
        table.setStyle(TableStyle(commands))
        return table

    def _cell(self, row: ReportRow, col: int, value: Any) -> Any:
        text = self._text(value)
        if row.kind == RowKind.DATA and col != row.status_column and isinstance(value, str) and len(value) > WRAP_AT:
            return Paragraph(escape(text), self.cell_style)
        return text
