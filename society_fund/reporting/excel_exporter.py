"""
Excel Exporter Module

Renders a document plan as a multi-sheet workbook with openpyxl. Amounts stay
numeric cells so spreadsheet users can build their own formulas on them.
"""

import logging
import re
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..config import SocietyConfig
from ..errors import ExportAssemblyError
from ..ledger.entries import FundStatus
from .files import atomic_output, is_whole
from .report_builder import DocumentPlan, ReportRow, ReportSection, RowKind

logger = logging.getLogger(__name__)

INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
MAX_SHEET_TITLE = 31


class ExcelExporter:
    """Writes document plans to .xlsx files."""

    SUFFIX = ".xlsx"
    MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    DATE_FORMAT = "yyyy-mm-dd"

    def __init__(self, config: SocietyConfig | None = None):
        """Initialize the exporter.

        Args:
            config: Society configuration (defaults loaded if None)
        """
        self.config = config or SocietyConfig()
        self._setup_styles()

    def _setup_styles(self) -> None:
        """Setup Excel styles from config."""
        excel = self.config.excel
        styles = excel["styles"]

        def font(name: str) -> Font:
            style = styles[name]
            return Font(
                name=style.get("font", "Arial"),
                size=style.get("font_size", 10),
                bold=style.get("bold", False),
                color=style.get("font_color"),
            )

        def fill(name: str) -> PatternFill:
            color = styles[name]["fill_color"]
            return PatternFill(start_color=color, end_color=color, fill_type="solid")

        self.title_font = font("title")
        self.title_fill = fill("title")
        self.heading_font = font("heading")
        self.header_font = font("header")
        self.header_fill = fill("header")
        self.footer_font = font("footer")
        self.footer_fill = fill("footer")
        self.label_font = Font(name="Arial", size=10, bold=True)

        self.status_fonts = {
            FundStatus.PAID: Font(name="Arial", size=10, bold=True, color=excel["status_colors"]["paid"]),
            FundStatus.UNPAID: Font(name="Arial", size=10, bold=True, color=excel["status_colors"]["unpaid"]),
        }

        thin = Side(style="thin", color="000000")
        self.border = Border(left=thin, right=thin, top=thin, bottom=thin)

        self.center_align = Alignment(horizontal="center", vertical="center")
        self.left_align = Alignment(horizontal="left", vertical="center")
        self.right_align = Alignment(horizontal="right", vertical="center")

        self.currency_format = excel["currency_format"]
        self.currency_decimal_format = excel["currency_decimal_format"]

    def export(self, plan: DocumentPlan, output_dir: Path | str | None = None) -> Path:
        """Write a plan to ``<output_dir>/<plan.name>.xlsx``.

        Args:
            plan: DocumentPlan to render
            output_dir: Target directory (configured output dir if None)

        Returns:
            Path to the written workbook

        Raises:
            ExportAssemblyError: If the plan is empty or the workbook cannot
                be built or saved; no file is left behind in that case
        """
        if plan.is_empty:
            raise ExportAssemblyError(f"Report {plan.name} has no sections to export")

        output_dir = Path(output_dir) if output_dir else self.config.output_dir
        output_path = output_dir / f"{plan.name}{self.SUFFIX}"

        try:
            wb = self.build_workbook(plan)
            with atomic_output(output_path) as tmp_path:
                wb.save(tmp_path)
        except Exception as exc:
            logger.error(f"Excel export of {plan.name} failed: {exc}")
            raise ExportAssemblyError(f"Could not build workbook {plan.name}: {exc}") from exc

        logger.info(f"Generated Excel report: {output_path}")
        return output_path

    def build_workbook(self, plan: DocumentPlan) -> Workbook:
        """Build the workbook in memory, one sheet per section."""
        wb = Workbook()
        wb.remove(wb.active)
        used_titles: set[str] = set()

        for section in plan.sections:
            title = self._sheet_title(section.title, used_titles)
            ws = wb.create_sheet(title=title)
            self._write_section(ws, section)

        return wb

    @staticmethod
    def _sheet_title(title: str, used: set[str]) -> str:
        """Excel sheet titles: at most 31 chars, no []:*?/\\, unique."""
        base = INVALID_SHEET_CHARS.sub("-", title)[:MAX_SHEET_TITLE] or "Sheet"
        candidate = base
        counter = 2
        while candidate in used:
            suffix = f" ({counter})"
            candidate = base[:MAX_SHEET_TITLE - len(suffix)] + suffix
            counter += 1
        used.add(candidate)
        return candidate

    def _write_section(self, ws: Worksheet, section: ReportSection) -> None:
        width = len(section.column_widths)
        for col, col_width in enumerate(section.column_widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = col_width

        for row_number, row in enumerate(section.rows, 1):
            if row.kind == RowKind.TITLE:
                self._write_title(ws, row_number, row, width)
            elif row.kind == RowKind.HEADING:
                cell = ws.cell(row=row_number, column=1, value=row.cells[0])
                cell.font = self.heading_font
            elif row.kind == RowKind.HEADER:
                for col, value in enumerate(row.cells, 1):
                    cell = ws.cell(row=row_number, column=col, value=value)
                    cell.font = self.header_font
                    cell.fill = self.header_fill
                    cell.border = self.border
                    cell.alignment = self.center_align
            elif row.kind == RowKind.DATA:
                self._write_data(ws, row_number, row)
            elif row.kind == RowKind.FOOTER:
                for col, value in enumerate(row.cells, 1):
                    cell = self._write_value(ws, row_number, col, value)
                    cell.font = self.footer_font
                    cell.fill = self.footer_fill
                    cell.border = self.border
            elif row.kind == RowKind.STAT:
                label = ws.cell(row=row_number, column=1, value=row.cells[0])
                label.font = self.label_font
                for col, value in enumerate(row.cells[1:], 2):
                    self._write_value(ws, row_number, col, value)

    def _write_title(self, ws: Worksheet, row_number: int, row: ReportRow, width: int) -> None:
        if width > 1:
            ws.merge_cells(start_row=row_number, start_column=1, end_row=row_number, end_column=width)
        cell = ws.cell(row=row_number, column=1, value=row.cells[0])
        cell.font = self.title_font
        cell.fill = self.title_fill
        cell.alignment = self.center_align

    def _write_data(self, ws: Worksheet, row_number: int, row: ReportRow) -> None:
        for col, value in enumerate(row.cells, 1):
            cell = self._write_value(ws, row_number, col, value)
            cell.border = self.border
            if row.status is not None and row.status_column == col - 1:
                cell.font = self.status_fonts[row.status]
                cell.alignment = self.center_align

    def _write_value(self, ws: Worksheet, row_number: int, col: int, value: Any):
        """Write one cell, keeping amounts and dates as typed values."""
        if isinstance(value, Decimal):
            cell = ws.cell(row=row_number, column=col, value=int(value) if is_whole(value) else float(value))
            cell.number_format = self.currency_format if is_whole(value) else self.currency_decimal_format
            cell.alignment = self.right_align
        elif isinstance(value, date):
            cell = ws.cell(row=row_number, column=col, value=value)
            cell.number_format = self.DATE_FORMAT
            cell.alignment = self.left_align
        else:
            cell = ws.cell(row=row_number, column=col, value=value)
            if isinstance(value, str):
                # Entered text such as "=1+1" stays text, never a formula
                cell.data_type = "s"
        return cell
