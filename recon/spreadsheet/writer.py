from datetime import date
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import Font, PatternFill
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from recon.logging.logger import Log
from recon.reconciliation.models import ReconciliationReport, Summary, ValidationResult
from recon.spreadsheet.exceptions import SpreadsheetError

RESULT_HEADERS: dict[str, str] = {
    "AH": "Item Code Check",
    "AI": "Qty Check",
    "AJ": "Document Item Code",
    "AK": "Document Qty",
    "AL": "Document Unit",
    "AM": "Issues",
}

_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFE0E0E0")
_OK_FILL = PatternFill(fill_type="solid", fgColor="FF90EE90")
_ERROR_FILL = PatternFill(fill_type="solid", fgColor="FFFF6B6B")
_WARNING_FILL = PatternFill(fill_type="solid", fgColor="FFFFEB3B")
_WARNING_VALUES = frozenset({"NOT MATCH", "OVER LIMIT", "WARNING"})

SUMMARY_SHEET = "Summary"


class ResultSheetWriter:
    """Writes validation verdicts next to the reference rows and adds a summary sheet."""

    def __init__(self, header_row: int = 4, log: Log | None = None) -> None:
        self._header_row = header_row
        self._log = log or Log("spreadsheet")

    def write(
        self,
        source_path: Path,
        output_path: Path,
        report: ReconciliationReport,
        ticket_number: str | None = None,
        log: Log | None = None,
    ) -> Path:
        """Copy the source workbook to output_path with result columns filled in.

        Raises:
            SpreadsheetError: if the workbook cannot be opened or saved.
        """
        log = log or self._log
        try:
            workbook = load_workbook(source_path)
        except Exception as exc:
            raise SpreadsheetError(f"Cannot open workbook {source_path}: {exc}") from exc

        self.fill(workbook, report, ticket_number)
        log.info(f"Written {len(report.results)} results")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(output_path)
        except Exception as exc:
            raise SpreadsheetError(f"Cannot save workbook {output_path}: {exc}") from exc
        finally:
            workbook.close()
        log.info(f"Excel saved: {output_path.name}")
        return output_path

    def fill(
        self,
        workbook: Workbook,
        report: ReconciliationReport,
        ticket_number: str | None = None,
    ) -> None:
        worksheet = workbook.worksheets[0]
        for column, title in RESULT_HEADERS.items():
            cell = worksheet[f"{column}{self._header_row}"]
            cell.value = title
            cell.font = Font(bold=True)
            cell.fill = _HEADER_FILL

        for result in report.results:
            self._write_row(worksheet, result)

        self._write_summary(workbook, report.summary, ticket_number)

    def _write_row(self, worksheet: Worksheet, result: ValidationResult) -> None:
        row = result.row_number
        item = result.extracted

        code_cell = worksheet[f"AH{row}"]
        code_cell.value = result.item_code_status.value
        _apply_status_style(code_cell, result.item_code_status.value)

        quantity_cell = worksheet[f"AI{row}"]
        quantity_cell.value = result.quantity_status.value
        _apply_status_style(quantity_cell, result.quantity_status.value)

        worksheet[f"AJ{row}"].value = item.code if item else "N/A"
        worksheet[f"AK{row}"].value = item.quantity if item else 0
        worksheet[f"AL{row}"].value = item.unit if item else "N/A"
        worksheet[f"AM{row}"].value = "; ".join(result.issues)

    def _write_summary(
        self, workbook: Workbook, summary: Summary, ticket_number: str | None
    ) -> None:
        if SUMMARY_SHEET in workbook.sheetnames:
            del workbook[SUMMARY_SHEET]
        sheet = workbook.create_sheet(SUMMARY_SHEET)

        sheet["A1"].value = "VERIFICATION SUMMARY"
        sheet["A1"].font = Font(bold=True, size=14)
        sheet["A3"].value = "Ticket Number:"
        sheet["B3"].value = ticket_number or "N/A"
        sheet["A4"].value = "Verification Date:"
        sheet["B4"].value = date.today().isoformat()

        rows: list[tuple[str, object]] = [
            ("Total Items", summary.total),
            ("Items OK", summary.ok),
            ("Items with Warning", summary.warning),
            ("Items with Error", summary.error),
            ("Success Rate", summary.success_rate_label),
            ("", ""),
            ("Issues Breakdown", ""),
            ("Item Code Issues", summary.item_code_issues),
            ("Qty Issues", summary.quantity_issues),
        ]
        for offset, (label, value) in enumerate(rows):
            row = 6 + offset
            sheet[f"A{row}"].value = label
            sheet[f"B{row}"].value = value
            if label == "Success Rate":
                sheet[f"B{row}"].font = Font(bold=True, color=_rate_color(summary.success_rate))

        sheet.column_dimensions["A"].width = 25
        sheet.column_dimensions["B"].width = 15


def _apply_status_style(cell: Cell, status: str) -> None:
    if status == "OK":
        cell.fill = _OK_FILL
        cell.font = Font(color="FF006400")
    elif status == "ERROR":
        cell.fill = _ERROR_FILL
        cell.font = Font(color="FF8B0000", bold=True)
    elif status in _WARNING_VALUES:
        cell.fill = _WARNING_FILL
        cell.font = Font(color="FF000000")


def _rate_color(rate: float) -> str:
    if rate >= 90:
        return "FF006400"
    if rate >= 70:
        return "FFFF8C00"
    return "FF8B0000"
