import re
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from recon.logging.logger import Log
from recon.reconciliation.models import ReferenceLineItem
from recon.spreadsheet.exceptions import SpreadsheetError
from recon.spreadsheet.models import ReferenceSheet

_TICKET = re.compile(r"TIKET[- ]?(\d+)", re.IGNORECASE)


class ReferenceSheetReader:
    """Reads reference rows from the first worksheet of an export workbook.

    Layout: B=item code, C=item name, J=quantity, AD=group (aju) number,
    AG=serial. Data starts at a fixed row; reading stops after a run of
    empty item-code cells.
    """

    ITEM_CODE_COLUMN = "B"
    ITEM_NAME_COLUMN = "C"
    QUANTITY_COLUMN = "J"
    GROUP_COLUMN = "AD"
    SERIAL_COLUMN = "AG"
    TICKET_CELL = "A2"

    def __init__(
        self,
        start_row: int = 5,
        max_empty_rows: int = 3,
        log: Log | None = None,
    ) -> None:
        self._start_row = start_row
        self._max_empty_rows = max_empty_rows
        self._log = log or Log("spreadsheet")

    def read(self, path: Path, log: Log | None = None) -> ReferenceSheet:
        """Load the workbook at path and parse its reference rows.

        Raises:
            SpreadsheetError: if the workbook cannot be opened or has no sheet.
        """
        log = log or self._log
        log.info(f"Loading Excel file: {path.name}")
        try:
            workbook = load_workbook(path, data_only=True)
        except Exception as exc:
            raise SpreadsheetError(f"Cannot open workbook {path}: {exc}") from exc
        try:
            if not workbook.worksheets:
                raise SpreadsheetError(f"No worksheet found in {path}")
            return self.read_worksheet(workbook.worksheets[0], log)
        finally:
            workbook.close()

    def read_worksheet(self, worksheet: Worksheet, log: Log | None = None) -> ReferenceSheet:
        log = log or self._log
        items: list[ReferenceLineItem] = []
        row = self._start_row
        empty_rows = 0
        while empty_rows < self._max_empty_rows and row <= worksheet.max_row:
            item_code = _text(worksheet[f"{self.ITEM_CODE_COLUMN}{row}"].value)
            if not item_code:
                empty_rows += 1
                row += 1
                continue
            empty_rows = 0

            raw_quantity = worksheet[f"{self.QUANTITY_COLUMN}{row}"].value
            quantity = _quantity(raw_quantity)
            if quantity is None and raw_quantity is not None:
                log.warning(f"Invalid qty at row {row}: {raw_quantity}")

            serial = _serial(worksheet[f"{self.SERIAL_COLUMN}{row}"].value)
            if serial <= 0:
                log.warning(f"Row {row}: skipped (missing item code or serial)")
                row += 1
                continue

            item = ReferenceLineItem(
                row_number=row,
                item_code=item_code,
                item_name=_text(worksheet[f"{self.ITEM_NAME_COLUMN}{row}"].value),
                quantity=quantity,
                group_id=_text(worksheet[f"{self.GROUP_COLUMN}{row}"].value),
                serial=serial,
            )
            items.append(item)
            log.debug(f"Row {row}: {item.item_code} | serial {item.serial} | qty {item.quantity}")
            row += 1

        if not items:
            log.warning("No valid items found in Excel")
        log.info(f"Parsed {len(items)} items from Excel")
        return ReferenceSheet(items=items, ticket_number=self._ticket_number(worksheet, log))

    def _ticket_number(self, worksheet: Worksheet, log: Log) -> str | None:
        value = _text(worksheet[self.TICKET_CELL].value)
        match = _TICKET.search(value)
        if not match:
            log.warning(f"Ticket number not found in cell {self.TICKET_CELL}")
            return None
        return match.group(1)


def _text(value: object) -> str:
    return "" if value is None else str(value).strip()


def _quantity(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


def _serial(value: object) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0
