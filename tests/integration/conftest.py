import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from openpyxl import Workbook

from recon.logging.logger import Log


@pytest.fixture()
def reference_workbook(tmp_path: Path) -> Path:
    """Operator export with two rows matching the sample declaration."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Export"
    sheet["A2"] = "TIKET-20240117"
    rows = [
        (5, "AB12345", "Machine parts", 3000, "000123", 1),
        (6, "CD6789", "Plastic fitting", 500, "000123", 2),
    ]
    for row, code, name, quantity, group, serial in rows:
        sheet[f"B{row}"] = code
        sheet[f"C{row}"] = name
        sheet[f"J{row}"] = quantity
        sheet[f"AD{row}"] = group
        sheet[f"AG{row}"] = serial
    path = tmp_path / "reference.xlsx"
    workbook.save(path)
    return path


@pytest.fixture()
def isolated_logging() -> Generator[None, None, None]:
    root = logging.getLogger(Log.ROOT_NAME)
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
