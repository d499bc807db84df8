import io

import pytest
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfgen import canvas

DECLARATION_LINES = [
    "PEMBERITAHUAN IMPOR BARANG UNTUK DITIMBUN",
    "BC 2.3 LEMBAR LANJUTAN",
    "1 Pos Tarif/HS : 8479.90.3000",
    "Kode Brg : AB12345 MACHINE PARTS STEEL",
    "Kemasan: 10 PK",
    "- 3.150,0000",
    "- PCS",
    "2 Pos Tarif/HS : 3926.90.9900",
    "Kode Brg : CD67890 PLASTIC FITTING",
    "Kemasan: 5 CT",
    "- 470,0000",
    "- KG",
]

LABELED_TEXT = "\n".join(DECLARATION_LINES)

OCR_TABLE_TEXT = "\n".join(
    [
        "LEMBAR LANJUTAN",
        "| No | Pos Tarif/HS | Uraian Barang | Jumlah |",
        "| 1 [8479.903000 MACHINE PARTS",
        "| AB12345 STEEL BRACKET",
        "Kemasan: 10 PK",
        "3.150,0000 PCS",
        "| 2 (3926909900",
        "PLASTIC FITTING",
        "BM 5,00 %",
        "470,0000 KG",
    ]
)


def _draw_lines(lines: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    y = 800
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def declaration_pdf_bytes() -> bytes:
    """Generate a digital two-item declaration in the labelled layout."""
    return _draw_lines(DECLARATION_LINES)


@pytest.fixture()
def labeled_text() -> str:
    return LABELED_TEXT


@pytest.fixture()
def ocr_table_text() -> str:
    return OCR_TABLE_TEXT
