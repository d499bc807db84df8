import io

import pdfplumber

from recon.pdf.base import BasePdfExtractor
from recon.pdf.exceptions import PdfExtractionError
from recon.pdf.models import PdfText


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> PdfText:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return PdfText(text="\n".join(pages).strip(), page_count=len(pages))
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
