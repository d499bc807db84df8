import pymupdf

from recon.pdf.base import BasePdfExtractor
from recon.pdf.exceptions import PdfExtractionError
from recon.pdf.models import PdfText


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfText:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
            return PdfText(text="\n".join(pages).strip(), page_count=len(pages))
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
