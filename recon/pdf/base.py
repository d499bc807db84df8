from abc import ABC, abstractmethod

from recon.pdf.models import PdfText


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Extract the native text layer from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with pages joined by newlines and the page count.

        Raises:
            PdfExtractionError: if the document cannot be opened or parsed.
        """
