from recon.acquisition.exceptions import AcquisitionError
from recon.acquisition.models import SourceDocument
from recon.config.exceptions import ConfigurationError
from recon.logging.logger import Log
from recon.normalization.normalizer import TextNormalizer
from recon.ocr.orchestrator import OcrOrchestrator
from recon.pdf.base import BasePdfExtractor
from recon.pdf.exceptions import PdfExtractionError


class TextAcquirer:
    """Reads the native text layer and falls back to OCR for scanned documents."""

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        ocr: OcrOrchestrator,
        normalizer: TextNormalizer,
        *,
        min_text_chars: int = 100,
        log: Log | None = None,
    ) -> None:
        if min_text_chars < 0:
            raise ConfigurationError(
                f"Minimum text length must not be negative, got {min_text_chars}"
            )
        self._pdf_extractor = pdf_extractor
        self._ocr = ocr
        self._normalizer = normalizer
        self._min_text_chars = min_text_chars
        self._log = log or Log("acquisition")

    def acquire(self, pdf_bytes: bytes, log: Log | None = None) -> SourceDocument:
        """Return the document text, running OCR when the text layer is too thin.

        Raises:
            AcquisitionError: if the document cannot be opened or parsed.
            RasterizationError: if a scanned document cannot be rendered.
        """
        log = log or self._log
        try:
            native = self._pdf_extractor.extract(pdf_bytes)
        except PdfExtractionError as exc:
            log.error(f"Failed to load PDF: {exc}")
            raise AcquisitionError(str(exc)) from exc

        log.info(f"PDF loaded: {native.page_count} pages, {len(native.text)} chars")
        if len(native.text.strip()) >= self._min_text_chars:
            return SourceDocument(
                raw_size=len(pdf_bytes),
                page_count=native.page_count,
                text=native.text,
                is_scanned=False,
            )

        log.warning("PDF appears to be scanned, using OCR to extract text")
        ocr_result = self._ocr.run(pdf_bytes, log=log.child("ocr"))
        text = self._normalizer.normalize(ocr_result.text)
        return SourceDocument(
            raw_size=len(pdf_bytes),
            page_count=native.page_count or len(ocr_result.pages),
            text=text,
            is_scanned=True,
            page_confidences=ocr_result.page_confidences,
        )
