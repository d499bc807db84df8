from pathlib import Path

from recon.acquisition.acquirer import TextAcquirer
from recon.config.settings import Settings
from recon.extraction.extractor import ItemExtractor
from recon.logging.logger import Log
from recon.normalization.normalizer import TextNormalizer
from recon.ocr.factory import RecognitionEngineFactory
from recon.ocr.orchestrator import OcrOrchestrator
from recon.ocr.preprocessing import BinarizingPreprocessor
from recon.ocr.rasterizer import PyMuPdfRasterizer
from recon.pdf.factory import PdfExtractorFactory
from recon.processor.file_loader import FileLoader
from recon.processor.pipeline import PipelineContext, PipelineStep
from recon.processor.steps import (
    AcquireTextStep,
    ExtractItemsStep,
    LoadDocumentStep,
    LoadReferenceStep,
    ReconcileStep,
    WriteResultsStep,
)
from recon.reconciliation.engine import ReconciliationEngine
from recon.spreadsheet.reader import ReferenceSheetReader
from recon.spreadsheet.writer import ResultSheetWriter


class Processor:
    """Runs the reconciliation pipeline steps in order.

    Pipeline: load reference rows -> load document -> acquire text ->
    extract items -> reconcile -> write results.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, context: PipelineContext) -> PipelineContext:
        """Run every step; a failing step is logged and its error re-raised."""
        context.log.info(
            f"Reconciling {context.document_path.name} against {context.reference_path.name}"
        )
        for step in self._steps:
            try:
                context = step.run(context)
            except Exception as exc:
                context.error_message = str(exc)
                context.log.error(f"{type(step).__name__} failed: {exc}")
                raise
        return context

    def reconcile_files(
        self,
        reference_path: Path,
        document_path: Path,
        output_path: Path | None = None,
    ) -> PipelineContext:
        context = PipelineContext(
            reference_path=reference_path,
            document_path=document_path,
            output_path=output_path,
            log=Log("processor", document=document_path.name),
        )
        return self.process(context)


def build_processor(
    settings: Settings,
    files_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    ocr = OcrOrchestrator(
        rasterizer=PyMuPdfRasterizer(),
        preprocessor=BinarizingPreprocessor(threshold=settings.ocr_binarize_threshold),
        engine=RecognitionEngineFactory.create(settings),
        scale=settings.ocr_scale,
        batch_size=settings.ocr_batch_size,
        min_confidence=settings.ocr_min_confidence,
        languages=settings.ocr_language_list,
        page_timeout_seconds=settings.ocr_page_timeout_seconds,
        work_root=Path(settings.ocr_work_dir) if settings.ocr_work_dir else None,
    )
    acquirer = TextAcquirer(
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr=ocr,
        normalizer=TextNormalizer(),
        min_text_chars=settings.min_text_chars,
    )
    engine = ReconciliationEngine(
        similarity_threshold=settings.code_similarity_threshold,
        aggregate_duplicates=settings.aggregate_duplicate_serials,
    )
    return Processor(
        steps=[
            LoadReferenceStep(
                ReferenceSheetReader(
                    start_row=settings.sheet_data_start_row,
                    max_empty_rows=settings.sheet_max_empty_rows,
                )
            ),
            LoadDocumentStep(FileLoader(files_root=files_root)),
            AcquireTextStep(acquirer),
            ExtractItemsStep(ItemExtractor()),
            ReconcileStep(engine),
            WriteResultsStep(ResultSheetWriter(header_row=settings.sheet_data_start_row - 1)),
        ]
    )
