from recon.acquisition.acquirer import TextAcquirer
from recon.extraction.document_info import detect_document_type, has_table_section, summarize_items
from recon.extraction.extractor import ItemExtractor
from recon.processor.file_loader import FileLoader
from recon.processor.pipeline import PipelineContext, PipelineStep
from recon.reconciliation.engine import ReconciliationEngine
from recon.spreadsheet.reader import ReferenceSheetReader
from recon.spreadsheet.writer import ResultSheetWriter


class LoadReferenceStep(PipelineStep):
    def __init__(self, reader: ReferenceSheetReader) -> None:
        self._reader = reader

    def run(self, context: PipelineContext) -> PipelineContext:
        sheet = self._reader.read(context.reference_path, log=context.log.child("spreadsheet"))
        context.reference_items = sheet.items
        context.ticket_number = sheet.ticket_number
        context.log.info(
            f"Loaded {len(sheet.items)} reference rows (ticket {sheet.ticket_number or 'n/a'})"
        )
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._file_loader.load(context.document_path)
        context.log.info(f"Loaded {len(context.raw_bytes)} bytes from {context.document_path.name}")
        return context


class AcquireTextStep(PipelineStep):
    def __init__(self, acquirer: TextAcquirer) -> None:
        self._acquirer = acquirer

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._acquirer.acquire(context.raw_bytes, log=context.log.child("acquisition"))
        context.document = document
        context.document_type = detect_document_type(document.text)
        context.log.info(
            f"Acquired {len(document.text)} chars "
            f"({'OCR' if document.is_scanned else 'text layer'}), "
            f"document type: {context.document_type}"
        )
        if not has_table_section(document.text):
            context.log.warning("Table section keyword not found in document")
        return context


class ExtractItemsStep(PipelineStep):
    def __init__(self, extractor: ItemExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before item extraction")
        context.extracted_items = self._extractor.extract(
            context.document.text, log=context.log.child("extraction")
        )
        summary = summarize_items(context.extracted_items)
        context.log.info(
            f"Extracted {summary.total_items} items, serials "
            f"{summary.serial_min}-{summary.serial_max}, total qty {summary.total_quantity:g}"
        )
        return context


class ReconcileStep(PipelineStep):
    def __init__(self, engine: ReconciliationEngine) -> None:
        self._engine = engine

    def run(self, context: PipelineContext) -> PipelineContext:
        context.report = self._engine.reconcile(
            context.reference_items,
            context.extracted_items,
            log=context.log.child("reconciliation"),
        )
        return context


class WriteResultsStep(PipelineStep):
    def __init__(self, writer: ResultSheetWriter) -> None:
        self._writer = writer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.report is None:
            raise ValueError("PipelineContext.report must be set before writing results")
        if context.output_path is None:
            context.log.info("No output path configured, skipping result workbook")
            return context
        self._writer.write(
            context.reference_path,
            context.output_path,
            context.report,
            ticket_number=context.ticket_number,
            log=context.log.child("spreadsheet"),
        )
        return context
