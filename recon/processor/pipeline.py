from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from recon.acquisition.models import SourceDocument
from recon.extraction.models import ExtractedLineItem
from recon.logging.logger import Log
from recon.reconciliation.models import ReconciliationReport, ReferenceLineItem


@dataclass(slots=True)
class PipelineContext:
    reference_path: Path
    document_path: Path
    output_path: Path | None = None
    log: Log = field(default_factory=Log)
    ticket_number: str | None = None
    reference_items: list[ReferenceLineItem] = field(default_factory=list)
    raw_bytes: bytes = b""
    document: SourceDocument | None = None
    document_type: str = "Unknown"
    extracted_items: list[ExtractedLineItem] = field(default_factory=list)
    report: ReconciliationReport | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
