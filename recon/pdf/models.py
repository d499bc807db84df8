from dataclasses import dataclass


@dataclass(frozen=True)
class PdfText:
    """Text layer of a PDF as returned by an extractor adapter."""

    text: str
    page_count: int
