from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceDocument:
    """Final text of one input document and how it was obtained."""

    raw_size: int
    page_count: int
    text: str
    is_scanned: bool
    page_confidences: list[float] = field(default_factory=list)
