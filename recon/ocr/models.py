from dataclasses import dataclass, field


@dataclass(frozen=True)
class RecognizedWord:
    """Single word reported by a recognition engine."""

    text: str
    confidence: float  # 0-100
    line: tuple[int, ...] = ()  # engine-specific line key, words sharing it form one line


@dataclass(frozen=True)
class RecognitionResult:
    """Raw engine output for one page image."""

    text: str
    words: list[RecognizedWord] = field(default_factory=list)
    confidence: float = 0.0


@dataclass(frozen=True)
class PageRecognition:
    """Outcome of recognizing one page, kept for diagnostics."""

    index: int
    text: str
    confidence: float = 0.0
    words_kept: int = 0
    words_dropped: int = 0
    error: str | None = None


@dataclass(frozen=True)
class OcrResult:
    """Reassembled document text plus per-page diagnostics."""

    text: str
    pages: list[PageRecognition] = field(default_factory=list)

    @property
    def page_confidences(self) -> list[float]:
        return [page.confidence for page in self.pages]

    @property
    def failed_pages(self) -> list[int]:
        return [page.index for page in self.pages if page.error is not None]
