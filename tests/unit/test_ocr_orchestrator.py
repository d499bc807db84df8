import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from PIL import Image

from recon.config.exceptions import ConfigurationError
from recon.ocr.base import BaseImagePreprocessor, BaseRasterizer, BaseRecognitionEngine
from recon.ocr.exceptions import RasterizationError, RecognitionError
from recon.ocr.models import RecognitionResult, RecognizedWord
from recon.ocr.orchestrator import OcrOrchestrator
from recon.ocr.preprocessing import BinarizingPreprocessor

# fake pages encode their index in the image width
BASE_WIDTH = 20


class FakeRasterizer(BaseRasterizer):
    def __init__(self, page_count: int, error: Exception | None = None) -> None:
        self._page_count = page_count
        self._error = error
        self.paths: list[Path] = []
        self.output_dir: Path | None = None

    def rasterize(self, pdf_bytes: bytes, scale: float, output_dir: Path) -> list[Path]:
        self.output_dir = output_dir
        if self._error is not None:
            raise self._error
        for index in range(self._page_count):
            path = output_dir / f"page-{index + 1:04d}.png"
            Image.new("L", (BASE_WIDTH + index, 20), 255).save(path)
            self.paths.append(path)
        return list(self.paths)


class CopyPreprocessor(BaseImagePreprocessor):
    def preprocess(self, image: Image.Image) -> Image.Image:
        return image.copy()


class FakeEngine(BaseRecognitionEngine):
    def __init__(
        self,
        pages: dict[int, list[RecognizedWord]] | None = None,
        *,
        delays: dict[int, float] | None = None,
        failures: set[int] | None = None,
        on_recognize: Callable[[int], None] | None = None,
    ) -> None:
        self._pages = pages or {}
        self._delays = delays or {}
        self._failures = failures or set()
        self._on_recognize = on_recognize
        self._lock = threading.Lock()
        self._active = 0
        self.max_active = 0
        self.seen: list[int] = []
        self.languages: list[tuple[str, ...]] = []

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> RecognitionResult:
        index = image.size[0] - BASE_WIDTH
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
            self.seen.append(index)
            self.languages.append(tuple(languages))
        try:
            if self._on_recognize is not None:
                self._on_recognize(index)
            time.sleep(self._delays.get(index, 0.01))
            if index in self._failures:
                raise RecognitionError(f"engine crashed on page {index}")
            words = self._pages.get(index, [])
            confidence = sum(w.confidence for w in words) / len(words) if words else 0.0
            return RecognitionResult(
                text=" ".join(w.text for w in words), words=words, confidence=confidence
            )
        finally:
            with self._lock:
                self._active -= 1


def _words(text: str, confidence: float = 90.0) -> list[RecognizedWord]:
    return [
        RecognizedWord(text=word, confidence=confidence, line=(1, 1, line_no))
        for line_no, line in enumerate(text.split("\n"))
        for word in line.split()
    ]


def _orchestrator(
    rasterizer: BaseRasterizer,
    engine: BaseRecognitionEngine,
    tmp_path: Path,
    **kwargs: object,
) -> OcrOrchestrator:
    return OcrOrchestrator(
        rasterizer, CopyPreprocessor(), engine, work_root=tmp_path, **kwargs  # type: ignore[arg-type]
    )


class TestOcrOrchestratorOrdering:
    def test_pages_joined_in_page_order(self, tmp_path: Path) -> None:
        engine = FakeEngine(
            {0: _words("page zero"), 1: _words("page one"), 2: _words("page two")},
            delays={0: 0.2, 1: 0.1, 2: 0.0},
        )
        result = _orchestrator(FakeRasterizer(3), engine, tmp_path, batch_size=3).run(b"%PDF")
        assert result.text == "page zero\n\npage one\n\npage two"
        assert [page.index for page in result.pages] == [0, 1, 2]

    def test_order_stable_across_batches(self, tmp_path: Path) -> None:
        engine = FakeEngine({i: _words(f"p{i}") for i in range(5)}, delays={0: 0.1, 3: 0.1})
        result = _orchestrator(FakeRasterizer(5), engine, tmp_path, batch_size=2).run(b"%PDF")
        assert result.text == "p0\n\np1\n\np2\n\np3\n\np4"

    def test_no_pages_gives_empty_text(self, tmp_path: Path) -> None:
        result = _orchestrator(FakeRasterizer(0), FakeEngine(), tmp_path).run(b"%PDF")
        assert result.text == ""
        assert result.pages == []


class TestOcrOrchestratorBatching:
    def test_concurrency_bounded_by_batch_size(self, tmp_path: Path) -> None:
        engine = FakeEngine(delays={i: 0.05 for i in range(5)})
        _orchestrator(FakeRasterizer(5), engine, tmp_path, batch_size=2).run(b"%PDF")
        assert engine.max_active <= 2

    def test_batches_run_in_sequence(self, tmp_path: Path) -> None:
        engine = FakeEngine(delays={i: 0.02 for i in range(5)})
        _orchestrator(FakeRasterizer(5), engine, tmp_path, batch_size=2).run(b"%PDF")
        assert set(engine.seen[:2]) == {0, 1}
        assert set(engine.seen[2:4]) == {2, 3}
        assert engine.seen[4] == 4

    def test_languages_forwarded_to_engine(self, tmp_path: Path) -> None:
        engine = FakeEngine()
        _orchestrator(FakeRasterizer(1), engine, tmp_path, languages=["ind"]).run(b"%PDF")
        assert engine.languages == [("ind",)]


class TestOcrOrchestratorFiltering:
    def test_low_confidence_words_dropped(self, tmp_path: Path) -> None:
        words = [
            RecognizedWord("Kode", 95.0, (1, 1, 1)),
            RecognizedWord("~~", 12.0, (1, 1, 1)),
            RecognizedWord("Brg", 80.0, (1, 1, 1)),
        ]
        engine = FakeEngine({0: words})
        result = _orchestrator(FakeRasterizer(1), engine, tmp_path, min_confidence=30).run(b"%PDF")
        assert result.text == "Kode Brg"
        assert result.pages[0].words_kept == 2
        assert result.pages[0].words_dropped == 1

    def test_threshold_is_inclusive(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: [RecognizedWord("edge", 30.0, (1, 1, 1))]})
        result = _orchestrator(FakeRasterizer(1), engine, tmp_path, min_confidence=30).run(b"%PDF")
        assert result.text == "edge"

    def test_line_structure_preserved(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: _words("1 8479.903000 PARTS\n3.150,0000 PCS")})
        result = _orchestrator(FakeRasterizer(1), engine, tmp_path).run(b"%PDF")
        assert result.text == "1 8479.903000 PARTS\n3.150,0000 PCS"

    def test_page_confidence_reported(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: _words("a b", 80.0), 1: _words("c", 60.0)})
        result = _orchestrator(FakeRasterizer(2), engine, tmp_path).run(b"%PDF")
        assert result.page_confidences == [80.0, 60.0]


class TestOcrOrchestratorFailures:
    def test_failed_page_contributes_empty_text(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: _words("a"), 2: _words("c")}, failures={1})
        result = _orchestrator(FakeRasterizer(3), engine, tmp_path).run(b"%PDF")
        assert result.text == "a\n\n\n\nc"
        assert result.failed_pages == [1]
        assert "engine crashed" in (result.pages[1].error or "")

    def test_page_timeout_marks_page_failed(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: _words("slow"), 1: _words("fast")}, delays={0: 0.5})
        result = _orchestrator(
            FakeRasterizer(2), engine, tmp_path, page_timeout_seconds=0.05
        ).run(b"%PDF")
        assert result.pages[0].error == "timeout"
        assert result.text == "\n\nfast"

    def test_timed_out_page_finishes_before_next_batch(self, tmp_path: Path) -> None:
        engine = FakeEngine({1: _words("next")}, delays={0: 0.3})
        result = _orchestrator(
            FakeRasterizer(2), engine, tmp_path, batch_size=1, page_timeout_seconds=0.05
        ).run(b"%PDF")
        assert result.pages[0].error == "timeout"
        assert result.text == "\n\nnext"
        assert engine.max_active == 1

    def test_engine_timeout_error_reported_as_failure(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        class DeadlineEngine(FakeEngine):
            def recognize(self, image: Image.Image, languages: Sequence[str]) -> RecognitionResult:
                raise TimeoutError("engine deadline exceeded")

        result = _orchestrator(FakeRasterizer(1), DeadlineEngine(), tmp_path).run(b"%PDF")
        assert result.pages[0].error == "engine deadline exceeded"
        assert "OCR failed for page 1: engine deadline exceeded" in caplog.text
        assert "timed out" not in caplog.text

    def test_rasterization_error_propagates(self, tmp_path: Path) -> None:
        rasterizer = FakeRasterizer(0, error=RasterizationError("broken pdf"))
        with pytest.raises(RasterizationError, match="broken pdf"):
            _orchestrator(rasterizer, FakeEngine(), tmp_path).run(b"%PDF")
        assert list(tmp_path.iterdir()) == []


class TestOcrOrchestratorCleanup:
    def test_work_dir_removed_after_run(self, tmp_path: Path) -> None:
        rasterizer = FakeRasterizer(3)
        _orchestrator(rasterizer, FakeEngine(), tmp_path).run(b"%PDF")
        assert rasterizer.output_dir is not None
        assert not rasterizer.output_dir.exists()
        assert list(tmp_path.iterdir()) == []

    def test_page_image_released_after_recognition(self, tmp_path: Path) -> None:
        rasterizer = FakeRasterizer(3)
        previous_exists: list[bool] = []

        def check_previous(index: int) -> None:
            if index > 0:
                previous_exists.append(rasterizer.paths[index - 1].exists())

        engine = FakeEngine(on_recognize=check_previous)
        _orchestrator(rasterizer, engine, tmp_path, batch_size=1).run(b"%PDF")
        assert previous_exists == [False, False]

    def test_works_with_binarizing_preprocessor(self, tmp_path: Path) -> None:
        engine = FakeEngine({0: _words("scanned")})
        orchestrator = OcrOrchestrator(
            FakeRasterizer(1), BinarizingPreprocessor(), engine, work_root=tmp_path
        )
        assert orchestrator.run(b"%PDF").text == "scanned"


class TestOcrOrchestratorConfiguration:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"batch_size": 0},
            {"scale": 0},
            {"min_confidence": -1},
            {"min_confidence": 101},
            {"page_timeout_seconds": 0},
        ],
    )
    def test_invalid_settings_raise(self, kwargs: dict[str, float]) -> None:
        with pytest.raises(ConfigurationError):
            OcrOrchestrator(FakeRasterizer(0), CopyPreprocessor(), FakeEngine(), **kwargs)  # type: ignore[arg-type]
