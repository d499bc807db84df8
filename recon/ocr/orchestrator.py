"""Batched, concurrent OCR over the pages of a scanned PDF.

Processing flow:
1. Rasterize all pages into a per-document working directory.
2. Split pages into fixed-size batches; batches run strictly one after another.
3. Inside a batch every page is an asyncio task; the blocking
   preprocess + recognize call runs in a worker thread.
4. Each page image is deleted as soon as its own recognition finishes.
5. Page texts land in a list pre-sized by page index, so the joined text never
   depends on completion order.

A page that exceeds the per-page timeout is recorded as failed, but its worker
thread keeps running and is awaited before the next batch starts.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

from PIL import Image

from recon.config.exceptions import ConfigurationError
from recon.logging.logger import Log
from recon.ocr.base import BaseImagePreprocessor, BaseRasterizer, BaseRecognitionEngine
from recon.ocr.models import OcrResult, PageRecognition, RecognitionResult

PAGE_SEPARATOR = "\n\n"


class OcrOrchestrator:
    """Turns a scanned PDF into page-ordered text using a recognition engine."""

    def __init__(
        self,
        rasterizer: BaseRasterizer,
        preprocessor: BaseImagePreprocessor,
        engine: BaseRecognitionEngine,
        *,
        scale: float = 3.0,
        batch_size: int = 3,
        min_confidence: float = 30.0,
        languages: Sequence[str] = ("ind", "eng"),
        page_timeout_seconds: float | None = None,
        work_root: Path | None = None,
        log: Log | None = None,
    ) -> None:
        if scale <= 0:
            raise ConfigurationError(f"OCR scale must be positive, got {scale}")
        if batch_size <= 0:
            raise ConfigurationError(f"OCR batch size must be positive, got {batch_size}")
        if not 0 <= min_confidence <= 100:
            raise ConfigurationError(
                f"OCR confidence threshold must be within 0-100, got {min_confidence}"
            )
        if page_timeout_seconds is not None and page_timeout_seconds <= 0:
            raise ConfigurationError(
                f"OCR page timeout must be positive, got {page_timeout_seconds}"
            )
        self._rasterizer = rasterizer
        self._preprocessor = preprocessor
        self._engine = engine
        self._scale = scale
        self._batch_size = batch_size
        self._min_confidence = min_confidence
        self._languages = tuple(languages)
        self._page_timeout = page_timeout_seconds
        self._work_root = work_root
        self._log = log or Log("ocr")

    def run(self, pdf_bytes: bytes, log: Log | None = None) -> OcrResult:
        """Synchronous entry point; runs the recognition loop to completion."""
        return asyncio.run(self.recognize(pdf_bytes, log=log))

    async def recognize(self, pdf_bytes: bytes, log: Log | None = None) -> OcrResult:
        """Rasterize, recognize and reassemble every page of pdf_bytes.

        Raises:
            RasterizationError: if the document cannot be rendered to images.
        """
        log = log or self._log
        if self._work_root is not None:
            self._work_root.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="recon-ocr-", dir=self._work_root))
        try:
            page_paths = self._rasterizer.rasterize(pdf_bytes, self._scale, work_dir)
            log.info(f"Rasterized {len(page_paths)} pages at scale {self._scale}")

            pages: list[PageRecognition | None] = [None] * len(page_paths)
            for start in range(0, len(page_paths), self._batch_size):
                batch = range(start, min(start + self._batch_size, len(page_paths)))
                log.debug(f"OCR batch pages {batch.start + 1}-{batch.stop}")
                timed_out: list[asyncio.Future[RecognitionResult]] = []
                results = await asyncio.gather(
                    *(self._recognize_page(i, page_paths[i], log, timed_out) for i in batch)
                )
                for page in results:
                    pages[page.index] = page
                # worker threads cannot be cancelled; drain them so batches never overlap
                if timed_out:
                    log.debug(f"Waiting for {len(timed_out)} timed-out pages to finish")
                    await asyncio.gather(*timed_out, return_exceptions=True)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        completed = [page for page in pages if page is not None]
        text = PAGE_SEPARATOR.join(page.text for page in completed)
        result = OcrResult(text=text, pages=completed)
        if result.failed_pages:
            log.warning(f"OCR failed on pages {[i + 1 for i in result.failed_pages]}")
        log.info(f"OCR extraction complete ({len(text)} characters)")
        return result

    async def _recognize_page(
        self,
        index: int,
        path: Path,
        log: Log,
        timed_out: list[asyncio.Future[RecognitionResult]],
    ) -> PageRecognition:
        worker = asyncio.ensure_future(asyncio.to_thread(self._recognize_file, path))
        worker.add_done_callback(lambda _: path.unlink(missing_ok=True))

        done, _ = await asyncio.wait({worker}, timeout=self._page_timeout)
        if not done:
            log.error(f"OCR timed out for page {index + 1} after {self._page_timeout}s")
            timed_out.append(worker)
            return PageRecognition(index=index, text="", error="timeout")
        try:
            raw = worker.result()
        except Exception as exc:
            log.error(f"OCR failed for page {index + 1}: {exc}")
            return PageRecognition(index=index, text="", error=str(exc))

        page = self._filter_words(index, raw)
        log.info(
            f"Page {index + 1} OCR complete: confidence {page.confidence:.1f}, "
            f"{page.words_kept} words kept, {page.words_dropped} dropped"
        )
        return page

    def _recognize_file(self, path: Path) -> RecognitionResult:
        with Image.open(path) as image:
            prepared = self._preprocessor.preprocess(image)
        return self._engine.recognize(prepared, self._languages)

    def _filter_words(self, index: int, raw: RecognitionResult) -> PageRecognition:
        lines: dict[tuple[int, ...], list[str]] = {}
        kept = 0
        for word in raw.words:
            if word.confidence < self._min_confidence or not word.text.strip():
                continue
            lines.setdefault(word.line, []).append(word.text.strip())
            kept += 1
        text = "\n".join(" ".join(words) for words in lines.values())
        return PageRecognition(
            index=index,
            text=text,
            confidence=raw.confidence,
            words_kept=kept,
            words_dropped=len(raw.words) - kept,
        )
