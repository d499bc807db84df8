from pathlib import Path

import pymupdf

from recon.ocr.base import BaseRasterizer
from recon.ocr.exceptions import RasterizationError


class PyMuPdfRasterizer(BaseRasterizer):
    """Renders PDF pages to PNG files using PyMuPDF.

    A scale of 1.0 is the 72 dpi viewport; 3.0 renders at 216 dpi.
    """

    def rasterize(self, pdf_bytes: bytes, scale: float, output_dir: Path) -> list[Path]:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            matrix = pymupdf.Matrix(scale, scale)
            paths: list[Path] = []
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                for index, page in enumerate(doc):
                    pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                    path = output_dir / f"page-{index + 1:04d}.png"
                    pixmap.save(str(path))
                    paths.append(path)
            return paths
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"pymupdf rasterization failed: {exc}") from exc
