from pathlib import Path

from recon.processor.exceptions import FileReadError


class FileLoader:
    """Resolves an input path against a root directory and reads its bytes."""

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root

    def resolve(self, path: Path) -> Path:
        if path.is_absolute() or self._files_root is None:
            return path
        return self._files_root / path

    def load(self, path: Path) -> bytes:
        """Read file bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
            FileReadError: if the file exists but cannot be read.
        """
        resolved = self.resolve(path)
        if not resolved.exists():
            raise FileNotFoundError(f"File not found: {resolved}")
        try:
            return resolved.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {resolved}: {exc}") from exc
