from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from recon.config.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"
    min_text_chars: int = Field(default=100, ge=0)

    ocr_engine: str = "tesseract"
    ocr_scale: float = Field(default=3.0, gt=0)
    ocr_batch_size: int = Field(default=3, gt=0)
    ocr_min_confidence: float = Field(default=30.0, ge=0, le=100)
    ocr_languages: str = "ind+eng"
    ocr_binarize_threshold: int = Field(default=128, ge=0, le=255)
    ocr_page_timeout_seconds: float | None = Field(default=None, gt=0)
    ocr_work_dir: str | None = None

    code_similarity_threshold: float = Field(default=0.75, ge=0, le=1)
    aggregate_duplicate_serials: bool = True

    sheet_data_start_row: int = Field(default=5, ge=2)
    sheet_max_empty_rows: int = Field(default=3, gt=0)

    reference_workbook_path: str = ""
    document_path: str = ""
    output_workbook_path: str = ""

    @property
    def ocr_language_list(self) -> tuple[str, ...]:
        return tuple(lang for lang in self.ocr_languages.split("+") if lang.strip())


def load_settings() -> Settings:
    """Load settings, converting validation failures into ConfigurationError."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
