from pathlib import Path

from recon.config.exceptions import ConfigurationError
from recon.config.settings import load_settings
from recon.logging.logger import Log
from recon.processor.processor import build_processor


def main() -> None:
    """Entry point: load settings -> build pipeline -> reconcile one document."""
    settings = load_settings()
    Log.configure(settings.log_level)
    log = Log()

    if not settings.reference_workbook_path or not settings.document_path:
        raise ConfigurationError(
            "REFERENCE_WORKBOOK_PATH and DOCUMENT_PATH must both be set"
        )

    processor = build_processor(settings)
    context = processor.reconcile_files(
        reference_path=Path(settings.reference_workbook_path),
        document_path=Path(settings.document_path),
        output_path=(
            Path(settings.output_workbook_path) if settings.output_workbook_path else None
        ),
    )
    if context.report is not None:
        summary = context.report.summary
        log.info(
            f"Done: {summary.total} rows, {summary.ok} OK, {summary.warning} warning, "
            f"{summary.error} error ({summary.success_rate_label})"
        )


if __name__ == "__main__":
    main()
