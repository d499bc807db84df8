from collections.abc import Sequence

from recon.extraction.models import ExtractedLineItem
from recon.extraction.strategies import (
    ExtractionStrategy,
    LabeledLayoutStrategy,
    OcrTableStrategy,
)
from recon.logging.logger import Log


def default_strategies() -> list[ExtractionStrategy]:
    return [LabeledLayoutStrategy(), OcrTableStrategy()]


class ItemExtractor:
    """Runs extraction strategies in order until one yields items."""

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy] | None = None,
        log: Log | None = None,
    ) -> None:
        self._strategies = list(strategies) if strategies is not None else default_strategies()
        self._log = log or Log("extraction")

    @property
    def strategies(self) -> list[ExtractionStrategy]:
        return list(self._strategies)

    def extract(self, text: str, log: Log | None = None) -> list[ExtractedLineItem]:
        """Return the line items found in normalized document text.

        The first strategy producing at least one item wins; later strategies
        only run when every earlier one found nothing.
        """
        log = log or self._log
        for strategy in self._strategies:
            items = strategy.extract(text, log)
            if items:
                log.info(f"Parsed {len(items)} items using '{strategy.name}' layout")
                _warn_duplicate_serials(items, log)
                return items
            log.info(f"No items found using '{strategy.name}' layout")
        log.warning("No items could be extracted from document text")
        return []


def index_by_serial(
    items: Sequence[ExtractedLineItem], log: Log | None = None
) -> dict[int, ExtractedLineItem]:
    """Map serial -> item, keeping the first item when a serial repeats."""
    index: dict[int, ExtractedLineItem] = {}
    for item in items:
        if item.serial in index:
            if log is not None:
                log.warning(f"Duplicate serial {item.serial} in document, keeping first")
            continue
        index[item.serial] = item
    return index


def _warn_duplicate_serials(items: Sequence[ExtractedLineItem], log: Log) -> None:
    seen: set[int] = set()
    for item in items:
        if item.serial in seen:
            log.warning(f"Serial {item.serial} appears more than once in document")
        seen.add(item.serial)
