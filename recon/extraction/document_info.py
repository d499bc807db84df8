"""Cheap keyword sniffing over document text, used for diagnostics only."""

from collections.abc import Sequence

from recon.extraction.models import ExtractedLineItem, ItemsSummary

TABLE_KEYWORDS: tuple[str, ...] = (
    "LEMBAR LANJUTAN",
    "PEMBERITAHUAN IMPOR BARANG UNTUK DITIMBUN",
)


def detect_document_type(text: str) -> str:
    if "BC 2.3" in text or "BC 23" in text:
        return "BC2.3"
    if "BC 4.0" in text or "BC 40" in text:
        return "BC4.0"
    return "Unknown"


def has_table_section(text: str) -> bool:
    return any(keyword in text for keyword in TABLE_KEYWORDS)


def summarize_items(items: Sequence[ExtractedLineItem]) -> ItemsSummary:
    serials = [item.serial for item in items]
    return ItemsSummary(
        total_items=len(items),
        total_quantity=sum(item.quantity for item in items),
        codes=list(dict.fromkeys(item.code for item in items)),
        serial_min=min(serials) if serials else None,
        serial_max=max(serials) if serials else None,
    )
