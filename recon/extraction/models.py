from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedLineItem:
    """One declared line item read from the customs document."""

    serial: int
    code: str
    description: str
    quantity: float
    unit: str
    tariff_code: str | None = None
    strategy: str = ""


@dataclass(frozen=True)
class ItemsSummary:
    """Aggregate view of the items extracted from one document."""

    total_items: int
    total_quantity: float
    codes: list[str]
    serial_min: int | None
    serial_max: int | None
