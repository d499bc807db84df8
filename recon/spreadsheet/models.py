from dataclasses import dataclass, field

from recon.reconciliation.models import ReferenceLineItem


@dataclass(frozen=True)
class ReferenceSheet:
    """Reference rows read from the operator workbook."""

    items: list[ReferenceLineItem] = field(default_factory=list)
    ticket_number: str | None = None
