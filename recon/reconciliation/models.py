from dataclasses import dataclass, field
from enum import Enum

from recon.extraction.models import ExtractedLineItem


class FieldStatus(str, Enum):
    """Verdict for a single compared field."""

    OK = "OK"
    NOT_MATCH = "NOT MATCH"
    OVER_LIMIT = "OVER LIMIT"
    ERROR = "ERROR"


class OverallStatus(str, Enum):
    """Verdict for a whole reference row."""

    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @classmethod
    def combine(cls, item_code: FieldStatus, quantity: FieldStatus) -> "OverallStatus":
        if item_code is FieldStatus.OK and quantity is FieldStatus.OK:
            return cls.OK
        if FieldStatus.ERROR in (item_code, quantity):
            return cls.ERROR
        return cls.WARNING


@dataclass(frozen=True)
class ReferenceLineItem:
    """One row of the operator's reference spreadsheet."""

    row_number: int
    item_code: str
    item_name: str
    quantity: float | None
    group_id: str
    serial: int


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for one reference row."""

    reference: ReferenceLineItem
    extracted: ExtractedLineItem | None
    item_code_status: FieldStatus
    quantity_status: FieldStatus
    overall_status: OverallStatus
    issues: tuple[str, ...] = ()
    checked_quantity: float | None = None
    similarity: float | None = None
    is_duplicate: bool = False
    duplicate_count: int = 1

    @property
    def row_number(self) -> int:
        return self.reference.row_number


@dataclass(frozen=True)
class Summary:
    """Aggregate counts over a set of validation results."""

    total: int = 0
    ok: int = 0
    warning: int = 0
    error: int = 0
    item_code_issues: int = 0
    quantity_issues: int = 0

    @property
    def success_rate(self) -> float:
        """Share of OK rows as a percentage; 0.0 when there are no rows."""
        return (self.ok / self.total) * 100 if self.total else 0.0

    @property
    def success_rate_label(self) -> str:
        return f"{self.success_rate:.2f}%" if self.total else "0%"


@dataclass(frozen=True)
class ReconciliationReport:
    """Results in reference-row order plus their summary."""

    results: tuple[ValidationResult, ...] = field(default_factory=tuple)
    summary: Summary = field(default_factory=Summary)
