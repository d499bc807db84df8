from recon.reconciliation.engine import ReconciliationEngine
from recon.reconciliation.models import (
    FieldStatus,
    OverallStatus,
    ReconciliationReport,
    ReferenceLineItem,
    Summary,
    ValidationResult,
)

__all__ = [
    "FieldStatus",
    "OverallStatus",
    "ReconciliationEngine",
    "ReconciliationReport",
    "ReferenceLineItem",
    "Summary",
    "ValidationResult",
]
