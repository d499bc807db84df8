"""Matches reference spreadsheet rows against items extracted from a document."""

from __future__ import annotations

import math
from collections.abc import Sequence

from recon.config.exceptions import ConfigurationError
from recon.extraction.extractor import index_by_serial
from recon.extraction.models import ExtractedLineItem
from recon.logging.logger import Log
from recon.reconciliation.exceptions import ReconciliationError
from recon.reconciliation.models import (
    FieldStatus,
    OverallStatus,
    ReconciliationReport,
    ReferenceLineItem,
    Summary,
    ValidationResult,
)
from recon.reconciliation.similarity import code_similarity, normalize_code

GroupKey = tuple[str, int]


class ReconciliationEngine:
    """Produces one ValidationResult per reference row plus a Summary.

    Rows sharing (group_id, serial) form a split shipment: their quantities
    are summed and every row of the group is checked against that total.
    """

    def __init__(
        self,
        *,
        similarity_threshold: float = 0.75,
        aggregate_duplicates: bool = True,
        log: Log | None = None,
    ) -> None:
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ConfigurationError(
                f"Similarity threshold must be within 0-1, got {similarity_threshold}"
            )
        self._threshold = similarity_threshold
        self._aggregate = aggregate_duplicates
        self._log = log or Log("reconciliation")

    def reconcile(
        self,
        references: Sequence[ReferenceLineItem],
        extracted: Sequence[ExtractedLineItem],
        log: Log | None = None,
    ) -> ReconciliationReport:
        log = log or self._log
        log.info(f"Validating {len(references)} reference rows against {len(extracted)} items")

        document_items = index_by_serial(extracted, log)
        groups = self._group(references, log)

        results: list[ValidationResult] = []
        for reference in references:
            members = groups.get((reference.group_id, reference.serial), [reference])
            try:
                result = self._validate_row(reference, members, document_items)
            except Exception as exc:
                log.error(f"Error validating row {reference.row_number}: {exc}")
                result = self._failed_row(reference, exc)
            log.info(f"Row {reference.row_number}: {result.overall_status.value}")
            results.append(result)

        summary = self.summarize(results)
        log.info(
            f"Validation summary: {summary.ok} OK, {summary.warning} warning, "
            f"{summary.error} error of {summary.total} ({summary.success_rate_label})"
        )
        return ReconciliationReport(results=tuple(results), summary=summary)

    def compare_codes(
        self, reference_code: object, document_code: object
    ) -> tuple[FieldStatus, float, str | None]:
        left = normalize_code(reference_code)
        right = normalize_code(document_code)
        if left == right:
            return FieldStatus.OK, 1.0, None

        score = code_similarity(left, right)
        if score >= self._threshold:
            return FieldStatus.OK, score, f"Item code match ({score * 100:.0f}% similar)"
        return (
            FieldStatus.NOT_MATCH,
            score,
            f"Item code mismatch (reference: {reference_code}, document: {document_code})",
        )

    @staticmethod
    def compare_quantities(
        requested: object, available: object
    ) -> tuple[FieldStatus, str | None]:
        requested_num = _to_number(requested)
        available_num = _to_number(available)
        if requested_num is None or available_num is None:
            return (
                FieldStatus.ERROR,
                f"Invalid quantity (reference: {requested}, document: {available})",
            )
        if requested_num <= available_num:
            return FieldStatus.OK, None
        return (
            FieldStatus.OVER_LIMIT,
            f"Quantity over limit (requested: {requested_num:g}, document: {available_num:g})",
        )

    @staticmethod
    def summarize(results: Sequence[ValidationResult]) -> Summary:
        return Summary(
            total=len(results),
            ok=sum(r.overall_status is OverallStatus.OK for r in results),
            warning=sum(r.overall_status is OverallStatus.WARNING for r in results),
            error=sum(r.overall_status is OverallStatus.ERROR for r in results),
            item_code_issues=sum(r.item_code_status is not FieldStatus.OK for r in results),
            quantity_issues=sum(r.quantity_status is not FieldStatus.OK for r in results),
        )

    def _group(
        self, references: Sequence[ReferenceLineItem], log: Log
    ) -> dict[GroupKey, list[ReferenceLineItem]]:
        if not self._aggregate:
            return {}
        groups: dict[GroupKey, list[ReferenceLineItem]] = {}
        for reference in references:
            groups.setdefault((reference.group_id, reference.serial), []).append(reference)
        for (group_id, serial), members in groups.items():
            if len(members) > 1:
                log.warning(
                    f"Duplicate serial found: group {group_id}, serial {serial} "
                    f"({len(members)} rows, total qty: {_group_total(members)})"
                )
        return groups

    def _validate_row(
        self,
        reference: ReferenceLineItem,
        members: list[ReferenceLineItem],
        document_items: dict[int, ExtractedLineItem],
    ) -> ValidationResult:
        if not isinstance(reference.serial, int) or reference.serial <= 0:
            raise ReconciliationError(f"invalid serial {reference.serial!r}")

        issues: list[str] = []
        checked_quantity = reference.quantity
        if len(members) > 1:
            checked_quantity = _group_total(members)
            issues.append(
                f"Split shipment: serial {reference.serial} appears {len(members)} times "
                f"in group {reference.group_id}, total quantity {_format(checked_quantity)}"
            )

        document_item = document_items.get(reference.serial)
        if document_item is None:
            issues.append(f"Serial {reference.serial} not found in document")
            return ValidationResult(
                reference=reference,
                extracted=None,
                item_code_status=FieldStatus.ERROR,
                quantity_status=FieldStatus.ERROR,
                overall_status=OverallStatus.ERROR,
                issues=tuple(issues),
                checked_quantity=checked_quantity,
                is_duplicate=len(members) > 1,
                duplicate_count=len(members),
            )

        code_status, similarity, code_message = self.compare_codes(
            reference.item_code, document_item.code
        )
        if code_message:
            issues.append(code_message)

        quantity_status, quantity_message = self.compare_quantities(
            checked_quantity, document_item.quantity
        )
        if quantity_message:
            issues.append(quantity_message)

        return ValidationResult(
            reference=reference,
            extracted=document_item,
            item_code_status=code_status,
            quantity_status=quantity_status,
            overall_status=OverallStatus.combine(code_status, quantity_status),
            issues=tuple(issues),
            checked_quantity=checked_quantity,
            similarity=similarity,
            is_duplicate=len(members) > 1,
            duplicate_count=len(members),
        )

    @staticmethod
    def _failed_row(reference: ReferenceLineItem, exc: Exception) -> ValidationResult:
        return ValidationResult(
            reference=reference,
            extracted=None,
            item_code_status=FieldStatus.ERROR,
            quantity_status=FieldStatus.ERROR,
            overall_status=OverallStatus.ERROR,
            issues=(f"Validation failed: {exc}",),
        )


def _to_number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _group_total(members: Sequence[ReferenceLineItem]) -> float | None:
    quantities = [_to_number(member.quantity) for member in members]
    if any(q is None for q in quantities):
        return None
    return sum(q for q in quantities if q is not None)


def _format(value: float | None) -> str:
    return "n/a" if value is None else f"{value:g}"
