"""Normalization of tariff codes and locale-ambiguous quantities."""

import re

from recon.extraction.exceptions import ExtractionError

_BRACKETS = re.compile(r"[\[\](){}|]")
_TARIFF_BARE = re.compile(r"^\d{10}$")
_TARIFF_SINGLE_DOT = re.compile(r"^(\d{4})\.(\d{6})$")
_TARIFF_DOUBLE_DOT = re.compile(r"^(\d{4})\.(\d{2,3})\.(\d{3,4})$")


def normalize_tariff_code(raw: str) -> str:
    """Return the canonical NNNN.NNNNNN form of a tariff code token.

    Accepts "8479903000", "8479.903000", "8479.90.3000" and the same with
    stray bracket noise such as "[8479.903000".

    Raises:
        ExtractionError: if the token is not a recognizable tariff code.
    """
    token = _BRACKETS.sub("", raw).strip()
    if _TARIFF_BARE.match(token):
        return f"{token[:4]}.{token[4:]}"
    if _TARIFF_SINGLE_DOT.match(token):
        return token
    match = _TARIFF_DOUBLE_DOT.match(token)
    if match:
        digits = "".join(match.groups())
        if len(digits) == 10:
            return f"{digits[:4]}.{digits[4:]}"
    raise ExtractionError(f"Unrecognized tariff code: {raw!r}")


def parse_quantity(raw: str) -> float:
    """Parse a quantity written in either decimal-comma or decimal-dot style.

    Rules, in order:
      1. dot and comma present -> dots group thousands, comma is decimal
         ("3.150,0000" -> 3150.0)
      2. dot only, 4+ digits after the dot -> decimal dot ("1.0000" -> 1.0)
      3. dot only, exactly 3 digits after the last dot and a 1-3 digit head
         (or several dots) -> thousands grouping ("1.234" -> 1234.0)
      4. otherwise a comma is the decimal point ("470,0000" -> 470.0)

    Raises:
        ExtractionError: if the value is empty, malformed or negative.
    """
    token = raw.strip().replace(" ", "")
    if not token:
        raise ExtractionError("Empty quantity")
    if token.startswith("-"):
        raise ExtractionError(f"Negative quantity: {raw!r}")

    has_dot = "." in token
    has_comma = "," in token
    if has_dot and has_comma:
        normalized = token.replace(".", "").replace(",", ".")
    elif has_dot:
        head, _, tail = token.rpartition(".")
        if len(tail) >= 4:
            normalized = token if token.count(".") == 1 else token.replace(".", "", token.count(".") - 1)
        elif len(tail) == 3 and (token.count(".") > 1 or 1 <= len(head) <= 3):
            normalized = token.replace(".", "")
        else:
            normalized = token
    elif has_comma:
        normalized = token.replace(",", ".") if token.count(",") == 1 else _comma_groups(token)
    else:
        normalized = token

    try:
        value = float(normalized)
    except ValueError as exc:
        raise ExtractionError(f"Invalid quantity: {raw!r}") from exc
    if value < 0:
        raise ExtractionError(f"Negative quantity: {raw!r}")
    return value


def _comma_groups(token: str) -> str:
    # "1,234,5678": every comma but the last groups thousands
    head, _, tail = token.rpartition(",")
    return f"{head.replace(',', '')}.{tail}"
