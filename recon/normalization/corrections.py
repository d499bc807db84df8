"""Correction tables for recurring OCR misreads on customs declaration forms."""

import re

# Ordered: longer phrases first so a header is repaired before its parts.
# Each replacement maps to itself under every pattern, so repair is idempotent.
PHRASE_CORRECTIONS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"PEMBER[I1l]TAHUAN\s+[I1l]MP[O0]R\s+BARANG\s+UNTUK\s+D[I1l]T[I1l]MBUN"
        ),
        "PEMBERITAHUAN IMPOR BARANG UNTUK DITIMBUN",
    ),
    (re.compile(r"PEMBER[I1l]TAHUAN\s+[I1l]MP[O0]R"), "PEMBERITAHUAN IMPOR"),
    (re.compile(r"LEMBAR\s+LAN[J1I]UTAN"), "LEMBAR LANJUTAN"),
    (re.compile(r"LEMBAR\s+LAN\s+JUTAN"), "LEMBAR LANJUTAN"),
    (re.compile(r"P[o0]s\s+Tar[i1l]f\s*/\s*H[S5]"), "Pos Tarif/HS"),
    (re.compile(r"Kode\s+[B8]rg\b"), "Kode Brg"),
    (re.compile(r"\bJum[l1I]ah\b"), "Jumlah"),
]

# Letter -> digit pairs that recognition commonly confuses.
DIGIT_LOOKALIKES: dict[str, str] = {
    "O": "0",
    "o": "0",
    "I": "1",
    "l": "1",
}

_LOOKALIKE_CLASS = "".join(re.escape(ch) for ch in DIGIT_LOOKALIKES)

# A numeric-looking token: digit groups separated by '.' or ',' where a
# lookalike letter may stand in for a digit, e.g. "3.15O,0000" or "847l.903000".
NUMERIC_TOKEN = re.compile(
    rf"(?<!\w)[\d{_LOOKALIKE_CLASS}]+(?:[.,][\d{_LOOKALIKE_CLASS}]+)+(?!\w)"
)

MIN_REAL_DIGITS = 2
