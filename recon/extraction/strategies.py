"""Pattern strategies that cut document text into line-item blocks.

Each strategy is a pure function of the text: it finds candidate blocks, then
parses each block into an ExtractedLineItem. A block missing a required field
is logged and skipped; it never stops the remaining blocks.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

from recon.extraction.exceptions import ExtractionError
from recon.extraction.models import ExtractedLineItem
from recon.extraction.parsing import normalize_tariff_code, parse_quantity
from recon.logging.logger import Log

CODE_LABEL = re.compile(r"Kode Brg\s*:\s*(\w+)")


@dataclass(frozen=True)
class ItemBlock:
    """Text span believed to describe one declared item."""

    serial: int
    text: str
    tariff_token: str | None = None


class ExtractionStrategy(ABC):
    """Base for item extraction strategies."""

    name: str = ""

    def extract(self, text: str, log: Log) -> list[ExtractedLineItem]:
        items: list[ExtractedLineItem] = []
        blocks = list(self.blocks(text))
        log.debug(f"{self.name}: found {len(blocks)} candidate blocks")
        for block in blocks:
            try:
                item = self.parse_block(block)
            except ExtractionError as exc:
                log.warning(f"{self.name}: skipped item {block.serial}: {exc}")
                continue
            items.append(item)
            log.debug(
                f"Parsed serial {item.serial}: {item.code} - {item.quantity} {item.unit}"
            )
        return items

    @abstractmethod
    def blocks(self, text: str) -> Iterator[ItemBlock]:
        """Yield candidate item blocks in document order."""

    @abstractmethod
    def parse_block(self, block: ItemBlock) -> ExtractedLineItem:
        """Parse one block.

        Raises:
            ExtractionError: if a required field is missing or malformed.
        """


class LabeledLayoutStrategy(ExtractionStrategy):
    """Digital layout: items start at "<n> Pos Tarif/HS" and use labelled fields."""

    name = "labeled"

    _MARKER = re.compile(r"(\d+)\s+Pos Tarif/HS")
    _TARIFF = re.compile(r"Pos Tarif/HS\s*:?\s*(\[?\d[\d.]{9,11})")
    _DESCRIPTION = re.compile(
        r"Kode Brg\s*:\s*\w+\s+(.+?)(?=Kemasan:|Merk:|\n\s*-\s*\d|Jumlah|$)",
        re.DOTALL,
    )
    _DASHED_QUANTITY = re.compile(r"-\s*([\d.,]+)\s*\n\s*-\s*([A-Za-z]+)")
    _LABELED_QUANTITY = re.compile(r"Jumlah[:\s]*([\d.,]+)\s*([A-Za-z]+)", re.IGNORECASE)

    def blocks(self, text: str) -> Iterator[ItemBlock]:
        matches = list(self._MARKER.finditer(text))
        for i, match in enumerate(matches):
            end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            yield ItemBlock(serial=int(match.group(1)), text=text[match.start() : end])

    def parse_block(self, block: ItemBlock) -> ExtractedLineItem:
        code_match = CODE_LABEL.search(block.text)
        if not code_match:
            raise ExtractionError("Kode Brg not found")

        description_match = self._DESCRIPTION.search(block.text)
        description = (
            " ".join(description_match.group(1).split()) if description_match else ""
        )

        quantity_match = self._DASHED_QUANTITY.search(block.text) or self._LABELED_QUANTITY.search(
            block.text
        )
        if not quantity_match:
            raise ExtractionError("Jumlah not found")

        tariff_code = None
        tariff_match = self._TARIFF.search(block.text)
        if tariff_match:
            try:
                tariff_code = normalize_tariff_code(tariff_match.group(1).rstrip("."))
            except ExtractionError:
                tariff_code = None

        return ExtractedLineItem(
            serial=block.serial,
            code=code_match.group(1).strip(),
            description=description,
            quantity=parse_quantity(quantity_match.group(1)),
            unit=quantity_match.group(2).strip(),
            tariff_code=tariff_code,
            strategy=self.name,
        )


class OcrTableStrategy(ExtractionStrategy):
    """Noisy OCR table layout: one header line per item carrying its tariff code."""

    name = "ocr_table"

    MAX_BLOCK_LINES = 10
    NOISE_CHARS = "|[]()!{}_-—:;.'\" \t"
    METADATA_PREFIXES: tuple[str, ...] = (
        "kemasan",
        "merk",
        "tipe",
        "ukuran",
        "spesifikasi",
        "kode brg",
        "negara",
        "asal",
        "fasilitas",
        "bm",
        "ppn",
        "ppnbm",
        "pph",
        "cukai",
        "tarif",
        "berat",
        "netto",
        "bruto",
        "jumlah",
        "nilai",
        "harga",
    )

    _HEADER = re.compile(
        r"^[\s|\[\]()!{}]*(\d{1,4})\s*[\[(|{]?\s*(\d{4}\.\d{2,3}\.?\d{3,4}|\d{10})(?!\d)"
    )
    _QUANTITY = re.compile(r"(?<![\w.,])(\d[\d.,]*[.,]\d+)\s*-?\s*([A-Za-z]{2,5})\b")
    _QUANTITY_LINE = re.compile(r"^-?\s*[\d.,]+\s*[A-Za-z]{0,5}$")
    # bare integer quantity, only when it is the whole line
    _INTEGER_QUANTITY = re.compile(
        r"^[\s|\[\]()!{}]*(\d+)\s*-?\s*([A-Za-z]{2,5})[\s|\]]*$", re.MULTILINE
    )

    def blocks(self, text: str) -> Iterator[ItemBlock]:
        lines = text.split("\n")
        headers = [
            (i, match)
            for i, line in enumerate(lines)
            if (match := self._HEADER.match(line)) is not None
        ]
        for n, (start, match) in enumerate(headers):
            next_header = headers[n + 1][0] if n + 1 < len(headers) else len(lines)
            end = min(next_header, start + self.MAX_BLOCK_LINES)
            yield ItemBlock(
                serial=int(match.group(1)),
                text="\n".join(lines[start:end]),
                tariff_token=match.group(2),
            )

    def parse_block(self, block: ItemBlock) -> ExtractedLineItem:
        if block.tariff_token is None:
            raise ExtractionError("tariff code not found")
        tariff_code = normalize_tariff_code(block.tariff_token)

        header, _, rest = block.text.partition("\n")
        header_tail = header[header.index(block.tariff_token) + len(block.tariff_token) :]

        quantity_text = f"{header_tail}\n{self._body_for_quantity(rest)}"
        quantity_match = self._QUANTITY.search(quantity_text) or self._INTEGER_QUANTITY.search(
            quantity_text
        )
        if not quantity_match:
            raise ExtractionError("quantity not found")

        code_match = CODE_LABEL.search(block.text)
        return ExtractedLineItem(
            serial=block.serial,
            code=code_match.group(1).strip() if code_match else tariff_code,
            description=self._description(header_tail, rest),
            quantity=parse_quantity(quantity_match.group(1)),
            unit=quantity_match.group(2).upper(),
            tariff_code=tariff_code,
            strategy=self.name,
        )

    def _body_for_quantity(self, body: str) -> str:
        return "\n".join(line for line in body.split("\n") if not self._is_metadata(line))

    def _description(self, header_tail: str, body: str) -> str:
        candidates = [
            cleaned
            for line in body.split("\n")
            if (cleaned := line.lstrip(self.NOISE_CHARS).strip())
            and not self._is_metadata(cleaned)
            and not self._QUANTITY_LINE.match(cleaned)
        ]
        # first clean body line, else whatever trails the tariff code on the header
        if candidates:
            return candidates[0]
        return " ".join(header_tail.lstrip(self.NOISE_CHARS).split())

    def _is_metadata(self, line: str) -> bool:
        lowered = line.lstrip(self.NOISE_CHARS).lower()
        return any(
            lowered.startswith(prefix)
            and (len(lowered) == len(prefix) or not lowered[len(prefix)].isalpha())
            for prefix in self.METADATA_PREFIXES
        )
