"""Deterministic post-processing of OCR text."""

import re

from recon.normalization.corrections import (
    DIGIT_LOOKALIKES,
    MIN_REAL_DIGITS,
    NUMERIC_TOKEN,
    PHRASE_CORRECTIONS,
)

_MULTI_SPACE = re.compile(r"[ \t]{2,}")
_MULTI_NEWLINE = re.compile(r"\n{4,}")
_TRANSLATION = str.maketrans(DIGIT_LOOKALIKES)


class TextNormalizer:
    """Repairs known OCR misreads and tidies whitespace.

    The transform is idempotent: normalize(normalize(t)) == normalize(t).
    """

    def normalize(self, text: str) -> str:
        if not text:
            return ""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = self.fix_phrases(text)
        text = self.fix_numeric_tokens(text)
        return self.collapse_whitespace(text)

    @staticmethod
    def fix_phrases(text: str) -> str:
        for pattern, replacement in PHRASE_CORRECTIONS:
            text = pattern.sub(replacement, text)
        return text

    @staticmethod
    def fix_numeric_tokens(text: str) -> str:
        """Map lookalike letters to digits inside numeric-looking tokens only."""

        def _repair(match: re.Match[str]) -> str:
            token = match.group(0)
            if sum(ch.isdigit() for ch in token) < MIN_REAL_DIGITS:
                return token
            return token.translate(_TRANSLATION)

        return NUMERIC_TOKEN.sub(_repair, text)

    @staticmethod
    def collapse_whitespace(text: str) -> str:
        text = _MULTI_SPACE.sub(" ", text)
        text = "\n".join(line.strip() for line in text.split("\n"))
        text = _MULTI_NEWLINE.sub("\n\n\n", text)
        return text.strip()
