from collections import Counter


def normalize_code(code: object) -> str:
    return str(code).strip().upper()


def _bigrams(value: str) -> Counter[str]:
    return Counter(value[i : i + 2] for i in range(len(value) - 1))


def code_similarity(left: str, right: str) -> float:
    """Sørensen-Dice coefficient over character bigrams, in [0, 1].

    Whitespace is ignored. Strings shorter than two characters have no
    bigrams and only score 1.0 when identical.
    """
    left = "".join(left.split())
    right = "".join(right.split())
    if left == right:
        return 1.0
    if len(left) < 2 or len(right) < 2:
        return 0.0
    overlap = sum((_bigrams(left) & _bigrams(right)).values())
    return 2.0 * overlap / (len(left) + len(right) - 2)
