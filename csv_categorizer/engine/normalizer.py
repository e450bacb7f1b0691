from typing import Iterable, List


def normalize(texts: Iterable[str]) -> List[str]:
    """
    Collapse texts to unique, trimmed, non-empty strings

    Duplicates are compared after trimming and case-sensitively; the first
    occurrence wins and keeps its position.
    """
    seen = set()
    unique: List[str] = []
    for text in texts:
        trimmed = text.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(trimmed)
        unique.append(trimmed)
    return unique
