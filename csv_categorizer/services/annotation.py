"""
Helpers on either side of the categorization pipeline.

Upstream, one column is pulled out of tabular rows to feed the pipeline.
Downstream, the returned records are joined back onto the original rows by
exact text match and summarized per category.
"""
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from csv_categorizer.core.logging import get_logger, log_with_context
from csv_categorizer.models.categorization import CategorizedItem, CategoryStats, UNCATEGORIZED

logger = get_logger(__name__)

CATEGORY_COLUMN = "Category"
CONFIDENCE_COLUMN = "Confidence"
REASON_COLUMN = "Reason"


def cell_text(value: Any) -> Optional[str]:
    """Text sent for a cell, or None for missing and empty cells"""
    if not value:
        return None
    return value if isinstance(value, str) else str(value)


def extract_column_texts(rows: Iterable[Mapping[str, Any]], column: str) -> List[str]:
    """Values of one column across rows, skipping missing and empty values"""
    texts = []
    for row in rows:
        text = cell_text(row.get(column))
        if text is not None:
            texts.append(text)
    return texts


def build_category_lookup(items: Iterable[CategorizedItem]) -> Dict[str, CategorizedItem]:
    """
    Map original text to its record

    When the service returns the same text more than once, the last record wins.
    """
    lookup: Dict[str, CategorizedItem] = {}
    for item in items:
        lookup[item.original_text] = item
    return lookup


def annotate_rows(
    rows: Sequence[Mapping[str, Any]],
    column: str,
    items: Iterable[CategorizedItem],
    columns: Optional[Sequence[str]] = None
) -> List[Dict[str, Any]]:
    """
    Attach Category, Confidence and Reason to each original row

    Args:
        rows: Original tabular rows, in order
        column: Column whose raw value was categorized
        items: Records returned by the pipeline
        columns: Columns to keep from each row; all columns when None

    Returns:
        One dict per input row. Rows whose value has no record get
        "Uncategorized", confidence 0 and an empty reason.
    """
    lookup = build_category_lookup(items)
    annotated: List[Dict[str, Any]] = []
    matched = 0

    for row in rows:
        kept = columns if columns is not None else list(row.keys())
        out = {col: row.get(col, "") for col in kept}

        text = cell_text(row.get(column))
        item = lookup.get(text) if text is not None else None
        if item is not None:
            matched += 1
            out[CATEGORY_COLUMN] = item.category
            out[CONFIDENCE_COLUMN] = item.confidence
            out[REASON_COLUMN] = item.reason
        else:
            out[CATEGORY_COLUMN] = UNCATEGORIZED
            out[CONFIDENCE_COLUMN] = 0
            out[REASON_COLUMN] = ""
        annotated.append(out)

    log_with_context(
        logger, "debug", "Annotated rows",
        rows_count=len(annotated),
        matched_count=matched,
        column=column
    )

    return annotated


def summarize_categories(items: Iterable[CategorizedItem]) -> List[CategoryStats]:
    """Record count per category, largest first, ties by name"""
    counts = Counter(item.category for item in items)
    return [
        CategoryStats(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
    ]
