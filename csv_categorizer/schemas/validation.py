"""
Response validation for classification service payloads.

The service returns free-form JSON text with no compile-time shape. Every
chunk response is decoded and checked here before any of its records are
accepted; callers treat any failure as an unusable chunk.
"""

import json
import logging
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from csv_categorizer.models.categorization import CategorizedItem

logger = logging.getLogger(__name__)


class ResponseValidationError(Exception):
    """Raised when a classification payload cannot be turned into records."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        super().__init__(message)
        self.validation_errors = validation_errors or []


def parse_categorized_items(payload: Union[str, bytes, list, None]) -> List[CategorizedItem]:
    """
    Decode and validate a raw classification payload.

    Each record must carry originalText, category and reason as strings and
    confidence as a number. Values are not range-checked.

    Args:
        payload: Raw payload text, already-decoded list, or None

    Returns:
        Validated CategorizedItem records in payload order

    Raises:
        ResponseValidationError: If the payload is absent, not JSON, not a
            list, or any record is missing a field or has the wrong type
    """
    if payload is None:
        raise ResponseValidationError("Empty response payload")

    if isinstance(payload, (str, bytes)):
        if not payload.strip():
            raise ResponseValidationError("Empty response payload")
        try:
            data: Any = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug(f"JSON decode error: {e}")
            raise ResponseValidationError(f"Invalid JSON format: {e}") from e
    else:
        data = payload

    if not isinstance(data, list):
        raise ResponseValidationError(
            f"Expected a JSON array, got {type(data).__name__}"
        )

    items: List[CategorizedItem] = []
    validation_errors: List[str] = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            validation_errors.append(
                f"{index}: expected an object, got {type(record).__name__}"
            )
            continue
        try:
            items.append(CategorizedItem.model_validate(record, strict=True))
        except ValidationError as e:
            validation_errors.extend(
                f"{index}.{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )

    if validation_errors:
        raise ResponseValidationError(
            f"Response validation failed: {validation_errors}",
            validation_errors
        )

    return items
