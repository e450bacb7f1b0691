# Classification service response schemas

from .validation import ResponseValidationError, parse_categorized_items

__all__ = [
    'ResponseValidationError',
    'parse_categorized_items'
]
