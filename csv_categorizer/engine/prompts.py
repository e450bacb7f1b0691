"""Prompt text and response schema sent to the classification service"""
from typing import Any, Dict, List, Optional

from csv_categorizer.models.categorization import CategorizationOptions, OTHER_CATEGORY

SYSTEM_INSTRUCTION = (
    "You are a senior data analyst. Your task is to categorize a list of text inputs "
    "into concise, logical, and meaningful categories. Follow constraints strictly. "
    "Return only the JSON array."
)

TASK_INSTRUCTION = "Categorize the following text entries."

ENTRIES_HEADER = "Entries to process:"

# Gemini responseSchema (OpenAPI subset)
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "originalText": {
                "type": "STRING",
                "description": "The exact text provided in the input list."
            },
            "category": {
                "type": "STRING",
                "description": "A concise 1-3 word category name."
            },
            "confidence": {
                "type": "NUMBER",
                "description": "Confidence score from 0.0 to 1.0."
            },
            "reason": {
                "type": "STRING",
                "description": "Brief explanation of why it fits this category."
            }
        },
        "required": ["originalText", "category", "confidence", "reason"]
    }
}


def build_constraint_preamble(options: Optional[CategorizationOptions]) -> str:
    """
    Render the run-wide constraints as instruction lines

    Returns an empty string when no constraint is set.
    """
    if options is None:
        return ""

    lines: List[str] = []
    if options.predefined_categories:
        lines.append(
            "CRITICAL: You MUST prioritize using these specific categories: "
            f"{', '.join(options.predefined_categories)}. If an item clearly does not "
            f"fit any of these, use the category '{OTHER_CATEGORY}'."
        )
    if options.max_categories and options.max_categories > 0:
        lines.append(
            f"CRITICAL: Do not create more than {options.max_categories} unique "
            "categories in total. Merge similar themes to stay under this limit."
        )
    return "\n".join(lines)


def build_instructions(options: Optional[CategorizationOptions]) -> str:
    preamble = build_constraint_preamble(options)
    if not preamble:
        return TASK_INSTRUCTION
    return f"{TASK_INSTRUCTION}\n{preamble}"


def render_entries(items: List[str]) -> str:
    """Numbered list of entries, 1-indexed within the chunk"""
    return "\n".join(f'{idx}. "{text}"' for idx, text in enumerate(items, start=1))


def render_request_text(instructions: str, items: List[str]) -> str:
    return f"{instructions}\n\n{ENTRIES_HEADER}\n{render_entries(items)}"
