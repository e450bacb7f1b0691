from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

UNCATEGORIZED = "Uncategorized"
PROCESSING_ERROR = "Processing Error"
OTHER_CATEGORY = "Other"


class CategorizationOptions(BaseModel):
    """Constraints forwarded to the classification service for a whole run"""
    model_config = ConfigDict(populate_by_name=True)

    max_categories: Optional[int] = Field(
        None,
        alias="maxCategories",
        description="Upper bound on distinct categories across the entire run; ignored unless positive"
    )
    predefined_categories: Optional[List[str]] = Field(
        None,
        alias="predefinedCategories",
        description="Preferred category names; 'Other' is used when none fits"
    )

    @field_validator('predefined_categories')
    @classmethod
    def strip_blank_categories(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Trim category names and drop the ones left empty."""
        if v is None:
            return v
        return [name.strip() for name in v if name.strip()]


class CategorizedItem(BaseModel):
    """Single labeled text as returned by the classification service"""
    model_config = ConfigDict(populate_by_name=True)

    original_text: str = Field(..., alias="originalText", description="The exact text provided in the input list")
    category: str = Field(..., description="A concise 1-3 word category name")
    confidence: float = Field(..., description="Confidence score from 0.0 to 1.0")
    reason: str = Field(..., description="Brief explanation of why it fits this category")

    @classmethod
    def fallback(cls, text: str) -> "CategorizedItem":
        """Record emitted for every item of a chunk whose response was unusable"""
        return cls(
            original_text=text,
            category=UNCATEGORIZED,
            confidence=0.0,
            reason=PROCESSING_ERROR
        )

    @property
    def is_fallback(self) -> bool:
        return (
            self.category == UNCATEGORIZED
            and self.confidence == 0.0
            and self.reason == PROCESSING_ERROR
        )


class CategoryStats(BaseModel):
    """Number of categorized records that share a category"""
    name: str = Field(..., description="Category name")
    count: int = Field(..., ge=0, description="Number of records in this category")
