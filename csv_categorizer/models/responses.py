from typing import Any, Dict, List
from pydantic import BaseModel, Field
from csv_categorizer.models.categorization import CategorizedItem, CategoryStats


class CategorizeResponse(BaseModel):
    """Result of a categorization run"""
    items: List[CategorizedItem] = Field(..., description="Records returned by the pipeline, in chunk order")
    stats: List[CategoryStats] = Field(default_factory=list, description="Record count per category")
    unique_count: int = Field(..., ge=0, description="Number of distinct non-empty texts submitted")
    category_count: int = Field(..., ge=0, description="Number of distinct categories in the result")
    fallback_count: int = Field(0, ge=0, description="Records standing in for items whose chunk response was unusable")


class CategorizeRowsResponse(CategorizeResponse):
    """Categorization result joined back onto the original rows"""
    rows: List[Dict[str, Any]] = Field(..., description="Original rows with Category, Confidence and Reason")
