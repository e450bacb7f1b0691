from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from csv_categorizer.models.categorization import CategorizationOptions


class CategorizeRequest(BaseModel):
    """Categorize a list of free-text values"""
    texts: List[str] = Field(..., description="Texts to categorize; blanks and duplicates are ignored")
    options: CategorizationOptions = Field(
        default_factory=CategorizationOptions,
        description="Run-wide constraints forwarded to the classification service"
    )


class CategorizeRowsRequest(BaseModel):
    """Categorize one column of tabular rows and annotate the rows"""
    model_config = ConfigDict(populate_by_name=True)

    rows: List[Dict[str, Any]] = Field(..., description="Parsed tabular rows keyed by column name")
    target_column: str = Field(..., alias="targetColumn", min_length=1, description="Column holding the text to categorize")
    export_columns: Optional[List[str]] = Field(
        None,
        alias="exportColumns",
        description="Columns to keep in the annotated rows; all columns when omitted"
    )
    options: CategorizationOptions = Field(
        default_factory=CategorizationOptions,
        description="Run-wide constraints forwarded to the classification service"
    )
