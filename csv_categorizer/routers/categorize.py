from typing import List
from fastapi import APIRouter, Depends, HTTPException
from csv_categorizer.clients.gemini import ClassificationServiceError
from csv_categorizer.core.logging import get_logger, log_with_context
from csv_categorizer.engine.categorizer import CategorizationPipeline, get_categorization_pipeline
from csv_categorizer.engine.normalizer import normalize
from csv_categorizer.models.categorization import CategorizedItem
from csv_categorizer.models.requests import CategorizeRequest, CategorizeRowsRequest
from csv_categorizer.models.responses import CategorizeResponse, CategorizeRowsResponse
from csv_categorizer.services.annotation import annotate_rows, extract_column_texts, summarize_categories

router = APIRouter(prefix="/categorize", tags=["categorization"])
logger = get_logger(__name__)


def _summary(texts: List[str], items: List[CategorizedItem]) -> dict:
    return {
        "items": items,
        "stats": summarize_categories(items),
        "unique_count": len(normalize(texts)),
        "category_count": len({item.category for item in items}),
        "fallback_count": sum(1 for item in items if item.is_fallback),
    }


@router.post("/", response_model=CategorizeResponse)
async def categorize_texts(
    request: CategorizeRequest,
    pipeline: CategorizationPipeline = Depends(get_categorization_pipeline)
):
    """Categorize a list of texts"""
    try:
        log_with_context(
            logger, "info", "Categorization request received",
            texts_count=len(request.texts),
            max_categories=request.options.max_categories,
            event="categorization_started"
        )

        items = await pipeline.categorize(request.texts, request.options)

        log_with_context(
            logger, "info", "Categorization completed",
            results_count=len(items),
            fallback_count=sum(1 for item in items if item.is_fallback),
            event="categorization_completed"
        )

        return CategorizeResponse(**_summary(request.texts, items))
    except ClassificationServiceError as e:
        logger.error(f"Classification service failed: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Classification service failed: {str(e)}")
    except Exception as e:
        logger.error(f"Categorization failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Categorization failed: {str(e)}")


@router.post("/rows", response_model=CategorizeRowsResponse)
async def categorize_rows(
    request: CategorizeRowsRequest,
    pipeline: CategorizationPipeline = Depends(get_categorization_pipeline)
):
    """Categorize one column of tabular rows and return the annotated rows"""
    if request.rows and not any(request.target_column in row for row in request.rows):
        raise HTTPException(
            status_code=400,
            detail=f"Column '{request.target_column}' not found in rows"
        )

    try:
        texts = extract_column_texts(request.rows, request.target_column)

        log_with_context(
            logger, "info", "Row categorization request received",
            rows_count=len(request.rows),
            target_column=request.target_column,
            texts_count=len(texts),
            event="row_categorization_started"
        )

        items = await pipeline.categorize(texts, request.options)
        rows = annotate_rows(request.rows, request.target_column, items, request.export_columns)

        log_with_context(
            logger, "info", "Row categorization completed",
            rows_count=len(rows),
            results_count=len(items),
            event="row_categorization_completed"
        )

        return CategorizeRowsResponse(rows=rows, **_summary(texts, items))
    except ClassificationServiceError as e:
        logger.error(f"Classification service failed: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Classification service failed: {str(e)}")
    except Exception as e:
        logger.error(f"Row categorization failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Row categorization failed: {str(e)}")
