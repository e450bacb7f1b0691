from typing import Iterator, List, Optional, Sequence
import time
from csv_categorizer.clients.gemini import ClassificationService, gemini_client
from csv_categorizer.core.config import config
from csv_categorizer.core.logging import get_logger, log_with_context
from csv_categorizer.engine.normalizer import normalize
from csv_categorizer.engine.prompts import RESPONSE_SCHEMA, build_instructions
from csv_categorizer.models.categorization import CategorizationOptions, CategorizedItem
from csv_categorizer.schemas.validation import parse_categorized_items

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 100


def chunk_texts(items: Sequence[str], size: int) -> Iterator[List[str]]:
    """Yield contiguous chunks of at most size items, in order"""
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class CategorizationPipeline:
    """Categorizes a column of texts through a classification service, one chunk at a time"""

    def __init__(self, service: ClassificationService, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.service = service
        self.batch_size = batch_size

    async def categorize(
        self,
        texts: Sequence[str],
        options: Optional[CategorizationOptions] = None
    ) -> List[CategorizedItem]:
        """
        Categorize texts and return the accumulated records

        Texts are deduplicated and trimmed first; an empty result returns
        immediately without calling the service. A chunk whose response
        cannot be parsed is replaced by one fallback record per item.
        Errors raised by the service call propagate to the caller.
        """
        unique_texts = normalize(texts)
        if not unique_texts:
            log_with_context(
                logger, "info", "Nothing to categorize",
                input_count=len(texts)
            )
            return []

        start_time = time.time()
        instructions = build_instructions(options)
        total_chunks = (len(unique_texts) + self.batch_size - 1) // self.batch_size

        log_with_context(
            logger, "info", "Starting categorization run",
            input_count=len(texts),
            unique_count=len(unique_texts),
            batch_size=self.batch_size,
            total_chunks=total_chunks,
            max_categories=options.max_categories if options else None,
            predefined_categories_count=len(options.predefined_categories or []) if options else 0
        )

        results: List[CategorizedItem] = []
        failed_chunks = 0

        for chunk_index, chunk in enumerate(chunk_texts(unique_texts, self.batch_size)):
            log_with_context(
                logger, "debug", "Dispatching chunk",
                chunk_index=chunk_index,
                chunk_size=len(chunk)
            )

            payload = await self.service.classify(instructions, chunk, RESPONSE_SCHEMA)

            try:
                parsed = parse_categorized_items(payload)
            except Exception as e:
                failed_chunks += 1
                log_with_context(
                    logger, "warning", "Failed to parse classification response for chunk",
                    chunk_index=chunk_index,
                    chunk_size=len(chunk),
                    error=str(e),
                    error_type=type(e).__name__
                )
                results.extend(CategorizedItem.fallback(text) for text in chunk)
                continue

            self._log_unmatched(chunk_index, chunk, parsed)
            results.extend(parsed)

        processing_time = time.time() - start_time
        log_with_context(
            logger, "info", "Categorization run completed",
            unique_count=len(unique_texts),
            results_count=len(results),
            total_chunks=total_chunks,
            failed_chunks=failed_chunks,
            processing_time_ms=round(processing_time * 1000, 2)
        )

        return results

    def _log_unmatched(
        self,
        chunk_index: int,
        chunk: List[str],
        parsed: List[CategorizedItem]
    ) -> None:
        """Report echoed texts that do not exactly match any requested item"""
        requested = set(chunk)
        unmatched = [item.original_text for item in parsed if item.original_text not in requested]
        if unmatched or len(parsed) != len(chunk):
            log_with_context(
                logger, "warning", "Classification response does not mirror the chunk",
                chunk_index=chunk_index,
                chunk_size=len(chunk),
                returned_count=len(parsed),
                unmatched_count=len(unmatched),
                unmatched_sample=unmatched[:5]
            )


def get_categorization_pipeline() -> CategorizationPipeline:
    """Pipeline bound to the configured Gemini client"""
    return CategorizationPipeline(
        service=gemini_client,
        batch_size=config.categorization_batch_size
    )
