from typing import Any, Dict, List, Optional, Protocol
import httpx
from csv_categorizer.core.config import AppConfig, config
from csv_categorizer.core.logging import get_logger, log_with_context
from csv_categorizer.engine.prompts import SYSTEM_INSTRUCTION, render_request_text

logger = get_logger(__name__)


class ClassificationService(Protocol):
    """Capability the categorization pipeline consumes"""

    async def classify(
        self,
        instructions: str,
        items: List[str],
        schema: Dict[str, Any]
    ) -> Optional[str]:
        """
        Classify items under the given instructions

        Returns the raw response payload, or None when the service
        produced none. Raises when no response could be obtained.
        """
        ...


class ClassificationServiceError(Exception):
    """Exception raised when the classification service cannot be reached or refuses a request"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GeminiClassificationService:
    """Client for the Gemini generateContent endpoint with a JSON response schema"""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, settings: AppConfig) -> "GeminiClassificationService":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.request_timeout
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def classify(
        self,
        instructions: str,
        items: List[str],
        schema: Dict[str, Any]
    ) -> Optional[str]:
        """
        Send one chunk of items to Gemini and return the raw JSON text

        Args:
            instructions: Task text including any run-wide constraints
            items: Texts to classify, rendered as a numbered list
            schema: responseSchema the model output must follow

        Returns:
            Text of the first candidate, or None if the response carried none

        Raises:
            ClassificationServiceError: On missing credentials, timeout,
                transport failure, non-2xx status or a non-JSON envelope
        """
        if not self.api_key:
            raise ClassificationServiceError("Gemini API key is not configured")

        payload = self._build_payload(instructions, items, schema)
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        log_with_context(
            logger, "info", "Sending classification request",
            model=self.model,
            items_count=len(items)
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, headers=headers, json=payload)
                response.raise_for_status()
                data = response.json()

        except httpx.TimeoutException as e:
            log_with_context(
                logger, "error", "Timeout calling classification service",
                model=self.model,
                timeout=self.timeout,
                error=str(e)
            )
            raise ClassificationServiceError(f"Timeout calling classification service: {e}") from e

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log_with_context(
                logger, "error", "HTTP error from classification service",
                model=self.model,
                status_code=status_code,
                error=e.response.text[:500]
            )
            raise ClassificationServiceError(
                f"Classification service returned HTTP {status_code}",
                status_code=status_code
            ) from e

        except httpx.HTTPError as e:
            log_with_context(
                logger, "error", "Transport error calling classification service",
                model=self.model,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ClassificationServiceError(f"Failed to reach classification service: {e}") from e

        except ValueError as e:
            log_with_context(
                logger, "error", "Classification service returned a non-JSON envelope",
                model=self.model,
                error=str(e)
            )
            raise ClassificationServiceError(f"Malformed classification service response: {e}") from e

        text = self._extract_text(data)

        log_with_context(
            logger, "info", "Classification response received",
            model=self.model,
            items_count=len(items),
            response_size=len(text) if text else 0,
            total_tokens=(data.get("usageMetadata") or {}).get("totalTokenCount")
            if isinstance(data, dict) else None
        )

        return text

    def _build_payload(
        self,
        instructions: str,
        items: List[str],
        schema: Dict[str, Any]
    ) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [
                {"role": "user", "parts": [{"text": render_request_text(instructions, items)}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema
            }
        }

    def _extract_text(self, data: Any) -> Optional[str]:
        """
        Pull the generated text out of a generateContent envelope

        Text parts of the first candidate are concatenated. Missing
        candidates, content or parts yield None.
        """
        if not isinstance(data, dict):
            return None

        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            log_with_context(
                logger, "warning", "Classification response has no candidates",
                model=self.model,
                prompt_feedback=data.get("promptFeedback")
            )
            return None

        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        if not texts:
            return None

        return "".join(texts)


# Global instance
gemini_client = GeminiClassificationService.from_config(config)
