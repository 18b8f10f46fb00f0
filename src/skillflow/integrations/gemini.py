"""Gemini client - the model behind the AI execute endpoint."""
import time
from typing import Any

import httpx

from skillflow.config import Settings, get_settings
from skillflow.errors import SkillFlowError
from skillflow.observability import get_logger

logger = get_logger(__name__)

EXECUTOR_PREAMBLE = (
    "You are an AI workflow executor. Process the following workflow and "
    "generate real, useful output for each step.\n\n"
)


class GeminiError(SkillFlowError):
    """Raised when the Gemini API call fails."""

    def __init__(self, message: str, status_code: int | None = None, details: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class GeminiAuthError(GeminiError):
    """Raised when Gemini rejects the API key (HTTP 400 or 403)."""

    pass


class GeminiClient:
    """
    Thin synchronous client for ``models/{model}:generateContent``.

    Rate limiting (429) and server errors (5xx) are retried with
    exponential backoff; other client errors are not.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.Client | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def model(self) -> str:
        return self.settings.gemini_model

    def build_request(self, prompt: str) -> dict[str, Any]:
        """Request body for a single-turn generation."""
        return {
            "contents": [{"parts": [{"text": f"{EXECUTOR_PREAMBLE}{prompt}"}]}],
            "generationConfig": {
                "temperature": self.settings.gemini_temperature,
                "maxOutputTokens": self.settings.gemini_max_output_tokens,
            },
        }

    def generate(self, prompt: str, api_key: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Workflow or node prompt
            api_key: Gemini API key (built-in or user-supplied)

        Returns:
            Generated text ("" if the response has no candidates)

        Raises:
            GeminiAuthError: Key rejected
            GeminiError: Any other failure
        """
        url = f"{self.settings.gemini_base_url.rstrip('/')}/{self.model}:generateContent"
        body = self.build_request(prompt)
        max_retries = self.settings.gemini_max_retries
        extra = {"model": self.model, "prompt_chars": len(prompt)}

        logger.info("gemini_call_start", extra=extra)

        for attempt in range(max_retries + 1):
            try:
                response = self._post(url, body, api_key)
            except httpx.TimeoutException as e:
                if attempt < max_retries:
                    wait_time = 0.5 * (2**attempt)
                    logger.warning(f"Request timeout, retrying in {wait_time}s", extra=extra)
                    time.sleep(wait_time)
                    continue
                raise GeminiError(f"Request timeout: {e}") from e
            except httpx.HTTPError as e:
                raise GeminiError(f"HTTP error: {e}") from e

            status = response.status_code
            if status == 429 or 500 <= status < 600:
                if attempt < max_retries:
                    wait_time = 0.5 * (2**attempt)
                    logger.warning(
                        f"Gemini returned {status}, retrying in {wait_time}s",
                        extra=extra,
                    )
                    time.sleep(wait_time)
                    continue
                raise GeminiError("AI service error", status_code=status, details=response.text)

            if status in (400, 403):
                raise GeminiAuthError(
                    "The API key provided is invalid or has expired.",
                    status_code=status,
                    details=response.text,
                )
            if status >= 400:
                raise GeminiError("AI service error", status_code=status, details=response.text)

            text = self._extract_text(response)
            logger.info("gemini_call_end", extra={**extra, "output_chars": len(text)})
            return text

        raise GeminiError("Max retries exceeded")

    def _post(self, url: str, body: dict[str, Any], api_key: str) -> httpx.Response:
        params = {"key": api_key}
        if self._client is not None:
            return self._client.post(url, json=body, params=params)
        timeout = httpx.Timeout(
            connect=5.0,
            read=self.settings.ai_request_timeout_s,
            write=5.0,
            pool=5.0,
        )
        with httpx.Client(timeout=timeout) as client:
            return client.post(url, json=body, params=params)

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as e:
            raise GeminiError(f"Malformed Gemini response: {e}") from e
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""
