"""External service integrations."""
from skillflow.integrations.gemini import GeminiAuthError, GeminiClient, GeminiError

__all__ = ["GeminiAuthError", "GeminiClient", "GeminiError"]
