"""
AI execute route - the metered backend behind HttpAIBackend.

Without a user key, each fingerprint gets a small number of free runs on
the built-in Gemini key. Usage is recorded only after Gemini answered.
"""
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from skillflow.api.dependencies import get_app_settings, get_gemini_client, get_usage_store
from skillflow.config import Settings
from skillflow.integrations import GeminiAuthError, GeminiClient, GeminiError
from skillflow.observability import get_logger
from skillflow.usage import UsageGate, UsageStore

logger = get_logger(__name__)
router = APIRouter()


class ExecuteRequest(BaseModel):
    """Request model for one AI execution."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, description="Prompt to execute")
    fingerprint: str = Field(..., min_length=1, description="Client fingerprint")
    user_api_key: str | None = Field(
        default=None,
        alias="userApiKey",
        description="User's own Gemini key (bypasses the free quota)",
    )
    skill_id: str | None = Field(default=None, alias="skillId")
    inputs: dict[str, Any] = Field(default_factory=dict)


class ExecuteResponse(BaseModel):
    """Response model for a successful execution."""

    result: str = Field(..., description="Generated text")
    remaining: int | None = Field(
        default=None,
        description="Free runs left (only when the built-in key was used)",
    )
    model: str = Field(..., description="Model used")


@router.post("/v1/ai/execute", response_model=ExecuteResponse, response_model_exclude_none=True)
def execute(
    request: ExecuteRequest,
    store: UsageStore = Depends(get_usage_store),
    gemini: GeminiClient = Depends(get_gemini_client),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """
    Execute a prompt on Gemini.

    Status codes:
        402: free run limit reached for this fingerprint
        401: the API key was rejected
        502: Gemini failed
        500: no built-in key configured
    """
    extra = {"fingerprint": request.fingerprint, "skill_id": request.skill_id}
    user_key = request.user_api_key.strip() if request.user_api_key else ""
    gate: UsageGate | None = None

    if user_key:
        api_key = user_key
    else:
        gate = UsageGate(store, limit=settings.free_run_limit, fingerprint=request.fingerprint)
        if not gate.can_run().can_run:
            used = gate.get_usage_count()
            logger.info("Free run limit reached", extra={**extra, "used": used})
            return JSONResponse(
                status_code=402,
                content={
                    "error": "Free run limit reached",
                    "limit": gate.get_free_run_limit(),
                    "used": used,
                    "message": "Enter your own Gemini API key to continue running workflows.",
                },
            )
        if settings.gemini_api_key is None:
            logger.error("No built-in Gemini key configured", extra=extra)
            return JSONResponse(status_code=500, content={"error": "AI service not configured"})
        api_key = settings.gemini_api_key.get_secret_value()

    try:
        text = gemini.generate(request.prompt, api_key)
    except GeminiAuthError as e:
        logger.warning("Gemini rejected the API key", extra={**extra, "status": e.status_code})
        return JSONResponse(
            status_code=401,
            content={
                "error": "Invalid API key",
                "message": "The API key provided is invalid or has expired.",
            },
        )
    except GeminiError as e:
        logger.error(
            "Gemini call failed",
            extra={**extra, "status": e.status_code, "error": str(e)},
        )
        return JSONResponse(
            status_code=502,
            content={"error": "AI service error", "details": e.details or str(e)},
        )

    remaining = gate.record_run() if gate is not None else None
    return ExecuteResponse(result=text, remaining=remaining, model=gemini.model)
