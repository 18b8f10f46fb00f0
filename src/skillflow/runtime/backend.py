"""
AI backends - how a node's work gets produced.

The engine treats the AI call as opaque: it sends the node's skill, prompt
and resolved inputs and gets back a result, or a BackendError whose
``kind`` is quota_exceeded, invalid_credential or backend_error.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from skillflow.catalog import SkillInfo, SkillIOSchema
from skillflow.config import get_settings
from skillflow.errors import BackendError


logger = logging.getLogger(__name__)

EXECUTE_PATH = "/v1/ai/execute"


class BackendRequest(BaseModel):
    """One node invocation."""
    model_config = ConfigDict(populate_by_name=True)

    skill_id: str = Field(..., alias="skillId")
    node_id: str = Field(..., alias="nodeId")
    prompt: str
    inputs: Dict[str, Any] = Field(default_factory=dict)
    credential: Optional[str] = Field(None, alias="userApiKey")
    fingerprint: str


class BackendResponse(BaseModel):
    """Successful invocation result."""

    result: Union[str, Dict[str, Any]]
    remaining: Optional[int] = None
    model: Optional[str] = None


class AIBackend(Protocol):
    """Protocol for AI backends."""

    async def execute(self, request: BackendRequest) -> BackendResponse:
        """
        Run one node.

        Raises:
            BackendError: With kind quota_exceeded, invalid_credential
                or backend_error
        """
        ...


class HttpAIBackend:
    """
    Client of the AI execute service.

    Posts ``{prompt, userApiKey?, fingerprint}`` (plus the node's skill id
    and inputs) and maps HTTP statuses onto BackendError kinds:
    402 -> quota_exceeded, 401 -> invalid_credential, anything else ->
    backend_error.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: Optional[float] = None,
    ):
        """
        Initialize backend.

        Args:
            base_url: Service base URL (defaults to settings.ai_backend_url)
            client: Optional shared AsyncClient (caller owns its lifetime)
            timeout_s: Read timeout (defaults to settings.ai_request_timeout_s)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.ai_backend_url).rstrip("/")
        self._client = client
        read_timeout = timeout_s if timeout_s is not None else settings.ai_request_timeout_s
        self._timeout = httpx.Timeout(connect=5.0, read=read_timeout, write=5.0, pool=5.0)

    async def execute(self, request: BackendRequest) -> BackendResponse:
        body: Dict[str, Any] = {
            "prompt": request.prompt,
            "fingerprint": request.fingerprint,
            "skillId": request.skill_id,
            "inputs": request.inputs,
        }
        if request.credential:
            body["userApiKey"] = request.credential

        url = f"{self.base_url}{EXECUTE_PATH}"
        try:
            if self._client is not None:
                response = await self._client.post(url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            raise BackendError(BackendError.BACKEND_ERROR, f"AI request failed: {e}") from e

        if response.status_code >= 400:
            raise self._map_error(response)

        try:
            return BackendResponse.model_validate(response.json())
        except ValueError as e:
            raise BackendError(
                BackendError.BACKEND_ERROR,
                f"Malformed AI response: {e}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _map_error(response: httpx.Response) -> BackendError:
        """Translate an error response into a BackendError."""
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        status = response.status_code
        if status == 402:
            return BackendError(
                BackendError.QUOTA_EXCEEDED,
                payload.get("message") or "Free run limit reached",
                status_code=status,
                limit=payload.get("limit"),
                used=payload.get("used"),
            )
        if status == 401:
            return BackendError(
                BackendError.INVALID_CREDENTIAL,
                payload.get("message") or "Invalid API key",
                status_code=status,
            )
        return BackendError(
            BackendError.BACKEND_ERROR,
            payload.get("error") or f"AI execution failed ({status})",
            status_code=status,
        )


def map_result_to_outputs(
    schema: Optional[SkillIOSchema],
    result: Union[str, Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Spread a backend result over a skill's outputs.

    A mapping keyed by output ids fills those outputs (unknown keys are
    dropped); a plain string fills every output.
    """
    if schema is None or not schema.outputs:
        if isinstance(result, Mapping):
            return dict(result)
        return {"result": result}

    if isinstance(result, Mapping):
        outputs = {port.id: result[port.id] for port in schema.outputs if port.id in result}
        if outputs:
            return outputs
        result = json.dumps(dict(result), default=str)
    return {port.id: result for port in schema.outputs}


def simulate_node_outputs(
    skill: SkillInfo,
    schema: Optional[SkillIOSchema],
    inputs: Mapping[str, Any],
) -> Dict[str, Any]:
    """Deterministic placeholder outputs for offline/demo runs."""
    basis = ", ".join(sorted(inputs)) if inputs else "no inputs"
    if schema is None or not schema.outputs:
        return {"result": f"[Simulated] {skill.name} output (based on: {basis})"}
    return {
        port.id: f"[Simulated] {port.name} from {skill.name} (based on: {basis})"
        for port in schema.outputs
    }


__all__ = [
    "AIBackend",
    "BackendRequest",
    "BackendResponse",
    "HttpAIBackend",
    "map_result_to_outputs",
    "simulate_node_outputs",
]
