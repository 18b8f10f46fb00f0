"""Integration tests for the HTTP API."""
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from skillflow.api.dependencies import get_gemini_client, get_usage_store, reset_dependencies
from skillflow.api.main import app
from skillflow.config import Settings, reset_settings
from skillflow.integrations import GeminiClient
from skillflow.usage import InMemoryUsageStore
from skillflow.workflow import get_template
from skillflow.workflow.serialization import export_workflow, workflow_to_dict


@pytest.fixture
def client():
    reset_dependencies()
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def research_payload():
    return workflow_to_dict(get_template("research-report"))


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["skills"] == 11


def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["service"] == "skillflow"


class TestCatalogRoutes:

    def test_list_skills(self, client):
        response = client.get("/v1/skills")

        assert response.status_code == 200
        research = next(s for s in response.json() if s["id"] == "research-assistant")
        assert research["name"] == "Research Assistant"
        assert research["inputs"][0] == {
            "id": "topic",
            "name": "Research Topic",
            "type": "text",
            "description": "Topic to research",
            "required": True,
        }

    def test_templates(self, client):
        response = client.get("/v1/templates")

        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_template_not_found(self, client):
        response = client.get("/v1/templates/nope")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()


class TestWorkflowRoutes:

    def test_validate_valid(self, client, research_payload):
        response = client.post("/v1/workflows/validate", json=research_payload)

        assert response.status_code == 200
        assert response.json() == {"valid": True, "errors": []}

    def test_validate_invalid(self, client, research_payload):
        research_payload["name"] = ""

        response = client.post("/v1/workflows/validate", json=research_payload)

        assert response.json()["valid"] is False
        assert "Workflow name is required" in response.json()["errors"]

    def test_arrange(self, client, research_payload):
        response = client.post("/v1/workflows/arrange", json=research_payload)

        assert response.status_code == 200
        positions = response.json()["positions"]
        assert positions["node-1"]["x"] < positions["node-2"]["x"] < positions["node-3"]["x"]

    def test_required_inputs(self, client, research_payload):
        response = client.post("/v1/workflows/required-inputs", json=research_payload)

        assert response.status_code == 200
        assert response.json() == [
            {
                "nodeId": "node-1",
                "skillId": "research-assistant",
                "skillName": "Research Assistant",
                "inputId": "topic",
                "inputName": "Research Topic",
                "kind": "text",
                "description": "Topic to research",
            }
        ]

    def test_prompt(self, client, research_payload):
        response = client.post("/v1/workflows/prompt", json=research_payload)

        assert response.json()["prompt"].startswith("# Workflow: Research Report Generator")

    def test_simulate(self, client, research_payload):
        response = client.post(
            "/v1/workflows/simulate",
            json={"workflow": research_payload, "inputs": {"node-1": {"topic": "Vector databases"}}},
        )

        assert response.status_code == 200
        state = response.json()["state"]
        assert state["status"] == "completed"
        assert state["completedNodeIds"] == ["node-1", "node-2", "node-3"]
        assert state["isRunning"] is False
        assert response.json()["progress"][0]["isRunning"] is True

    def test_simulate_missing_inputs(self, client, research_payload):
        response = client.post("/v1/workflows/simulate", json={"workflow": research_payload})

        assert response.status_code == 422
        assert response.json()["detail"]["pending"][0]["inputId"] == "topic"

    def test_import(self, client):
        content = export_workflow(get_template("animated-landing"))

        response = client.post("/v1/workflows/import", json={"content": content})

        assert response.status_code == 200
        assert response.json()["id"] == "animated-landing"

    def test_import_rejects_bad_document(self, client):
        response = client.post("/v1/workflows/import", json={"content": '{"name": "x"}'})

        assert response.status_code == 400
        assert "missing required fields" in response.json()["detail"]


class TestAIExecute:
    """The metered AI endpoint, with Gemini behind a mock transport."""

    @pytest.fixture
    def store(self):
        store = InMemoryUsageStore()
        app.dependency_overrides[get_usage_store] = lambda: store
        return store

    @pytest.fixture
    def gemini(self, monkeypatch):
        """Gemini stand-in; set ``gemini.status`` to make it fail."""
        monkeypatch.setenv("SKILLFLOW_GEMINI_API_KEY", "built-in-key")
        reset_settings()
        gemini = SimpleNamespace(calls=[], status=200)

        def handler(request: httpx.Request) -> httpx.Response:
            gemini.calls.append(request)
            if gemini.status != 200:
                return httpx.Response(gemini.status, text="upstream says no")
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "generated"}]}}]},
            )

        def make_client():
            settings = Settings(gemini_max_retries=0)
            return GeminiClient(settings=settings, client=httpx.Client(transport=httpx.MockTransport(handler)))

        app.dependency_overrides[get_gemini_client] = make_client
        return gemini

    def _execute(self, client, **body):
        payload = {"prompt": "Do the thing", "fingerprint": "fp-api-test"}
        payload.update(body)
        return client.post("/v1/ai/execute", json=payload)

    def test_free_runs_then_402(self, client, store, gemini):
        remaining = [self._execute(client).json()["remaining"] for _ in range(3)]

        response = self._execute(client)

        assert remaining == [2, 1, 0]
        assert response.status_code == 402
        assert response.json() == {
            "error": "Free run limit reached",
            "limit": 3,
            "used": 3,
            "message": "Enter your own Gemini API key to continue running workflows.",
        }
        assert len(gemini.calls) == 3
        assert gemini.calls[0].url.params["key"] == "built-in-key"

    def test_user_key_bypasses_quota(self, client, store, gemini):
        for _ in range(3):
            store.increment("fp-api-test")

        response = self._execute(client, userApiKey="user-key")

        assert response.status_code == 200
        assert response.json() == {"result": "generated", "model": "gemini-2.0-flash"}
        assert gemini.calls[0].url.params["key"] == "user-key"
        assert store.get_count("fp-api-test") == 3

    def test_rejected_key_is_401(self, client, store, gemini):
        gemini.status = 403

        response = self._execute(client, userApiKey="bad-key")

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid API key"

    def test_upstream_failure_is_502_and_not_counted(self, client, store, gemini):
        gemini.status = 500

        response = self._execute(client)

        assert response.status_code == 502
        assert response.json()["details"] == "upstream says no"
        assert store.get_count("fp-api-test") == 0

    def test_no_builtin_key_is_500(self, client, store, monkeypatch):
        monkeypatch.delenv("SKILLFLOW_GEMINI_API_KEY", raising=False)
        reset_settings()

        response = self._execute(client)

        assert response.status_code == 500
        assert response.json() == {"error": "AI service not configured"}

    def test_prompt_is_required(self, client, store):
        response = client.post("/v1/ai/execute", json={"prompt": "", "fingerprint": "fp"})

        assert response.status_code == 422
