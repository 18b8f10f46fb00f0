"""Pytest configuration and fixtures."""
import os

import pytest

# Set test environment variables
os.environ["SKILLFLOW_ENV"] = "test"
os.environ["SKILLFLOW_LOG_FORMAT"] = "text"
os.environ["SKILLFLOW_USAGE_BACKEND"] = "memory"
os.environ["SKILLFLOW_REDIS_URL"] = "redis://localhost:6379/1"  # Test DB
os.environ.pop("SKILLFLOW_GEMINI_API_KEY", None)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so monkeypatched env vars apply."""
    from skillflow.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def catalog():
    """The built-in skill catalog."""
    from skillflow.catalog import SkillCatalog

    return SkillCatalog.default()


@pytest.fixture
def research_workflow():
    """research-assistant -> doc-coauthoring -> docx chain."""
    from skillflow.workflow import get_template

    return get_template("research-report")


@pytest.fixture
def research_inputs():
    """Values for the only unconnected required input of the chain."""
    return {"node-1": {"topic": "Vector databases"}}


@pytest.fixture
def memory_store():
    from skillflow.usage import InMemoryUsageStore

    return InMemoryUsageStore()


@pytest.fixture
def gate(memory_store):
    """Usage gate with the default limit of 3 and a fixed fingerprint."""
    from skillflow.usage import UsageGate

    return UsageGate(memory_store, limit=3, fingerprint="fp-test-client")


@pytest.fixture
def sample_gemini_response():
    """Sample Gemini generateContent response."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [{"text": "This is a test response from Gemini."}],
                    "role": "model",
                },
                "finishReason": "STOP",
            }
        ],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 9},
    }
