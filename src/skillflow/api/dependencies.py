"""Shared collaborators for the HTTP routes (overridable in tests)."""
from skillflow.catalog import SkillCatalog
from skillflow.config import Settings, get_settings
from skillflow.integrations import GeminiClient
from skillflow.usage import UsageStore, create_usage_store

# Process-wide instances, created lazily
_catalog: SkillCatalog | None = None
_usage_store: UsageStore | None = None


def get_app_settings() -> Settings:
    return get_settings()


def get_catalog() -> SkillCatalog:
    """Built-in catalog, or the file named by settings.catalog_path."""
    global _catalog
    if _catalog is None:
        path = get_settings().catalog_path
        _catalog = SkillCatalog.from_file(path) if path else SkillCatalog.default()
    return _catalog


def get_usage_store() -> UsageStore:
    """Server-side usage counters (backend from settings.usage_backend)."""
    global _usage_store
    if _usage_store is None:
        _usage_store = create_usage_store()
    return _usage_store


def get_gemini_client() -> GeminiClient:
    return GeminiClient()


def reset_dependencies() -> None:
    """Drop cached instances (useful for testing)."""
    global _catalog, _usage_store
    _catalog = None
    _usage_store = None
