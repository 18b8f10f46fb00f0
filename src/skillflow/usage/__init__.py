"""Usage package."""
from skillflow.usage.fingerprint import generate_fingerprint
from skillflow.usage.gate import CanRunResult, FREE_RUN_LIMIT, UsageGate
from skillflow.usage.store import (
    create_usage_store,
    FileUsageStore,
    InMemoryUsageStore,
    RedisUsageStore,
    UsageStore,
)

__all__ = [
    "CanRunResult",
    "create_usage_store",
    "FileUsageStore",
    "FREE_RUN_LIMIT",
    "generate_fingerprint",
    "InMemoryUsageStore",
    "RedisUsageStore",
    "UsageGate",
    "UsageStore",
]
