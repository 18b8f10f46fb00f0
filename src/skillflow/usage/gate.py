"""Usage/quota gate limiting unauthenticated AI executions per client."""
from pydantic import BaseModel, Field

from skillflow.config import get_settings
from skillflow.observability import get_logger
from skillflow.usage.fingerprint import generate_fingerprint
from skillflow.usage.store import CREDENTIAL_KEY, FINGERPRINT_KEY, UsageStore

logger = get_logger(__name__)

FREE_RUN_LIMIT = 3


class CanRunResult(BaseModel):
    """Answer of the gate before an AI execution."""

    can_run: bool = Field(..., description="Whether an AI execution may start")
    reason: str | None = Field(default=None, description="Why not, if blocked")


class UsageGate:
    """
    Tracks free AI runs per client fingerprint and an optional credential.

    A stored credential lifts the cap entirely; runs made with it are not
    counted against the free quota.
    """

    def __init__(
        self,
        store: UsageStore,
        limit: int | None = None,
        fingerprint: str | None = None,
    ):
        """
        Initialize gate.

        Args:
            store: Persistence for counter, credential and fingerprint
            limit: Free-run ceiling (defaults to settings.free_run_limit)
            fingerprint: Client identity; generated and persisted if omitted
        """
        self.store = store
        self.limit = limit if limit is not None else get_settings().free_run_limit
        self._fingerprint = fingerprint

    @property
    def fingerprint(self) -> str:
        """Client fingerprint, created on first use and persisted."""
        if self._fingerprint is None:
            stored = self.store.get_value(FINGERPRINT_KEY)
            if not stored:
                stored = generate_fingerprint()
                self.store.set_value(FINGERPRINT_KEY, stored)
                logger.info("Generated client fingerprint", extra={"fingerprint": stored})
            self._fingerprint = stored
        return self._fingerprint

    def get_usage_count(self) -> int:
        return self.store.get_count(self.fingerprint)

    def get_free_run_limit(self) -> int:
        return self.limit

    def get_remaining_free_runs(self) -> int:
        return max(0, self.limit - self.get_usage_count())

    def has_reached_limit(self) -> bool:
        return self.get_usage_count() >= self.limit

    def get_credential(self) -> str | None:
        return self.store.get_value(CREDENTIAL_KEY)

    def has_credential(self) -> bool:
        key = self.get_credential()
        return key is not None and len(key.strip()) > 0

    def set_credential(self, key: str) -> None:
        """Store a user-supplied API key."""
        self.store.set_value(CREDENTIAL_KEY, key)
        logger.info("Credential stored", extra={"fingerprint": self.fingerprint})

    def clear_credential(self) -> None:
        self.store.delete_value(CREDENTIAL_KEY)
        logger.info("Credential cleared", extra={"fingerprint": self.fingerprint})

    def can_run(self) -> CanRunResult:
        """Decide whether an AI execution may start now."""
        if self.has_credential():
            return CanRunResult(can_run=True)
        if self.get_remaining_free_runs() > 0:
            return CanRunResult(can_run=True)
        return CanRunResult(
            can_run=False,
            reason=(
                f"Free run limit of {self.limit} reached. "
                "Add your own API key to continue running workflows."
            ),
        )

    def record_run(self) -> int:
        """
        Count one successful AI execution against the free quota.

        Returns:
            Remaining free runs after recording
        """
        count = self.store.increment(self.fingerprint)
        remaining = max(0, self.limit - count)
        logger.info(
            "Free run recorded",
            extra={"fingerprint": self.fingerprint, "used": count, "remaining": remaining},
        )
        return remaining
