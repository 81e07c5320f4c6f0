"""
The "log state of mind" intent.

Runs a request through normalization, checks that the store will accept the
write, saves the record and reads the sample back for the response. Each
step runs once; any failure ends the invocation with a single typed error.
"""

import logging
from datetime import datetime
from enum import Enum

from .adapter import from_external, to_external
from .errors import StateOfMindError, StoreError, StoreUnavailable, Unauthorized
from .models import STATE_OF_MIND_TYPE, LogRequest, StateOfMind
from .normalizer import DEFAULT_POLICY, CalendarPolicy, normalize
from .store import AuthorizationStatus, HealthStore

logger = logging.getLogger(__name__)


class IntentState(str, Enum):
    RECEIVED = "received"
    NORMALIZED = "normalized"
    AUTHORIZATION_CHECKED = "authorization_checked"
    PERSISTED = "persisted"
    RESPONSE_BUILT = "response_built"
    FAILED = "failed"


class LogStateOfMindIntent:
    """Logs one state of mind sample into a health store."""

    def __init__(self, store: HealthStore, policy: CalendarPolicy = DEFAULT_POLICY) -> None:
        self.store = store
        self.policy = policy
        self.state = IntentState.RECEIVED
        self.error: StateOfMindError | None = None

    def _advance(self, state: IntentState) -> None:
        logger.debug("Intent %s -> %s", self.state.value, state.value)
        self.state = state

    async def perform(self, request: LogRequest, now: datetime | None = None) -> StateOfMind:
        """
        Log ``request`` and return the sample as read back from the store.

        Args:
            request: The unchecked request
            now: Reference time, defaults to the current time

        Returns:
            The persisted sample

        Raises:
            ValidationError: If the request is invalid
            AvailabilityError: If the store is unavailable or not authorized
            StoreError: If the write fails
            ConversionError: If the saved record cannot be read back
        """
        if self.state is not IntentState.RECEIVED:
            raise RuntimeError(f"Intent already ran (state: {self.state.value})")

        try:
            sample = normalize(request, now=now, policy=self.policy)
            self._advance(IntentState.NORMALIZED)

            try:
                available = self.store.is_available()
                status = self.store.authorization_status(STATE_OF_MIND_TYPE)
            except Exception as e:
                raise StoreError(e) from e
            if not available:
                raise StoreUnavailable()
            if status is not AuthorizationStatus.SHARING_AUTHORIZED:
                raise Unauthorized(status)
            self._advance(IntentState.AUTHORIZATION_CHECKED)

            record = to_external(sample)
            try:
                await self.store.save(record)
            except Exception as e:
                raise StoreError(e) from e
            self._advance(IntentState.PERSISTED)

            result = from_external(record)
            self._advance(IntentState.RESPONSE_BUILT)

        except StateOfMindError as e:
            logger.warning(
                "Failed to log state of mind in state %s: %s: %s",
                self.state.value,
                type(e).__name__,
                e.message,
            )
            self.error = e
            self._advance(IntentState.FAILED)
            raise

        logger.info("Logged %s", result.title)
        return result


async def log_state_of_mind(
    request: LogRequest,
    store: HealthStore,
    now: datetime | None = None,
    policy: CalendarPolicy = DEFAULT_POLICY,
) -> StateOfMind:
    """Run a fresh intent for ``request`` against ``store``."""
    return await LogStateOfMindIntent(store, policy).perform(request, now=now)
