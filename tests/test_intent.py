"""
Tests for the log state of mind intent.

These tests run whole invocations against the in-memory store and check that
each one either saves exactly one record or fails with one typed error.
"""

from datetime import datetime, timezone

import pytest

from emocore.errors import StoreError, StoreUnavailable, Unauthorized, ValenceOutOfRange
from emocore.intent import IntentState, LogStateOfMindIntent, log_state_of_mind
from emocore.models import HealthRecord, LogRequest
from emocore.store import AuthorizationStatus, InMemoryHealthStore
from emocore.vocabulary import Kind, Label

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FailingStore(InMemoryHealthStore):
    async def save(self, record: HealthRecord) -> None:
        raise OSError("disk full")


class UnreachableStore(InMemoryHealthStore):
    def authorization_status(self, record_type: str) -> AuthorizationStatus:
        raise ConnectionError("store daemon down")


class TestLogStateOfMindIntent:
    """Test suite for the intent orchestrator."""

    def setup_method(self):
        self.store = InMemoryHealthStore()
        self.request = LogRequest(
            kind="daily_mood",
            valence=0.8,
            date=datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc),
            labels=["happy", "proud"],
            associations=["work"],
        )

    async def test_logs_sample(self):
        """Test a successful invocation end to end."""
        intent = LogStateOfMindIntent(self.store)
        sample = await intent.perform(self.request, now=NOW)

        assert intent.state is IntentState.RESPONSE_BUILT
        assert intent.error is None
        assert sample.kind is Kind.DAILY_MOOD
        assert sample.labels == (Label.HAPPY, Label.PROUD)
        assert sample.date == datetime(2026, 10, 17, 22, 0, tzinfo=timezone.utc)
        assert sample.title == "A Very Pleasant Day"

        records = await self.store.read_all()
        assert len(records) == 1
        assert records[0].uuid == sample.id
        assert records[0].valence_classification == 7

    async def test_invalid_request_saves_nothing(self):
        intent = LogStateOfMindIntent(self.store)
        request = self.request.model_copy(update={"valence": 1.5})

        with pytest.raises(ValenceOutOfRange):
            await intent.perform(request, now=NOW)

        assert intent.state is IntentState.FAILED
        assert isinstance(intent.error, ValenceOutOfRange)
        assert await self.store.read_all() == []

    async def test_store_unavailable(self):
        store = InMemoryHealthStore(available=False)
        with pytest.raises(StoreUnavailable):
            await log_state_of_mind(self.request, store, now=NOW)
        assert await store.read_all() == []

    @pytest.mark.parametrize(
        "status",
        [AuthorizationStatus.SHARING_DENIED, AuthorizationStatus.NOT_DETERMINED],
    )
    async def test_not_authorized(self, status):
        """Test that only an authorized store accepts writes."""
        store = InMemoryHealthStore(authorization=status)
        with pytest.raises(Unauthorized) as excinfo:
            await log_state_of_mind(self.request, store, now=NOW)
        assert excinfo.value.status is status
        assert await store.read_all() == []

    async def test_save_failure_is_wrapped(self):
        intent = LogStateOfMindIntent(FailingStore())
        with pytest.raises(StoreError) as excinfo:
            await intent.perform(self.request, now=NOW)

        assert isinstance(excinfo.value.__cause__, OSError)
        assert excinfo.value.value == "disk full"
        assert intent.state is IntentState.FAILED

    async def test_authorization_query_failure_is_wrapped(self):
        """Test that a failing store query ends the intent with a StoreError."""
        store = UnreachableStore()
        intent = LogStateOfMindIntent(store)
        with pytest.raises(StoreError) as excinfo:
            await intent.perform(self.request, now=NOW)

        assert isinstance(excinfo.value.__cause__, ConnectionError)
        assert intent.state is IntentState.FAILED
        assert intent.error is excinfo.value
        assert await store.read_all() == []

    async def test_intent_runs_once(self):
        intent = LogStateOfMindIntent(self.store)
        await intent.perform(self.request, now=NOW)
        with pytest.raises(RuntimeError):
            await intent.perform(self.request, now=NOW)
