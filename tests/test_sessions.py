"""Tests for the in-memory session store"""
from datetime import datetime, timedelta, timezone

import pytest

from theme_api.core.sessions import SessionStore
from theme_api.core.state_machine import GenerationStatus
from theme_api.models.errors import ApplicationError, ErrorCode

from conftest import make_orchestrator


@pytest.fixture
def store():
    return SessionStore(factory=make_orchestrator)


class TestSessionStore:

    def test_create_and_get(self, store):
        session = store.create()

        assert session.session_id in store
        assert store.get(session.session_id) is session
        assert len(store) == 1

    def test_get_unknown(self, store):
        with pytest.raises(ApplicationError) as exc_info:
            store.get("missing")

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert exc_info.value.http_status == 404

    def test_get_or_create(self, store):
        first = store.get_or_create(None)

        assert store.get_or_create(first.session_id) is first
        assert store.get_or_create("chosen-id").session_id == "chosen-id"
        assert len(store) == 2

    def test_remove_idle_keeps_running_and_recent(self, store):
        old = datetime.now(timezone.utc) - timedelta(hours=2)
        idle = store.create("idle")
        busy = store.create("busy")
        store.create("recent")
        idle.last_access = old
        busy.last_access = old
        busy.orchestrator.run.status = GenerationStatus.RUNNING

        removed = store.remove_idle(timedelta(minutes=60))

        assert removed == 1
        assert "idle" not in store
        assert "busy" in store
        assert "recent" in store
