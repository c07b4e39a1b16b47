"""Tests for session and presentation state models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rspamdeck.constants.enums import NavPhase, ViewId
from rspamdeck.models.state import Session, SessionStore, ViewState
from rspamdeck.models.state.view_data import ViewData


class TestSession:
    """Tests for Session."""

    def test_session_is_frozen(self) -> None:
        """Sessions are immutable once built."""
        session = Session(token="pw")

        with pytest.raises(ValidationError):
            session.token = "other"  # type: ignore[misc]

    def test_read_only_per_cluster(self) -> None:
        """Read-only flags are looked up per cluster."""
        session = Session(token="pw", read_only_by_cluster={"mx1": True})

        assert session.is_read_only("mx1") is True
        assert session.is_read_only("mx2") is False


class TestSessionStore:
    """Tests for SessionStore."""

    def test_empty_store_is_not_logged(self) -> None:
        """A fresh store restores nothing."""
        store = SessionStore()

        assert store.is_logged() is False
        assert store.load_session("All SERVERS") is None

    def test_load_session_uses_current_cluster(self) -> None:
        """The restored read-only flag belongs to the given cluster."""
        store = SessionStore()
        store.save_token("pw")
        store.save_credentials({"mx1": True, "mx2": False})

        session = store.load_session("mx1")

        assert session is not None
        assert session.token == "pw"
        assert session.read_only is True
        assert store.load_session("mx2").read_only is False  # type: ignore[union-attr]

    def test_credentials_are_copied(self) -> None:
        """Callers cannot mutate stored flags."""
        store = SessionStore()
        flags = {"mx1": True}
        store.save_credentials(flags)
        flags["mx1"] = False

        assert store.credentials == {"mx1": True}

    def test_clear(self) -> None:
        """clear() drops token and flags."""
        store = SessionStore()
        store.save_token("pw")
        store.save_credentials({})

        store.clear()

        assert store.token is None
        assert store.credentials is None


class TestViewState:
    """Tests for ViewState."""

    def test_defaults(self) -> None:
        """Navigation starts idle on the status view."""
        state = ViewState()

        assert state.active_view is ViewId.STATUS
        assert state.phase is NavPhase.IDLE
        assert state.active_timers == {}
        assert state.is_disabled(ViewId.REFRESH) is False


class TestViewData:
    """Tests for ViewData."""

    def test_update_notifies_listeners(self) -> None:
        """Listeners see the updated snapshot."""
        data = ViewData()
        seen: list[tuple[ViewId, dict]] = []
        data.subscribe(lambda view, snapshot: seen.append((view, dict(snapshot.sections))))

        data.update(ViewId.STATUS, "stat", {"online": 1})

        assert seen == [(ViewId.STATUS, {"stat": {"online": 1}})]
        assert data.get(ViewId.STATUS).updated_at is not None

    def test_broken_listener_is_isolated(self) -> None:
        """One failing listener does not stop the update."""
        data = ViewData()

        def broken(view, snapshot) -> None:
            raise KeyError("bug")

        data.subscribe(broken)
        data.update(ViewId.SYMBOLS, "symbols", [])

        assert data.get(ViewId.SYMBOLS).sections == {"symbols": []}

    def test_unsubscribe_and_clear(self) -> None:
        """Unsubscribed listeners are skipped; clear() empties every view."""
        data = ViewData()
        seen: list[ViewId] = []

        def listener(view, snapshot) -> None:
            seen.append(view)

        data.subscribe(listener)
        data.unsubscribe(listener)
        data.update(ViewId.HISTORY, "history", [])
        data.clear()

        assert seen == []
        assert data.get(ViewId.HISTORY).sections == {}
