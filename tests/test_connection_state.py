"""Unit tests for connection entity state transitions (State Pattern)."""

import pytest

from wanderer.domain.entities import Connection
from wanderer.domain.enums import ConnectionStatus
from wanderer.domain.errors import (
    ForbiddenError,
    InvalidTransitionError,
    ValidationError,
)

TOURIST, GUIDE, OUTSIDER = 1, 2, 3


def _pending() -> Connection:
    return Connection(id=10, from_user_id=TOURIST, to_user_id=GUIDE)


class TestConnectionStateMachine:
    def test_initial_status_is_pending(self):
        assert Connection().status == ConnectionStatus.PENDING

    # ── Valid transitions ─────────────────────────────────────────

    def test_guide_accepts(self):
        c = _pending()
        c.transition_to(ConnectionStatus.ACCEPTED, GUIDE)
        assert c.status == ConnectionStatus.ACCEPTED
        assert c.resolved_by == GUIDE
        assert c.updated_at is not None

    def test_guide_declines(self):
        c = _pending()
        c.transition_to(ConnectionStatus.DECLINED, GUIDE)
        assert c.status == ConnectionStatus.DECLINED

    def test_tourist_cancels(self):
        c = _pending()
        c.transition_to(ConnectionStatus.CANCELLED, TOURIST)
        assert c.status == ConnectionStatus.CANCELLED
        assert c.resolved_by == TOURIST

    # ── "rejected" alias ──────────────────────────────────────────

    def test_rejected_from_guide_means_declined(self):
        assert _pending().resolve_status("rejected", GUIDE) == ConnectionStatus.DECLINED

    def test_rejected_from_tourist_means_cancelled(self):
        assert _pending().resolve_status("rejected", TOURIST) == ConnectionStatus.CANCELLED

    def test_rejected_from_outsider_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            _pending().resolve_status("rejected", OUTSIDER)

    def test_unknown_status_string(self):
        with pytest.raises(ValidationError):
            _pending().resolve_status("maybe", GUIDE)

    # ── Authorization ─────────────────────────────────────────────

    def test_tourist_cannot_accept(self):
        c = _pending()
        with pytest.raises(ForbiddenError):
            c.transition_to(ConnectionStatus.ACCEPTED, TOURIST)
        assert c.status == ConnectionStatus.PENDING

    def test_guide_cannot_cancel(self):
        with pytest.raises(ForbiddenError):
            _pending().transition_to(ConnectionStatus.CANCELLED, GUIDE)

    def test_outsider_cannot_accept(self):
        c = _pending()
        with pytest.raises(ForbiddenError):
            c.transition_to(ConnectionStatus.ACCEPTED, OUTSIDER)
        assert c.status == ConnectionStatus.PENDING
        assert c.resolved_by is None

    def test_outsider_gets_forbidden_even_when_terminal(self):
        c = Connection(from_user_id=TOURIST, to_user_id=GUIDE, status=ConnectionStatus.ACCEPTED)
        with pytest.raises(ForbiddenError):
            c.transition_to(ConnectionStatus.DECLINED, OUTSIDER)

    # ── Terminal states ───────────────────────────────────────────

    @pytest.mark.parametrize(
        "terminal",
        [ConnectionStatus.ACCEPTED, ConnectionStatus.DECLINED, ConnectionStatus.CANCELLED],
    )
    @pytest.mark.parametrize(
        "target, actor",
        [
            (ConnectionStatus.ACCEPTED, GUIDE),
            (ConnectionStatus.DECLINED, GUIDE),
            (ConnectionStatus.CANCELLED, TOURIST),
            (ConnectionStatus.ACCEPTED, TOURIST),
        ],
    )
    def test_terminal_states_are_final(self, terminal, target, actor):
        c = Connection(from_user_id=TOURIST, to_user_id=GUIDE, status=terminal)
        with pytest.raises(InvalidTransitionError):
            c.transition_to(target, actor)
        assert c.status == terminal

    def test_pending_to_pending_fails(self):
        with pytest.raises(InvalidTransitionError):
            _pending().transition_to(ConnectionStatus.PENDING, GUIDE)
