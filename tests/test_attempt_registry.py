from __future__ import annotations

import pytest

from quiz_panel.core.models import AttemptStatus
from quiz_panel.core.services.attempt_registry import AttemptNotFoundError, AttemptRegistry
from quiz_panel.core.services.question_store import QuizNotFoundError


@pytest.fixture
def registry(store, timer_factory) -> AttemptRegistry:
    return AttemptRegistry(store, timer_factory=timer_factory)


def test_create_attempt_starts_session(registry):
    attempt_id, session = registry.create_attempt("olympiad")
    assert session.status is AttemptStatus.ACTIVE
    assert registry.get_session(attempt_id) is session
    assert registry.get_state(attempt_id).seconds_remaining == 60
    assert registry.attempt_count() == 1


def test_attempts_are_independent(registry):
    first_id, first = registry.create_attempt("olympiad")
    second_id, second = registry.create_attempt("olympiad")
    assert first_id != second_id
    first.select_answer("q1", 1)
    assert second.state.answers == {}


def test_unknown_quiz_is_rejected(registry):
    with pytest.raises(QuizNotFoundError):
        registry.create_attempt("missing")
    assert registry.attempt_count() == 0


def test_unknown_attempt_raises(registry):
    with pytest.raises(AttemptNotFoundError):
        registry.get_session("missing")
    with pytest.raises(AttemptNotFoundError):
        registry.discard_attempt("missing")


def test_discard_and_shutdown_stop_timers(registry, timer_factory):
    first_id, _ = registry.create_attempt("olympiad")
    registry.create_attempt("olympiad")
    first_timer, second_timer = timer_factory.timers

    registry.discard_attempt(first_id)
    assert not first_timer.is_active()
    assert second_timer.is_active()

    registry.shutdown()
    assert not second_timer.is_active()
    assert registry.attempt_count() == 0


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def expiring_registry(store, timer_factory, clock) -> AttemptRegistry:
    return AttemptRegistry(store, timer_factory=timer_factory, terminal_ttl_seconds=60, clock=clock)


def test_finished_attempts_are_evicted_after_grace_period(expiring_registry, clock):
    attempt_id, session = expiring_registry.create_attempt("olympiad")
    session.submit()

    clock.now += 59
    assert expiring_registry.evict_expired() == 0
    assert expiring_registry.get_state(attempt_id).final_score == 0

    clock.now += 1
    assert expiring_registry.evict_expired() == 1
    with pytest.raises(AttemptNotFoundError):
        expiring_registry.get_session(attempt_id)


def test_timed_out_and_failed_attempts_are_evicted_on_next_create(expiring_registry, clock, timer_factory):
    timed_out_id, _ = expiring_registry.create_attempt("olympiad")
    timer_factory.last.tick(60)
    failed_id, failed = expiring_registry.create_attempt("empty")
    assert failed.status is AttemptStatus.ERROR

    clock.now += 3600
    fresh_id, _ = expiring_registry.create_attempt("olympiad")

    assert expiring_registry.attempt_count() == 1
    assert expiring_registry.get_session(fresh_id).status is AttemptStatus.ACTIVE
    for attempt_id in (timed_out_id, failed_id):
        with pytest.raises(AttemptNotFoundError):
            expiring_registry.get_session(attempt_id)


def test_active_attempts_are_never_evicted(expiring_registry, clock, timer_factory):
    attempt_id, _ = expiring_registry.create_attempt("olympiad")
    clock.now += 3600
    assert expiring_registry.evict_expired() == 0
    assert timer_factory.last.is_active()
    assert expiring_registry.get_session(attempt_id).status is AttemptStatus.ACTIVE
