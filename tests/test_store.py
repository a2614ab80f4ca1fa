"""
Testing in-memory store
- Create a session, answer guesses, and check status/attempts/history/stats, etc.
"""

import pytest

from codebreaker.codespace import compare
from codebreaker.solver import Contradiction, GuessPending, InvalidFeedbackRange, Won

def test_store_create_and_two_phase_round(store):
    entry = store.create()

    # Session starts in progress with the opening guess
    assert entry.status == "in_progress"
    assert entry.solver.session.current_guess == (0, 1, 2, 3)
    assert entry.remaining == 5040

    # Phase 1 filters and leaves the entry "computing"
    same, outcome = store.submit_feedback(entry.id, 2, 0)
    assert same is entry
    assert outcome is None
    assert entry.status == "computing"
    assert entry.remaining == 1260
    assert entry.solver.session.attempts == 1

    # Phase 2 computes the guess
    store.compute_next_guess(entry.id)
    assert entry.status == "in_progress"
    assert entry.solver.session.attempts == 2
    assert entry.solver.session.current_guess in entry.solver.session.candidates

def test_store_unknown_session(store):
    assert store.get("nope") is None
    assert store.submit_feedback("nope", 1, 0) == (None, None)
    assert store.compute_next_guess("nope") is None
    assert store.restart("nope") is None

def test_store_invalid_feedback_leaves_state_unchanged(store):
    entry = store.create()

    with pytest.raises(InvalidFeedbackRange):
        store.submit_feedback(entry.id, 1, 2)

    assert entry.status == "in_progress"
    assert entry.remaining == 5040

def test_store_rejects_feedback_while_computing(store):
    entry = store.create()
    store.submit_feedback(entry.id, 1, 0)

    with pytest.raises(GuessPending):
        store.submit_feedback(entry.id, 1, 0)

def test_store_finished_session_is_returned_unchanged(store):
    entry = store.create()
    _, outcome = store.submit_feedback(entry.id, 4, 4)
    assert outcome == Won(attempts=1)

    # Extra feedback is ignored
    same, outcome = store.submit_feedback(entry.id, 0, 0)
    assert same is entry
    assert outcome is None
    assert entry.status == "won"
    assert len(entry.solver.session.history) == 1

def test_store_compute_is_a_no_op_without_pending_feedback(store):
    entry = store.create()
    store.compute_next_guess(entry.id)

    assert entry.solver.session.attempts == 1
    assert entry.solver.session.current_guess == (0, 1, 2, 3)

def test_store_restart_resets_session_and_counts(store):
    entry = store.create()
    store.submit_feedback(entry.id, 4, 3)
    assert entry.status == "contradiction"

    store.restart(entry.id)

    assert entry.status == "in_progress"
    assert entry.remaining == 5040
    assert entry.restarts == 1
    stats = store.get_stats()
    assert stats.sessions_started == 2
    assert stats.restarts == 1

def test_store_stats_update_on_win_and_contradiction(store):
    # Session A: solve secret 5391 by answering honestly
    secret = (5, 3, 9, 1)
    entry_a = store.create()
    while entry_a.status == "in_progress":
        feedback = compare(entry_a.solver.session.current_guess, secret)
        store.submit_feedback(entry_a.id, *feedback)
        store.compute_next_guess(entry_a.id)
    assert entry_a.status == "won"
    attempts = entry_a.solver.session.attempts

    stats_after_win = store.get_stats()
    assert stats_after_win.sessions_started == 1
    assert stats_after_win.sessions_solved == 1
    assert stats_after_win.contradictions == 0
    assert stats_after_win.total_attempts_in_wins == attempts
    assert stats_after_win.fastest_win_attempts == attempts
    assert stats_after_win.slowest_win_attempts == attempts

    # Session B: impossible feedback
    entry_b = store.create()
    _, outcome = store.submit_feedback(entry_b.id, 4, 3)
    assert outcome == Contradiction()

    # Repeating feedback on a finished session does not count twice
    store.submit_feedback(entry_b.id, 4, 3)

    stats_final = store.get_stats()
    assert stats_final.sessions_started == 2
    assert stats_final.contradictions == 1

    store.reset_stats()
    assert store.get_stats().sessions_started == 0

def test_store_failed_search_does_not_leave_session_computing(store, monkeypatch):
    entry = store.create()
    store.submit_feedback(entry.id, 2, 0)
    assert entry.status == "computing"

    def broken_advance(session, **kwargs):
        raise RuntimeError("search blew up")

    monkeypatch.setattr("codebreaker.store.advance", broken_advance)

    with pytest.raises(RuntimeError):
        store.compute_next_guess(entry.id)

    # Not stuck: feedback is accepted again instead of raising GuessPending
    assert entry.status == "in_progress"
    assert entry.computing is None
    _, outcome = store.submit_feedback(entry.id, 2, 0)
    assert outcome is None
    assert entry.remaining == 1260
