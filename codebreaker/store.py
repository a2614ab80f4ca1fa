"""
In-memory store
Holds driver sessions in memory (nothing is persisted).
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from time import time
from typing import Dict, Optional, Tuple
from uuid import uuid4

from .solver import Outcome, Session, Solver, advance
from .types import DriverStatus

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    id: str
    solver: Solver
    created_at: float = field(default_factory=time)
    updated_at: float = field(default_factory=time)
    restarts: int = 0
    # Session a worker thread is currently searching a guess for
    computing: Optional[Session] = None
    # Set once per game so the scoreboard counts each ending exactly once
    counted: bool = False

    @property
    def status(self) -> DriverStatus:
        session = self.solver.session
        if session.pending:
            return "computing"
        return session.status

    @property
    def remaining(self) -> int:
        return len(self.solver.session.candidates)


# Scoreboard structure
@dataclass
class Stats:
    sessions_started: int = 0
    sessions_solved: int = 0
    contradictions: int = 0
    restarts: int = 0

    total_attempts_in_wins: int = 0
    fastest_win_attempts: Optional[int] = None
    slowest_win_attempts: Optional[int] = None


class SessionStore:
    def __init__(self, solver_factory=Solver) -> None:
        self._sessions: Dict[str, SessionEntry] = {}
        self._lock = RLock()
        self._solver_factory = solver_factory
        self._stats = Stats()

    def new_solver(self) -> Solver:
        return self._solver_factory()

    def create(self) -> SessionEntry:
        new_id = str(uuid4())
        entry = SessionEntry(id=new_id, solver=self.new_solver())
        entry.solver.start()
        with self._lock:
            self._sessions[new_id] = entry
            self._stats.sessions_started += 1
        logger.info("Session %s started", new_id)
        return entry

    def get(self, session_id: str) -> Optional[SessionEntry]:
        with self._lock:
            return self._sessions.get(session_id)

    def submit_feedback(
        self, session_id: str, digits_matched: int, positions_matched: int
    ) -> Tuple[Optional[SessionEntry], Optional[Outcome]]:
        """
        First phase of a round: validate, check for a win, filter candidates.

        Returns (entry, outcome). outcome is None when the session already
        ended (entry is returned unchanged) or when a new guess must now be
        computed with compute_next_guess(). Raises InvalidFeedbackRange and
        GuessPending from the solver.
        """
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None, None

            if entry.status in ("won", "contradiction"):
                # If the session already ended, just return it (ignore extra feedback)
                return entry, None

            outcome = entry.solver.apply_feedback(digits_matched, positions_matched)
            entry.updated_at = time()

            if entry.status in ("won", "contradiction"):
                self._update_stats_on_end(entry)

            return entry, outcome

    def compute_next_guess(self, session_id: str) -> Optional[SessionEntry]:
        """
        Second phase of a round. The search runs without holding the lock so
        readers can see the "computing" status in the meantime.
        """
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            session = entry.solver.session
            if not session.pending or entry.computing is session:
                return entry
            entry.computing = session

        solver = entry.solver
        try:
            advance(
                session,
                rng=solver.rng,
                full_search_threshold=solver.full_search_threshold,
                sample_size=solver.sample_size,
            )
        finally:
            with self._lock:
                if entry.computing is session:
                    entry.computing = None
                # A failed search must not leave the session stuck in "computing"
                session.pending = False

        with self._lock:
            entry.updated_at = time()
            if entry.solver.session is not session:
                logger.info("Session %s restarted while computing; result dropped", session_id)
            return entry

    def restart(self, session_id: str) -> Optional[SessionEntry]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            entry.solver.restart()
            entry.restarts += 1
            entry.counted = False
            entry.updated_at = time()
            self._stats.sessions_started += 1
            self._stats.restarts += 1
        logger.info("Session %s restarted", session_id)
        return entry

    # Helper updates scoreboard exactly once per game
    def _update_stats_on_end(self, entry: SessionEntry) -> None:
        if entry.counted:
            return
        entry.counted = True

        if entry.status == "won":
            attempts = entry.solver.session.attempts
            self._stats.sessions_solved += 1
            self._stats.total_attempts_in_wins += attempts
            if self._stats.fastest_win_attempts is None or attempts < self._stats.fastest_win_attempts:
                self._stats.fastest_win_attempts = attempts
            if self._stats.slowest_win_attempts is None or attempts > self._stats.slowest_win_attempts:
                self._stats.slowest_win_attempts = attempts
        else:
            self._stats.contradictions += 1

    def get_stats(self) -> Stats:
        return self._stats

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = Stats()
