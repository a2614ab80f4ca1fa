"""
Solver core (no HTTP, no storage).

A session keeps every code that is still consistent with the feedback so far.
Each feedback round:
1) filters the candidates against the current guess
2) picks the next guess by minimax: the guess whose largest feedback bucket
   (worst case) over the remaining candidates is smallest

When many candidates remain, only a random sample of them is scored as
possible guesses. Every sampled guess is still scored against ALL candidates.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .codespace import (
    CODE_LENGTH,
    Feedback,
    bucket_counts,
    compare,
    format_code,
    generate_all,
    score_table,
    unpack_key,
)
from .config import FULL_SEARCH_THRESHOLD, SAMPLE_SIZE, SOLVER_SEED
from .types import Code, SessionStatus

logger = logging.getLogger(__name__)

# Fixed first guess: scoring 5040 x 5040 before any information exists is the
# most expensive step of a game, so it is skipped.
OPENING_GUESS: Code = (0, 1, 2, 3)


class InvalidFeedbackRange(ValueError):
    """Feedback numbers outside 0..4, or more positions than digits."""


class SessionFinished(RuntimeError):
    """Feedback was sent to a session that already won or hit a contradiction."""


class GuessPending(RuntimeError):
    """Feedback was sent before the next guess was computed."""


# --- Outcomes of one feedback round ---

@dataclass(frozen=True)
class Won:
    attempts: int


@dataclass(frozen=True)
class Contradiction:
    pass


@dataclass(frozen=True)
class NextGuess:
    guess: Code
    attempts: int


Outcome = Union[Won, Contradiction, NextGuess]


@dataclass
class Turn:
    guess: Code
    feedback: Feedback


@dataclass
class Session:
    current_guess: Code
    attempts: int
    candidates: List[Code]
    status: SessionStatus = "in_progress"
    history: List[Turn] = field(default_factory=list)
    # True between a filtered feedback round and the next computed guess
    pending: bool = False


def new_session() -> Session:
    return Session(current_guess=OPENING_GUESS, attempts=1, candidates=generate_all())


def validate_feedback(digits_matched: int, positions_matched: int) -> Feedback:
    if not (0 <= digits_matched <= CODE_LENGTH) or not (0 <= positions_matched <= CODE_LENGTH):
        raise InvalidFeedbackRange(f"Feedback values must be between 0 and {CODE_LENGTH}.")
    if positions_matched > digits_matched:
        raise InvalidFeedbackRange("Positions matched can't be greater than digits matched.")
    return Feedback(digits_matched, positions_matched)


def filter_candidates(candidates: Sequence[Code], guess: Code, feedback: Feedback) -> List[Code]:
    """Keep the codes that would have answered `guess` with exactly `feedback`."""
    return [code for code in candidates if compare(guess, code) == feedback]


def partition(guess: Code, candidates: Sequence[Code]) -> Dict[Feedback, int]:
    """Bucket sizes, keyed by the feedback each candidate would give to `guess`."""
    counts = bucket_counts(guess, score_table(candidates))
    return {unpack_key(key): size for key, size in enumerate(counts) if size}


def worst_case(guess: Code, candidates: Sequence[Code], table: Optional[Sequence[tuple]] = None) -> int:
    """
    Size of the largest bucket, i.e. how many candidates could still be
    left after guessing `guess` in the unluckiest case.
    Pass a prebuilt `table` (score_table of the candidates) to skip rebuilding it.
    """
    if not candidates:
        return 0
    if table is None:
        table = score_table(candidates)
    return max(bucket_counts(guess, table))


def select_next_guess(
    candidates: Sequence[Code],
    rng: Optional[random.Random] = None,
    full_search_threshold: int = FULL_SEARCH_THRESHOLD,
    sample_size: int = SAMPLE_SIZE,
) -> Code:
    """
    Minimax over a pool of possible guesses.

    - one candidate left -> it is the answer
    - up to `full_search_threshold` candidates -> every candidate is scored
    - more than that -> a uniform sample of `sample_size` candidates is scored

    Ties keep the first guess seen. A worst case of 1 cannot be beaten,
    so the scan stops there.
    """
    if not candidates:
        raise ValueError("No candidates left to choose a guess from.")

    # 1. Nothing to search
    if len(candidates) == 1:
        return candidates[0]

    # 2. Build the pool
    if len(candidates) <= full_search_threshold:
        pool = candidates
    else:
        sampler = rng if rng is not None else random
        pool = sampler.sample(list(candidates), min(sample_size, len(candidates)))

    # 3. Score each guess against every remaining candidate
    table = score_table(candidates)
    best_guess = None
    min_worst_case = None
    for guess in pool:
        worst = max(bucket_counts(guess, table))
        if min_worst_case is None or worst < min_worst_case:
            min_worst_case = worst
            best_guess = guess
            if min_worst_case == 1:
                break

    # 4. Fallback (empty pool)
    if best_guess is None:
        return candidates[0]

    logger.debug(
        "Picked %s: worst case %s of %d candidates (pool %d)",
        format_code(best_guess), min_worst_case, len(candidates), len(pool),
    )
    return best_guess


def apply_feedback(session: Session, digits_matched: int, positions_matched: int) -> Optional[Outcome]:
    """
    First phase of a feedback round.

    Returns Won or Contradiction when the session ends, or None when a new
    guess must now be computed with `advance()`. Invalid feedback raises
    InvalidFeedbackRange and leaves the session untouched.
    """
    if session.status != "in_progress":
        raise SessionFinished(f"Session already finished ({session.status}).")
    if session.pending:
        raise GuessPending("The next guess has not been computed yet.")

    feedback = validate_feedback(digits_matched, positions_matched)
    session.history.append(Turn(guess=session.current_guess, feedback=feedback))

    # Win is decided on positions alone
    if feedback.positions_matched == CODE_LENGTH:
        session.status = "won"
        logger.info("Solved %s in %d attempt(s)", format_code(session.current_guess), session.attempts)
        return Won(attempts=session.attempts)

    before = len(session.candidates)
    session.candidates = filter_candidates(session.candidates, session.current_guess, feedback)
    logger.debug(
        "Feedback %s for %s: %d -> %d candidates",
        tuple(feedback), format_code(session.current_guess), before, len(session.candidates),
    )

    if not session.candidates:
        session.status = "contradiction"
        logger.info("No code fits the feedback after %d attempt(s)", session.attempts)
        return Contradiction()

    session.pending = True
    return None


def advance(
    session: Session,
    rng: Optional[random.Random] = None,
    full_search_threshold: int = FULL_SEARCH_THRESHOLD,
    sample_size: int = SAMPLE_SIZE,
) -> NextGuess:
    """Second phase: compute the next guess and count the new attempt."""
    if session.status != "in_progress":
        raise SessionFinished(f"Session already finished ({session.status}).")

    guess = select_next_guess(
        session.candidates,
        rng=rng,
        full_search_threshold=full_search_threshold,
        sample_size=sample_size,
    )
    session.current_guess = guess
    session.attempts += 1
    session.pending = False
    return NextGuess(guess=guess, attempts=session.attempts)


class Solver:
    """
    One game at a time: start() -> submit(...) ... -> Won | Contradiction.

    Pass `seed` (or set SOLVER_SEED) to make sampled guess selection
    reproducible; by default it differs from run to run.
    """

    def __init__(
        self,
        full_search_threshold: int = FULL_SEARCH_THRESHOLD,
        sample_size: int = SAMPLE_SIZE,
        seed: Optional[int] = SOLVER_SEED,
    ) -> None:
        self.full_search_threshold = full_search_threshold
        self.sample_size = sample_size
        self.rng = random.Random(seed)
        self.session: Session = new_session()

    def start(self) -> Code:
        self.session = new_session()
        return self.session.current_guess

    def restart(self) -> Code:
        return self.start()

    def apply_feedback(self, digits_matched: int, positions_matched: int) -> Optional[Outcome]:
        return apply_feedback(self.session, digits_matched, positions_matched)

    def advance(self) -> NextGuess:
        return advance(
            self.session,
            rng=self.rng,
            full_search_threshold=self.full_search_threshold,
            sample_size=self.sample_size,
        )

    def submit(self, digits_matched: int, positions_matched: int) -> Outcome:
        outcome = self.apply_feedback(digits_matched, positions_matched)
        if outcome is not None:
            return outcome
        return self.advance()


def play(secret: Code, solver: Optional[Solver] = None) -> Outcome:
    """
    Self-play: answer the solver's guesses honestly until it finds `secret`.
    The transcript is left in `solver.session.history`.
    """
    solver = solver if solver is not None else Solver()
    guess = solver.start()
    while True:
        feedback = compare(guess, secret)
        outcome = solver.submit(feedback.digits_matched, feedback.positions_matched)
        if not isinstance(outcome, NextGuess):
            return outcome
        guess = outcome.guess
