'''
Codebreaker API: the solver guesses YOUR secret

Endpoints:
POST /sessions                  -> start a session, get the opening guess
GET  /sessions/{id}             -> read state & history
POST /sessions/{id}/feedback    -> answer the current guess
POST /sessions/{id}/restart     -> start over in the same session

Extras:
GET  /stats                     -> scoreboard
POST /stats/reset               -> reset scoreboard
POST /simulate                  -> watch the solver crack a known secret

Everything lives in memory (SessionStore); nothing is persisted.
'''

import logging

from fastapi import FastAPI, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .codespace import format_code
from .config import APP_ENV, FULL_SEARCH_THRESHOLD, SAMPLE_SIZE, SOLVER_SEED
from .logger import setup_logger
from .random_client import fetch_secret
from .solver import Contradiction, GuessPending, Won, play
from .store import SessionEntry, SessionStore

from .schemas import (
    NewSessionResponse,
    FeedbackRequest,
    FeedbackResponse,
    SessionState,
    TurnOut,
    StatsOut,
    SimulateRequest,
    SimulateResponse,
)

setup_logger()
logger = logging.getLogger(__name__)

app = FastAPI(title="Codebreaker API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# One process-wide registry; each entry owns its own solver session
_store = SessionStore()

def get_store() -> SessionStore:
    return _store

# --- DTO builders ---

def _turns_out(history) -> list:
    return [
        TurnOut(
            guess=list(turn.guess),
            digits_matched=turn.feedback.digits_matched,
            positions_matched=turn.feedback.positions_matched,
        )
        for turn in history
    ]

def _to_state(entry: SessionEntry) -> SessionState:
    session = entry.solver.session
    return SessionState(
        session_id=entry.id,
        status=entry.status,
        guess=list(session.current_guess),
        attempts=session.attempts,
        remaining=entry.remaining,
        history=_turns_out(session.history),
    )

def _to_new_session(entry: SessionEntry) -> NewSessionResponse:
    session = entry.solver.session
    return NewSessionResponse(
        session_id=entry.id,
        guess=list(session.current_guess),
        attempts=session.attempts,
        status=entry.status,
    )

# ---------------- Routes ----------------

@app.post("/sessions", response_model=NewSessionResponse, summary="Start a new solver session")
def start_session(store: SessionStore = Depends(get_store)) -> NewSessionResponse:
    """
    Think of 4 distinct digits (0-9). The solver always opens with 0123.
    """
    return _to_new_session(store.create())

@app.get("/sessions/{session_id}", response_model=SessionState, summary="Get current session state")
def get_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
) -> SessionState:
    entry = store.get(session_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Session not found")
    return _to_state(entry)

@app.post("/sessions/{session_id}/feedback", response_model=FeedbackResponse, summary="Answer the current guess")
async def submit_feedback(
    session_id: str,
    payload: FeedbackRequest,
    store: SessionStore = Depends(get_store),
) -> FeedbackResponse:
    # Phase 1: win check + filtering (fast). Leaves the session "computing"
    # when a new guess is needed.
    try:
        entry, outcome = store.submit_feedback(
            session_id, payload.digits_matched, payload.positions_matched
        )
    except GuessPending as gp:
        raise HTTPException(status_code=409, detail=str(gp))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if not entry:
        raise HTTPException(status_code=404, detail="Session not found")

    note = None
    if outcome is None and entry.status in ("won", "contradiction"):
        note = f"Session {entry.status}. No more feedback accepted; restart to play again."
    elif isinstance(outcome, Won):
        note = f"Solved in {outcome.attempts} attempt(s)."
    elif isinstance(outcome, Contradiction):
        note = "No possible code fits that feedback. Please check for inconsistent feedback."
    elif entry.status == "computing":
        # Phase 2: the search runs in a worker thread so GET /sessions/{id}
        # can report "computing" meanwhile.
        logger.info("Session %s: computing next guess over %d candidates", entry.id, entry.remaining)
        searched = entry.solver.session
        await run_in_threadpool(store.compute_next_guess, session_id)
        if entry.solver.session is not searched:
            note = "Session was restarted while computing; that guess was dropped."

    session = entry.solver.session
    guess = None if entry.status == "contradiction" else list(session.current_guess)
    return FeedbackResponse(
        status=entry.status,
        guess=guess,
        attempts=session.attempts,
        remaining=entry.remaining,
        note=note,
    )

@app.post("/sessions/{session_id}/restart", response_model=NewSessionResponse, summary="Restart a session")
def restart_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
) -> NewSessionResponse:
    entry = store.restart(session_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Session not found")
    return _to_new_session(entry)

@app.get("/stats", response_model=StatsOut, summary="Get scoreboard")
def get_stats(store: SessionStore = Depends(get_store)) -> StatsOut:
    stats = store.get_stats()
    avg = (stats.total_attempts_in_wins / stats.sessions_solved) if stats.sessions_solved > 0 else None
    return StatsOut(
        sessions_started=stats.sessions_started,
        sessions_solved=stats.sessions_solved,
        contradictions=stats.contradictions,
        restarts=stats.restarts,
        average_attempts_to_win=avg,
        fastest_win_attempts=stats.fastest_win_attempts,
        slowest_win_attempts=stats.slowest_win_attempts,
    )

@app.post("/stats/reset", summary="Reset the scoreboard")
def reset_stats(store: SessionStore = Depends(get_store)) -> dict:
    store.reset_stats()
    return {"message": "Stats reset."}

@app.post("/simulate", response_model=SimulateResponse, summary="Let the solver crack a known secret")
def simulate(
    payload: SimulateRequest,
    store: SessionStore = Depends(get_store),
) -> SimulateResponse:
    """
    Self-play. Omit `secret` to draw one from random.org (local fallback).
    Runs in FastAPI's threadpool, so a slow search does not block other requests.
    """
    secret = tuple(payload.secret) if payload.secret is not None else tuple(fetch_secret())

    solver = store.new_solver()
    outcome = play(secret, solver)
    session = solver.session
    logger.info("Self-play on %s ended with %s after %d attempt(s)",
                format_code(secret), type(outcome).__name__, session.attempts)

    return SimulateResponse(
        secret=list(secret),
        status=session.status,
        attempts=session.attempts,
        history=_turns_out(session.history),
    )

# --- Dev convenience: show the solver tuning at startup ---
if APP_ENV == "local":
    @app.on_event("startup")
    def _dev_log_settings():
        logger.info(
            "Solver settings: full search <= %d candidates, sample size %d, seed %s",
            FULL_SEARCH_THRESHOLD, SAMPLE_SIZE, SOLVER_SEED,
        )
