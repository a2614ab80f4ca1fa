"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Feedback is checked here first, so bad input never reaches the solver.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .codespace import is_valid_code
from .types import DriverStatus as Status

# 1. Represents response when a new session is started (or restarted)
class NewSessionResponse(BaseModel):
    session_id: str = Field(..., description="Unique ID for the solver session")
    guess: List[int] = Field(..., description="The solver's opening guess")
    attempts: int = Field(..., description="Guesses made so far, including this one")
    status: Status = Field(..., description="Current state of the session")

# 2. Validates the player's feedback for the current guess
class FeedbackRequest(BaseModel):
    digits_matched: int = Field(..., ge=0, le=4, description="Guess digits that appear anywhere in your secret")
    positions_matched: int = Field(..., ge=0, le=4, description="Guess digits in exactly the right place")

    @model_validator(mode="after")
    def positions_within_digits(self) -> "FeedbackRequest":
        """A digit in the right place is also a matched digit."""
        if self.positions_matched > self.digits_matched:
            raise ValueError("Positions matched can't be greater than digits matched.")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                { "digits_matched": 2, "positions_matched": 0 },
                { "digits_matched": 4, "positions_matched": 4 },   # solved
            ]
        }
    }

# 3. Describes one round of the session
class TurnOut(BaseModel):
    guess: List[int] = Field(..., description="The solver's guess")
    digits_matched: int = Field(..., description="Digits present anywhere in the secret")
    positions_matched: int = Field(..., description="Digits in the correct position")

# 4. Represents the overall state of a session
class SessionState(BaseModel):
    session_id: str = Field(..., description="Unique ID for the solver session")
    status: Status = Field(..., description="Current state of the session")
    guess: List[int] = Field(..., description="Current guess (the secret once won)")
    attempts: int = Field(..., description="Guesses made so far")
    remaining: int = Field(..., description="Codes still consistent with all feedback")
    history: List[TurnOut] = Field(..., description="Every guess answered so far")

# 5. Result of submitting feedback
class FeedbackResponse(BaseModel):
    status: Status = Field(..., description="Current state of the session")
    guess: Optional[List[int]] = Field(None, description="Next guess, or the secret once won")
    attempts: int = Field(..., description="Guesses made so far")
    remaining: int = Field(..., description="Codes still consistent with all feedback")
    note: Optional[str] = Field(None, description="Extra note (ex. 'No code fits that feedback.')")

# 6. Response schema for scoreboard
class StatsOut(BaseModel):
    sessions_started: int = Field(..., description="Sessions started (restarts included)")
    sessions_solved: int = Field(..., description="Sessions that ended with the secret found")
    contradictions: int = Field(..., description="Sessions that ended with no consistent code")
    restarts: int = Field(..., description="Sessions restarted")

    average_attempts_to_win: Optional[float] = Field(
        None, description="Average number of guesses used in solved sessions"
    )
    fastest_win_attempts: Optional[int] = Field(
        None, description="Fewest guesses taken to solve a session"
    )
    slowest_win_attempts: Optional[int] = Field(
        None, description="Most guesses taken to solve a session"
    )

# 7. Self-play: let the solver crack a known (or random) secret
class SimulateRequest(BaseModel):
    secret: Optional[List[int]] = Field(
        None, description="4 distinct digits 0..9; omit to draw a random secret"
    )

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, secret: Optional[List[int]]) -> Optional[List[int]]:
        if secret is not None and not is_valid_code(secret):
            raise ValueError("Secret must be 4 distinct digits between 0 and 9.")
        return secret

    model_config = {
        "json_schema_extra": {
            "examples": [
                { "secret": [5, 3, 9, 1] },
                {},                            # random secret
            ]
        }
    }

class SimulateResponse(BaseModel):
    secret: List[int] = Field(..., description="The secret the solver played against")
    status: Status = Field(..., description="How the game ended")
    attempts: int = Field(..., description="Guesses used")
    history: List[TurnOut] = Field(..., description="Every guess with its feedback")
