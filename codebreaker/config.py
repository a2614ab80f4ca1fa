"""
Single place to:
- Read solver and service settings from env
- Fall back to sensible defaults when a setting is absent

Why: centralizing this keeps tuning consistent and testable.
"""

import os
from typing import Optional

from dotenv import load_dotenv

# 1) Load env vars from .env if present
# dev convenience; in prod the platform injects env vars
load_dotenv()


def _int_setting(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.")


def _float_setting(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.")


APP_ENV = os.getenv("APP_ENV", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 2) Guess-selection tuning.
#    Candidate sets at or below the threshold are searched exhaustively;
#    above it, a random sample of SAMPLE_SIZE guesses is scored instead.
FULL_SEARCH_THRESHOLD = _int_setting("SOLVER_FULL_SEARCH_THRESHOLD", 1200)
SAMPLE_SIZE = _int_setting("SOLVER_SAMPLE_SIZE", 800)

# 3) Optional seed. Unset = sampling differs run to run.
SOLVER_SEED = _int_setting("SOLVER_SEED", None)

# 4) random.org is only used for self-play secrets; keep it quick.
RANDOM_ORG_TIMEOUT = _float_setting("RANDOM_ORG_TIMEOUT", 3.0)

if FULL_SEARCH_THRESHOLD < 1 or SAMPLE_SIZE < 1:
    raise RuntimeError(
        "SOLVER_FULL_SEARCH_THRESHOLD and SOLVER_SAMPLE_SIZE must be positive."
    )
