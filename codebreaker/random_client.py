"""
- HTTP call with clear fallback
Get a random secret (4 distinct digits 0..9) from random.org's sequence generator.
If anything goes wrong (no internet, timeout, bad response), we fall back to a
local secure random generator so self-play still works.
"""

import logging
from random import SystemRandom
from typing import List

import requests

from .codespace import CODE_LENGTH, is_valid_code
from .config import RANDOM_ORG_TIMEOUT

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/sequences/"


def fetch_secret() -> List[int]:
    # random.org shuffles 0..9 for us; the first four values are distinct
    params = {
        "min": 0,          # smallest value in the sequence
        "max": 9,          # largest value in the sequence
        "col": 1,          # one number per line
        "format": "plain", # plain text response
        "rnd": "new",      # always generate a new shuffle
    }

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=RANDOM_ORG_TIMEOUT)

        # If the response was not 200 OK, this will raise an error
        response.raise_for_status()

        # The body looks like:
        #   7\n0\n3\n9\n...
        values = [int(line) for line in response.text.splitlines() if line.strip() != ""]

        if len(values) < CODE_LENGTH:
            raise ValueError(f"random.org returned {len(values)} values, expected at least {CODE_LENGTH}.")

        digits = values[:CODE_LENGTH]
        if not is_valid_code(digits):
            raise ValueError(f"random.org returned an unusable sequence: {digits}.")

        return digits

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local secure random", exc)
        return SystemRandom().sample(range(10), CODE_LENGTH)
