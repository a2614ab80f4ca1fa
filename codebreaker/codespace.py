"""
Pure code-space logic (no HTTP, no storage).

A code is 4 distinct digits (0..9), so there are 10*9*8*7 = 5040 of them.
Comparing a guess with a secret gives two feedback numbers:
- digits_matched: how many guess digits appear anywhere in the secret
- positions_matched: how many indices are exactly correct (right digit, right place)

Digits never repeat inside a code, so the presence test per guess index is
the same as standard Mastermind scoring.
"""

from typing import List, NamedTuple, Sequence

from .types import Code

CODE_LENGTH = 4
DIGITS = range(10)


class Feedback(NamedTuple):
    digits_matched: int
    positions_matched: int


def _build_all() -> List[Code]:
    codes = []
    for a in DIGITS:
        for b in DIGITS:
            if b == a:
                continue
            for c in DIGITS:
                if c == a or c == b:
                    continue
                for d in DIGITS:
                    if d == a or d == b or d == c:
                        continue
                    codes.append((a, b, c, d))
    return codes


# Codes are tuples, so one generated universe can be shared by every session
_ALL_CODES: tuple = tuple(_build_all())


def generate_all() -> List[Code]:
    """
    All 5040 codes in ascending lexicographic order:
      (0, 1, 2, 3), (0, 1, 2, 4), ... (9, 8, 7, 6)
    Returns a fresh list each call; the codes inside are shared.
    """
    return list(_ALL_CODES)


def compare(guess: Code, secret: Code) -> Feedback:
    """
    Example:
      guess  = (0, 1, 2, 3)
      secret = (5, 3, 9, 1)
      digits_matched    = 2  (1 and 3 appear in the secret)
      positions_matched = 0  (no digit is in its own place)
    """
    positions = (
        (guess[0] == secret[0])
        + (guess[1] == secret[1])
        + (guess[2] == secret[2])
        + (guess[3] == secret[3])
    )
    # `in` scans the secret in order and stops at the first match
    digits = (
        (guess[0] in secret)
        + (guess[1] in secret)
        + (guess[2] in secret)
        + (guess[3] in secret)
    )
    return Feedback(digits, positions)


# --- Fast scoring for guess selection ---
# Same numbers as compare(), but keyed by a small int and driven by a digit
# bitmask per code, since selection scores up to ~1M (guess, code) pairs.

FEEDBACK_KEYS = 40  # (4 << 3) | 4 is the largest key

_POPCOUNT = tuple(bin(mask).count("1") for mask in range(1 << 10))


def digit_mask(code: Code) -> int:
    return (1 << code[0]) | (1 << code[1]) | (1 << code[2]) | (1 << code[3])


def feedback_key(digits_matched: int, positions_matched: int) -> int:
    return (digits_matched << 3) | positions_matched


def unpack_key(key: int) -> Feedback:
    return Feedback(key >> 3, key & 7)


def score_table(codes: Sequence[Code]) -> List[tuple]:
    """Rows of (d0, d1, d2, d3, digit_mask), built once per search."""
    return [(code[0], code[1], code[2], code[3], digit_mask(code)) for code in codes]


def bucket_counts(guess: Code, table: Sequence[tuple]) -> List[int]:
    """
    How many codes in `table` give each feedback to `guess`.
    Index with feedback_key(); unused keys stay 0.
    """
    g0, g1, g2, g3 = guess
    guess_mask = digit_mask(guess)
    popcount = _POPCOUNT
    counts = [0] * FEEDBACK_KEYS
    for s0, s1, s2, s3, secret_mask in table:
        positions = (g0 == s0) + (g1 == s1) + (g2 == s2) + (g3 == s3)
        counts[(popcount[guess_mask & secret_mask] << 3) | positions] += 1
    return counts


def is_valid_code(code: Sequence[int]) -> bool:
    """True for exactly 4 pairwise-distinct integers in 0..9."""
    if len(code) != CODE_LENGTH:
        return False
    for digit in code:
        if isinstance(digit, bool) or not isinstance(digit, int):
            return False
        if digit < 0 or digit > 9:
            return False
    return len(set(code)) == CODE_LENGTH


def format_code(code: Sequence[int]) -> str:
    return "".join(str(digit) for digit in code)
