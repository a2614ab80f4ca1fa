"""
Labels for clarity.
"""

from typing import Literal, Tuple

Digit = int  # 0 -> 9
Code = Tuple[Digit, Digit, Digit, Digit]  # 4 distinct digits
SessionStatus = Literal["in_progress", "won", "contradiction"]
DriverStatus = Literal["in_progress", "computing", "won", "contradiction"]
