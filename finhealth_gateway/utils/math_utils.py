"""Numeric helpers shared by the local and remote scorers"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with ties toward +infinity.

    The remote scorer rounds this way; Python's round() uses banker's rounding
    (round(74.5) == 74), which would drift the two scores apart on ties.
    """
    return math.floor(value + 0.5)
