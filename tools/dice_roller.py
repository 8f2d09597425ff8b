"""
Dice Roller — the !dice percentile roll.

roll_d100() is what the bot uses: a uniform integer in [1, 100].

legacy_d100() reproduces the old mapping from a signed 32-bit value:
truncating remainder by 100, plus one, then absolute value. It is kept for
anyone who needs to match historical output. Its range is [0, 100] (any
raw ending in -1 maps to 0) and it is not uniform.
"""

import random
import logging
from typing import Optional

logger = logging.getLogger("DiceRoller")

DICE_MIN = 1
DICE_MAX = 100

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


def roll_d100(rng: Optional[random.Random] = None) -> int:
    """Uniform roll in [1, 100]."""
    return (rng or random).randint(DICE_MIN, DICE_MAX)


def legacy_d100(raw: Optional[int] = None) -> int:
    """Map a signed 32-bit value the way the old bot did.

    |(raw rem 100) + 1|, where rem truncates toward zero, so the sign of
    the remainder follows raw. -1 -> 0, -5 -> 4, -(2**31) -> 47.
    """
    if raw is None:
        raw = random.randint(_INT32_MIN, _INT32_MAX)
    rem = abs(raw) % 100
    if raw < 0:
        rem = -rem
    result = abs(rem + 1)
    if result < DICE_MIN:
        logger.warning(f"Legacy roll of {raw} maps to {result}, outside {DICE_MIN}-{DICE_MAX}")
    return result
