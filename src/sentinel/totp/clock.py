"""
Wall-clock view of TOTP time steps.
"""

import time

from ..config import TIME_STEP


class ClockWindow:
    """
    Maps wall-clock time onto 30-second TOTP steps.

    The clock is any zero-argument callable returning Unix seconds;
    ``time.time`` unless a test pins it.
    """

    def __init__(self, clock=None, step=TIME_STEP):
        self.clock = clock or time.time
        self.step = step

    def now(self) -> int:
        """Current Unix time in whole seconds."""
        return int(self.clock() // 1)

    def current_step(self) -> int:
        """Index of the step containing the current time."""
        return self.now() // self.step

    def remaining_seconds(self) -> int:
        """
        Seconds until the current code rotates, in ``[1, step]``.

        Exactly on a step boundary a full step remains.
        """
        return self.step - (self.now() % self.step)


def remaining_seconds() -> int:
    """Seconds until the current code rotates, read from the system clock."""
    return ClockWindow().remaining_seconds()
