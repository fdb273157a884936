"""
Nested run/epoch/trial counters.

A counter tracks its current and previous value plus a flag telling whether
it changed since it was last queried. Consumers poll counters to decide when
to log or test at each time scale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .enums import TimeScale


@dataclass
class Counter:
    """
    A wrapping integer counter.

    Attributes:
        scale: Time scale this counter represents
        cur: Current value
        prv: Previous value (-1 before the first change)
        chg: Whether the value changed since the last query
        max: Wraparound limit; values >= max roll over to 0 (0 disables)
    """

    scale: TimeScale
    cur: int = 0
    prv: int = -1
    chg: bool = False
    max: int = 0

    def init(self):
        """Reset to the initial state: cur 0, no previous value, changed."""
        self.cur = 0
        self.prv = -1
        self.chg = True

    def same(self):
        """Mark the counter as unchanged for the current step."""
        self.chg = False

    def incr(self) -> bool:
        """
        Advance by one.

        Returns:
            bool: True if the counter wrapped around `max` back to 0
        """
        self.chg = True
        self.prv = self.cur
        self.cur += 1
        if self.max > 0 and self.cur >= self.max:
            self.cur = 0
            return True
        return False

    def set(self, cur: int) -> bool:
        """Set the value directly; returns True if it changed."""
        if self.cur == cur:
            self.chg = False
            return False
        self.chg = True
        self.prv = self.cur
        self.cur = cur
        return True

    def peek(self) -> Tuple[int, int, bool]:
        """Return (cur, prv, chg) without clearing the change flag."""
        return self.cur, self.prv, self.chg

    def query(self) -> Tuple[int, int, bool]:
        """Return (cur, prv, chg) and clear the change flag."""
        state = self.peek()
        self.chg = False
        return state
