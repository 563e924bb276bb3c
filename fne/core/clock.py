"""Clock - injectable time source for cache expiry.

Invariants:
    - now() returns wall-clock seconds as float (same unit as time.time())
    - Core modules never call time.time() directly; they receive a Clock

Design Decisions:
    - Protocol over ABC: test clocks need no inheritance
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Structural contract for anything that tells the time in seconds."""
    def now(self) -> float: ...


class SystemClock:
    """Production clock backed by time.time()."""

    def now(self) -> float:
        return time.time()
