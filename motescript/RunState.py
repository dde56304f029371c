"""
RunState: per-run script context

Each test run owns one of these objects instead of sharing module-level
globals, so two scripts (or two runs of the same script) never observe
each other's counters.

"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LinkFaultState:
    """
    Tracks endpoint bindings and link mutations for the link-fault controller.

    Attributes:
        mote1: Mote that announced "1 started", once seen
        mote3: Mote that announced "3 started", once seen
        degraded: Whether the last mutation deteriorated the link
        deteriorate_calls: Number of deteriorate_link invocations
        improve_calls: Number of improve_link invocations
        logged: Count of unmatched lines forwarded to the log sink
    """
    mote1: Optional[object] = None
    mote3: Optional[object] = None
    degraded: bool = False
    deteriorate_calls: int = 0
    improve_calls: int = 0
    logged: int = 0

    @property
    def endpoints_bound(self) -> bool:
        return self.mote1 is not None and self.mote3 is not None


@dataclass
class ReceptionState:
    """
    Tracks sequence counters for the reception-loss counter.

    Attributes:
        last_counter: Last sequence number seen (0 before any reception)
        lost_counters: Cumulative skipped sequence numbers, never decreases
        received: Number of "received" lines processed
        out_of_order: Counters that did not advance past last_counter
    """
    last_counter: int = 0
    lost_counters: int = 0
    received: int = 0
    out_of_order: int = 0

    def record(self, counter: int) -> int:
        """Account for one counter and return the gap it revealed."""
        gap = counter - self.last_counter - 1
        if gap > 0:
            self.lost_counters += gap
        elif gap < 0:
            self.out_of_order += 1
        self.received += 1
        self.last_counter = counter
        return max(gap, 0)

    @property
    def success(self) -> bool:
        return self.last_counter != 0 and self.lost_counters == 0
