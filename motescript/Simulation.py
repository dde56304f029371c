"""
Simulation: discrete-event host for motes and test scripts

This module implements the event scheduler that drives a MOTE-SCRIPT run.
It plays the part of the network simulator: it owns the motes and the radio
medium, advances simulated time, and forwards every mote log line to the
attached listeners (normally a ScriptHost).

Key Responsibilities:
    - Event Scheduling: heap-ordered callbacks in integer milliseconds, FIFO
      among events due at the same instant
    - Mote Registry: creates motes on demand and binds their radios to the
      shared radio medium
    - Log Fan-out: mote output is delivered synchronously, in emission order

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

import heapq
import itertools
import random
from typing import Callable, Dict, List, Optional
from motescript.Config import Config
from motescript.Mote import Mote
from motescript.RadioMedium import RadioMedium


class Simulation:
    def __init__(self, seed: Optional[int] = None):
        """
        Initialize an empty simulation.

        Attributes:
            now: Current simulated time in milliseconds
            motes: Mote id -> Mote
            radio_medium: Shared RadioMedium seeded from seed
            rng: Firmware timing jitter source, seeded from seed
            listeners: Callables invoked as listener(mote, msg) per log line
            _queue: Heap of (time, seq, callback) entries
        """
        self.seed = Config.SEED if seed is None else seed
        self.now = 0
        self.motes: Dict[int, Mote] = {}
        self.radio_medium = RadioMedium(seed=self.seed, sim=self)
        self.listeners: List[Callable] = []
        self._queue = []
        self._seq = itertools.count()
        self.rng = random.Random(self.seed)
        self._stopped = False
        self.events_processed = 0

    def add_mote(self, mote_id: int, firmware=None) -> Mote:
        if mote_id in self.motes:
            raise ValueError(f"mote {mote_id} already exists")
        mote = Mote(mote_id, self)
        self.motes[mote_id] = mote
        if firmware is not None:
            mote.install(firmware)
        return mote

    def get_mote(self, mote_id: int) -> Mote:
        """Return mote mote_id, creating a bare mote if it does not exist yet."""
        if mote_id not in self.motes:
            return self.add_mote(mote_id)
        return self.motes[mote_id]

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        if delay_ms < 0:
            raise ValueError(f"cannot schedule {delay_ms}ms in the past")
        heapq.heappush(self._queue, (self.now + int(delay_ms), next(self._seq), callback))

    def schedule_at(self, time_ms: int, callback: Callable[[], None]) -> None:
        self.schedule(max(0, int(time_ms) - self.now), callback)

    def add_listener(self, listener: Callable) -> None:
        self.listeners.append(listener)

    def emit(self, mote: Mote, msg: str) -> None:
        for listener in list(self.listeners):
            listener(mote, msg)

    def boot_all(self) -> None:
        """Boot every mote with firmware, staggered by Config.BOOT_INTERVAL_MS."""
        for mote_id, mote in sorted(self.motes.items()):
            if mote.firmware is not None:
                self.schedule(Config.BOOT_INTERVAL_MS * mote_id, mote.boot)

    def stop(self) -> None:
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def step(self) -> bool:
        """
        Run the next pending event.

        Returns:
            False once the simulation is stopped or the queue is empty
        """
        if self._stopped or not self._queue:
            return False
        time_ms, _, callback = heapq.heappop(self._queue)
        self.now = time_ms
        callback()
        self.events_processed += 1
        return True

    def run(self, until_ms: Optional[int] = None) -> int:
        """
        Process events until stop(), queue exhaustion, or until_ms.

        Args:
            until_ms: Optional absolute time bound; events scheduled later
                stay queued

        Returns:
            Simulated time at which the run ended
        """
        while not self._stopped and self._queue:
            if until_ms is not None and self._queue[0][0] > until_ms:
                self.now = until_ms
                break
            self.step()
        return self.now

    @property
    def pending(self) -> int:
        return len(self._queue)
