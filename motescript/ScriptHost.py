"""
ScriptHost: execution context for event-driven test scripts

A test script never drives the simulation itself. The host attaches it to a
Simulation, hands it each mote log line in order, fires its timeout, and
settles the verdict when the run ends.

Script protocol:
    setup(host)        called once before the first message; registers the
                       timeout through host.register_timeout()
    handle(mote, msg)  called per log line; returning True ends the script
    timeout_action     the callable passed to register_timeout, run on expiry

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from typing import Callable, Optional
from motescript.TestLog import TestLog


class ScriptHost:
    def __init__(self, sim, script, log: Optional[TestLog] = None):
        """
        Bind script to sim.

        Attributes:
            msg: Log line currently being handled
            mote: Mote that emitted msg
            finished: True once the script loop exited or timed out
            timed_out: True if the run ended through the timeout
            error: Exception raised by the script, if any
        """
        self.sim = sim
        self.script = script
        self.log = log if log is not None else TestLog()
        self.log.clock = lambda: self.sim.now
        self.msg: Optional[str] = None
        self.mote = None
        self.finished = False
        self.timed_out = False
        self.error: Optional[Exception] = None
        self._timeout_registered = False
        sim.add_listener(self._on_message)

    @property
    def radio_medium(self):
        return self.sim.radio_medium

    @property
    def time(self) -> int:
        return self.sim.now

    def register_timeout(self, duration_ms: int, action: Optional[Callable[[], None]] = None) -> None:
        """
        Register the script deadline.

        Args:
            duration_ms: Simulated milliseconds from now until expiry
            action: Evaluated on expiry, before the run ends
        """
        if self._timeout_registered:
            raise RuntimeError("script registered more than one timeout")
        self._timeout_registered = True

        def _expire():
            if self.finished:
                return
            self.timed_out = True
            print(f"[host] timeout after {duration_ms}ms")
            if action is not None:
                self._guard(action)
            self._finish()

        self.sim.schedule(duration_ms, _expire)

    def start(self) -> None:
        self._guard(lambda: self.script.setup(self))

    def _on_message(self, mote, msg: str) -> None:
        if self.finished:
            return
        self.mote = mote
        self.msg = msg
        done = self._guard(lambda: self.script.handle(mote, msg))
        if done and not self.finished:
            self._finish()

    def _guard(self, fn):
        try:
            return fn()
        except Exception as e:
            self.error = e
            print(f"❌ Script failed on {self.msg!r}: {e}")
            self.log.test_failed(f"{type(e).__name__}: {e}")
            self.finished = True
            self.sim.stop()
            raise

    def _finish(self) -> None:
        self.finished = True
        if self.log.verdict is None:
            self.log.test_failed("timeout" if self.timed_out else "script ended without test_ok")
        self.sim.stop()

    def run(self) -> TestLog:
        """
        Start the script and run the simulation to the end of the test.

        Returns:
            The TestLog carrying the verdict
        """
        self.start()
        self.sim.run()
        if not self.finished:
            # queue drained before the deadline
            self.log.test_failed("simulation ended before the script finished")
            self.finished = True
        return self.log
