"""
TestLog: script log sink and pass/fail signalling

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from typing import List, Optional

PASSED = "PASSED"
FAILED = "FAILED"


class TestLog:
    """
    Append-only log sink handed to test scripts.

    Text written through log() is stored verbatim and echoed to stdout.
    The verdict starts as None and is settled by test_ok() or
    test_failed(); a passed run stays passed.
    """
    # not a pytest test class
    __test__ = False

    def __init__(self, collector=None, echo: bool = True):
        self.lines: List[str] = []
        self.verdict: Optional[str] = None
        self.failure_reason = ""
        self.collector = collector
        self.echo = echo
        self.clock = lambda: 0

    def log(self, text: str, mote_id: int = -1) -> None:
        self.lines.append(text)
        if self.echo:
            print(f"[script] {text}", end="" if text.endswith("\n") else "\n")
        if self.collector is not None:
            self.collector.record_log_line(self.clock(), mote_id, text)

    def test_ok(self) -> None:
        if self.verdict != PASSED:
            print(f"✅ TEST OK at {self.clock()}ms")
        self.verdict = PASSED

    def test_failed(self, reason: str = "") -> None:
        if self.verdict == PASSED:
            return
        self.verdict = FAILED
        self.failure_reason = reason
        print(f"❌ TEST FAILED at {self.clock()}ms: {reason}")

    @property
    def passed(self) -> bool:
        return self.verdict == PASSED

    @property
    def text(self) -> str:
        return "".join(self.lines)
