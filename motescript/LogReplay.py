"""
LogReplay: feed a recorded mote log through a test script

Simulator log exports hold one event per line:

    <time>\tID:<mote>\t<message>

where <time> is either integer milliseconds ("600123") or a clock value
("10:00.123", "1:10:00.123"). Replaying such a file lets a script be
re-checked offline against a previous run.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

import re
from dataclasses import dataclass
from typing import Iterable, List

_LINE_RE = re.compile(r"^\s*(?P<time>[0-9:.]+)\s+ID:(?P<id>\d+)\s(?P<msg>.*)$")


class LogFormatError(ValueError):
    def __init__(self, lineno: int, line: str, reason: str):
        super().__init__(f"line {lineno}: {reason}: {line!r}")
        self.lineno = lineno
        self.line = line


@dataclass
class LogEvent:
    time_ms: int
    mote_id: int
    msg: str


def parse_time(text: str) -> int:
    """
    Convert a log timestamp to milliseconds.

    Args:
        text: "123456", "MM:SS.mmm" or "HH:MM:SS.mmm"

    Returns:
        Milliseconds since simulation start
    """
    if ":" not in text:
        return int(text)
    parts = text.split(":")
    if len(parts) > 3:
        raise ValueError(f"too many fields in {text!r}")
    seconds = float(parts[-1])
    minutes = int(parts[-2])
    hours = int(parts[-3]) if len(parts) == 3 else 0
    return int(round(((hours * 60 + minutes) * 60 + seconds) * 1000))


def parse_log(lines: Iterable[str]) -> List[LogEvent]:
    """
    Parse log export lines into events.

    Blank lines are skipped. The message field keeps its inner whitespace;
    only the trailing newline is stripped.

    Raises:
        LogFormatError: a non-blank line does not match the export format
    """
    events = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        m = _LINE_RE.match(line)
        if m is None:
            raise LogFormatError(lineno, line, "expected '<time>\\tID:<n>\\t<message>'")
        try:
            time_ms = parse_time(m.group("time"))
        except ValueError as e:
            raise LogFormatError(lineno, line, f"bad timestamp ({e})") from None
        events.append(LogEvent(time_ms, int(m.group("id")), m.group("msg")))
    return events


def load_log(path) -> List[LogEvent]:
    with open(path, "r") as f:
        return parse_log(f)


def schedule_replay(sim, events: Iterable[LogEvent]) -> int:
    """
    Schedule every event as a log line of its mote at its timestamp.

    Motes are created on demand. Events with equal timestamps keep file
    order.

    Returns:
        Number of events scheduled
    """
    count = 0
    for event in events:
        mote = sim.get_mote(event.mote_id)
        sim.schedule_at(event.time_ms, lambda m=mote, msg=event.msg: m.log(msg))
        count += 1
    return count
