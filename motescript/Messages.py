"""
Messages: explicit classification of mote log lines

Mote firmware reports progress through plain log lines. This module turns
those lines into message kinds so the test scripts dispatch on an enum
instead of scattering substring checks through their loops.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from enum import Enum
from typing import Optional
from motescript.Config import Config


class MalformedMessageError(ValueError):
    """A log line matched a known prefix but its fields could not be parsed."""


class LinkFaultKind(Enum):
    DONE = "done"
    DETERIORATE = "deteriorate"
    IMPROVE = "improve"
    STARTED = "started"
    OTHER = "other"


# priority order, first match wins
_LINK_FAULT_KEYWORDS = (
    (Config.KW_DONE, LinkFaultKind.DONE),
    (Config.KW_DETERIORATE, LinkFaultKind.DETERIORATE),
    (Config.KW_IMPROVE, LinkFaultKind.IMPROVE),
    (Config.KW_STARTED, LinkFaultKind.STARTED),
)


def classify_link_fault(msg: str) -> LinkFaultKind:
    """
    Classify a log line for the link-fault controller.

    Matching is a case-sensitive substring test, so "2 thirds" never
    shadows "1 third" and any line mentioning "done" ends the run.

    Args:
        msg: Raw log line emitted by a mote

    Returns:
        The first LinkFaultKind whose keyword occurs in msg, else OTHER
    """
    for keyword, kind in _LINK_FAULT_KEYWORDS:
        if keyword in msg:
            return kind
    return LinkFaultKind.OTHER


def started_endpoint(msg: str) -> Optional[int]:
    """
    Return which link endpoint (1 or 3) a "started" line announces.

    Args:
        msg: Raw log line, already classified as STARTED

    Returns:
        1, 3, or None if neither endpoint is mentioned
    """
    if "1 " + Config.KW_STARTED in msg:
        return 1
    if "3 " + Config.KW_STARTED in msg:
        return 3
    return None


def parse_received(msg: str) -> Optional[int]:
    """
    Parse a "received <counter>" line.

    The counter token must be a whole decimal integer. Tokens with a
    numeric prefix such as "4.5" or "7abc" are rejected rather than
    truncated to their leading digits.

    Args:
        msg: Raw log line emitted by a mote

    Returns:
        The sequence counter, or None for lines without the prefix

    Raises:
        MalformedMessageError: prefix present but no integer second token
    """
    if not msg.startswith(Config.KW_RECEIVED):
        return None
    fields = msg.split()
    if len(fields) < 2:
        raise MalformedMessageError(f"missing counter in {msg!r}")
    try:
        return int(fields[1])
    except ValueError:
        raise MalformedMessageError(f"bad counter {fields[1]!r} in {msg!r}") from None
