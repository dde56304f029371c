"""
Scripts: the link-fault controller and reception-loss counter test scripts

Both scripts are message handlers run by a ScriptHost. They keep their
state in a per-run RunState object and talk to the outside world only
through the host: its log sink, its timeout, and the radio medium of the
mote that emitted the current line.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from motescript.Config import Config
from motescript.Messages import LinkFaultKind, classify_link_fault, parse_received, started_endpoint
from motescript.RunState import LinkFaultState, ReceptionState


class UnboundEndpointError(RuntimeError):
    """A link keyword arrived before both link endpoints announced themselves."""


class LinkFaultScript:
    """
    Degrades and restores the link between motes 1 and 3 on cue.

    "1 third" deteriorates the link, "2 thirds" restores it, "done" passes
    the test. The "started" lines bind the two endpoints; every other line
    is copied to the log. Without "done" the run fails at the 2h deadline.
    """
    name = "link-fault"

    def __init__(self, timeout_ms: int = None):
        self.timeout_ms = Config.LINK_FAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.state = LinkFaultState()
        self.host = None

    def setup(self, host) -> None:
        self.host = host
        host.register_timeout(self.timeout_ms, self._on_timeout)

    def _on_timeout(self) -> None:
        self.host.log.test_failed(f"no '{Config.KW_DONE}' within {self.timeout_ms}ms")

    def _radios(self, keyword: str):
        if not self.state.endpoints_bound:
            raise UnboundEndpointError(
                f"'{keyword}' before motes 1 and 3 started "
                f"(mote1={self.state.mote1}, mote3={self.state.mote3})")
        return self.state.mote1.radio, self.state.mote3.radio

    def handle(self, mote, msg: str) -> bool:
        kind = classify_link_fault(msg)

        if kind is LinkFaultKind.DONE:
            self.host.log.test_ok()
            return True

        if kind is LinkFaultKind.DETERIORATE:
            radio1, radio3 = self._radios(Config.KW_DETERIORATE)
            mote.simulation.radio_medium.deteriorate_link(radio1, radio3)
            self.state.deteriorate_calls += 1
            self.state.degraded = True
        elif kind is LinkFaultKind.IMPROVE:
            radio1, radio3 = self._radios(Config.KW_IMPROVE)
            mote.simulation.radio_medium.improve_link(radio1, radio3)
            self.state.improve_calls += 1
            self.state.degraded = False
        elif kind is LinkFaultKind.STARTED:
            endpoint = started_endpoint(msg)
            if endpoint == 1:
                self.state.mote1 = mote
            elif endpoint == 3:
                self.state.mote3 = mote
        else:
            self.host.log.log(msg + "\n", mote_id=mote.id)
            self.state.logged += 1
        return False


class ReceptionLossScript:
    """
    Counts sequence numbers skipped between "received <n>" lines.

    Nothing is decided before the deadline: at expiry the test passes if at
    least one counter arrived and none were lost.
    """
    name = "reception"

    def __init__(self, timeout_ms: int = None):
        self.timeout_ms = Config.RECEPTION_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.state = ReceptionState()
        self.host = None
        self.collector = None

    def setup(self, host) -> None:
        self.host = host
        host.register_timeout(self.timeout_ms, self._on_timeout)

    def _on_timeout(self) -> None:
        if self.state.success:
            self.host.log.test_ok()

    def handle(self, mote, msg: str) -> bool:
        counter = parse_received(msg)
        if counter is None:
            return False

        previous = self.state.last_counter
        gap = self.state.record(counter)
        self.host.log.log(f"{counter} {self.state.lost_counters} {previous}\n", mote_id=mote.id)
        if self.collector is not None:
            self.collector.record_reception(self.host.time, counter,
                                            self.state.lost_counters, previous, gap)
        return False


SCRIPTS = {
    LinkFaultScript.name: LinkFaultScript,
    ReceptionLossScript.name: ReceptionLossScript,
}
