import pytest

from motescript.Config import Config
from motescript.Messages import MalformedMessageError
from motescript.Scripts import LinkFaultScript, ReceptionLossScript, UnboundEndpointError
from motescript.TestLog import FAILED, PASSED


def feed(sim, mote_id, *lines):
    mote = sim.get_mote(mote_id)
    for line in lines:
        mote.log(line)


# ---------------------------------------------------------------------------
# Reception-loss counter
# ---------------------------------------------------------------------------

def test_contiguous_counters_lose_nothing(sim, attach):
    script = ReceptionLossScript()
    attach(script)

    feed(sim, 1, *[f"received {n}" for n in range(1, 21)])

    assert script.state.lost_counters == 0
    assert script.state.last_counter == 20
    assert script.state.received == 20


def test_single_gap_counts_one_loss(sim, attach):
    script = ReceptionLossScript()
    host = attach(script)

    feed(sim, 1, "received 1", "received 2", "received 3", "received 4", "received 6")
    assert script.state.lost_counters == 1

    feed(sim, 1, *[f"received {n}" for n in range(7, 11)])
    assert script.state.lost_counters == 1
    assert host.log.lines[4] == "6 1 4\n"


def test_trace_line_format(sim, attach):
    script = ReceptionLossScript()
    host = attach(script)

    feed(sim, 1, "received 3", "hello", "received 4")

    # counter, cumulative loss, previous counter
    assert host.log.lines == ["3 2 0\n", "4 2 3\n"]


def test_no_reception_fails_at_timeout(sim, attach):
    script = ReceptionLossScript()
    host = attach(script)

    feed(sim, 1, "1 started", "nothing to see")
    sim.run()

    assert host.timed_out
    assert sim.now == Config.RECEPTION_TIMEOUT_MS
    assert not script.state.success
    assert host.log.verdict == FAILED


def test_clean_reception_passes_only_at_timeout(sim, attach):
    script = ReceptionLossScript()
    host = attach(script)

    feed(sim, 1, "received 1", "received 2")
    assert host.log.verdict is None

    sim.run()
    assert host.log.verdict == PASSED


def test_loss_fails_at_timeout(sim, attach):
    script = ReceptionLossScript(timeout_ms=5000)
    host = attach(script)

    feed(sim, 1, "received 1", "received 3")
    sim.run()

    assert sim.now == 5000
    assert host.log.verdict == FAILED


def test_out_of_order_never_reduces_loss(sim, attach):
    script = ReceptionLossScript()
    attach(script)

    feed(sim, 1, "received 1", "received 4", "received 2", "received 2")

    assert script.state.lost_counters == 2
    assert script.state.out_of_order == 2
    assert script.state.last_counter == 2


def test_malformed_received_line_fails_run(sim, attach):
    script = ReceptionLossScript()
    host = attach(script)

    with pytest.raises(MalformedMessageError):
        feed(sim, 1, "received many")

    assert host.log.verdict == FAILED
    assert sim.stopped
    assert isinstance(host.error, MalformedMessageError)


# ---------------------------------------------------------------------------
# Link-fault controller
# ---------------------------------------------------------------------------

def test_third_deteriorates_bound_link(sim, attach):
    script = LinkFaultScript()
    attach(script)

    feed(sim, 1, "1 started")
    feed(sim, 3, "3 started")
    feed(sim, 3, "1 third")

    assert sim.radio_medium.mutations == [(0, "deteriorate", 1, 3)]
    assert script.state.mote1 is sim.motes[1]
    assert script.state.mote3 is sim.motes[3]
    assert script.state.degraded
    assert sim.radio_medium.link_quality(1, 3) == Config.DETERIORATED_PRR


def test_two_thirds_restores_after_deterioration(sim, attach):
    script = LinkFaultScript()
    attach(script)
    sim.radio_medium.add_link(1, 3, 0.9)

    feed(sim, 1, "1 started")
    feed(sim, 3, "3 started", "1 third", "2 thirds")

    actions = [m[1] for m in sim.radio_medium.mutations]
    assert actions == ["deteriorate", "improve"]
    assert script.state.improve_calls == 1
    assert sim.radio_medium.link_quality(1, 3) == 0.9


def test_done_ends_loop(sim, attach):
    script = LinkFaultScript()
    host = attach(script)

    feed(sim, 1, "1 started")
    feed(sim, 3, "3 started", "done", "1 third", "2 thirds")

    assert host.finished
    assert host.log.verdict == PASSED
    assert sim.radio_medium.mutations == []
    assert sim.stopped


def test_unmatched_lines_are_logged(sim, attach):
    script = LinkFaultScript()
    host = attach(script)

    feed(sim, 1, "received 5", "2 started", "Became reachable")

    assert host.log.lines == ["received 5\n", "Became reachable\n"]
    assert script.state.mote1 is None
    assert script.state.logged == 2


def test_third_before_endpoints_bound(sim, attach):
    script = LinkFaultScript()
    host = attach(script)

    feed(sim, 1, "1 started")
    with pytest.raises(UnboundEndpointError):
        feed(sim, 1, "1 third")
    assert host.log.verdict == FAILED


def test_link_fault_timeout_fails_explicitly(sim, attach):
    script = LinkFaultScript(timeout_ms=60000)
    host = attach(script)

    feed(sim, 1, "1 started")
    sim.run()

    assert host.timed_out
    assert host.log.verdict == FAILED
    assert "done" in host.log.failure_reason
