import pytest

from motescript.Mote import UdpClient, UdpServer
from motescript.RadioMedium import Radio, RadioMedium
from motescript.RunState import ReceptionState
from motescript.Simulation import Simulation
from motescript.TestLog import TestLog


def test_events_run_in_time_then_fifo_order():
    sim = Simulation()
    order = []
    sim.schedule(20, lambda: order.append("b"))
    sim.schedule(10, lambda: order.append("a"))
    sim.schedule(20, lambda: order.append("c"))

    assert sim.run() == 20
    assert order == ["a", "b", "c"]


def test_run_until_leaves_later_events_queued():
    sim = Simulation()
    fired = []
    sim.schedule(100, lambda: fired.append(1))
    sim.run(until_ms=50)

    assert fired == []
    assert sim.now == 50
    assert sim.pending == 1


def test_schedule_in_past_rejected():
    with pytest.raises(ValueError):
        Simulation().schedule(-1, lambda: None)


def test_emit_reaches_listeners_in_order():
    sim = Simulation()
    seen = []
    sim.add_listener(lambda mote, msg: seen.append((mote.id, msg)))
    sim.get_mote(4).log("hello")
    sim.get_mote(2).log("world")

    assert seen == [(4, "hello"), (2, "world")]


def test_radio_medium_mutations():
    medium = RadioMedium(seed=1)
    medium.add_link(1, 3, 0.8)
    a, b = Radio(1), Radio(3)

    medium.deteriorate_link(a, b)
    assert medium.link_quality(3, 1) == 0.0
    assert not medium.transmit(a, b)

    medium.improve_link(b, a)
    assert medium.link_quality(1, 3) == 0.8
    assert [m[1] for m in medium.mutations] == ["deteriorate", "improve"]


def test_radio_medium_creates_unknown_links():
    medium = RadioMedium(seed=1)
    medium.deteriorate_link(Radio(5), Radio(6))
    assert medium.has_link(5, 6)
    assert medium.get_link(6, 5).deteriorated


def test_transmit_without_link_fails():
    medium = RadioMedium(seed=1)
    assert not medium.transmit(Radio(1), Radio(2))


def test_add_link_rejects_bad_prr():
    with pytest.raises(ValueError):
        RadioMedium().add_link(1, 2, 1.5)


def test_transmit_is_reproducible():
    draws = []
    for _ in range(2):
        medium = RadioMedium(seed=42)
        medium.add_link(1, 2, 0.5)
        draws.append([medium.transmit(Radio(1), Radio(2)) for _ in range(50)])
    assert draws[0] == draws[1]
    assert any(draws[0]) and not all(draws[0])


def test_client_falls_back_to_relay():
    sim = Simulation(seed=3)
    server = sim.add_mote(1, UdpServer())
    sim.add_mote(2)
    client = UdpClient(counter_limit=3, relay_id=2, report_progress=False)
    sim.add_mote(3, client)
    sim.radio_medium.add_link(1, 2)
    sim.radio_medium.add_link(2, 3)
    lines = []
    sim.add_listener(lambda mote, msg: lines.append((mote.id, msg)))

    sim.boot_all()
    sim.run()

    assert client.finished
    assert client.sent == 3
    assert client.delivered == 3
    assert server.firmware.received == 3
    assert (1, "received 3") in lines
    assert lines[-1] == (3, "done")


def test_client_progress_markers():
    sim = Simulation(seed=3)
    sim.add_mote(1, UdpServer())
    sim.add_mote(3, UdpClient(counter_limit=9))
    sim.radio_medium.add_link(1, 3)
    lines = []
    sim.add_listener(lambda mote, msg: lines.append(msg))

    sim.boot_all()
    sim.run()

    assert lines.index("1 third") == lines.index("received 3") + 1
    assert lines.index("2 thirds") == lines.index("received 6") + 1
    assert lines[-1] == "done"


def test_reception_state_success():
    state = ReceptionState()
    assert not state.success
    state.record(1)
    assert state.success
    assert state.record(4) == 2
    assert not state.success


def test_test_log_verdicts():
    log = TestLog(echo=False)
    assert log.verdict is None
    log.test_ok()
    log.test_failed("late")
    assert log.passed
    log.log("a\n")
    log.log("b\n")
    assert log.text == "a\nb\n"
