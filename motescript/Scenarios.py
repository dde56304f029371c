"""
Scenarios: reference topologies for the MOTE-SCRIPT test scripts

Network Topology:
    - Weak link: server (1), relay (2) and client (3) fully connected. The
      client reports "1 third" / "2 thirds" / "done" while sending, which
      makes the link-fault controller cut and restore the direct 1<->3
      link; traffic survives through the relay.
    - Reception: server (1) and client (3) on a single link of configurable
      PRR, checked by the reception-loss counter.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from typing import Optional
from motescript.Config import Config
from motescript.LogReplay import schedule_replay
from motescript.Mote import Firmware, UdpClient, UdpServer
from motescript.ScriptHost import ScriptHost
from motescript.Simulation import Simulation
from motescript.TestLog import TestLog


def build_weak_link_scenario(seed: Optional[int] = None, counter_limit: Optional[int] = None) -> Simulation:
    sim = Simulation(seed=seed)
    sim.add_mote(Config.SERVER_ID, UdpServer())
    sim.add_mote(Config.RELAY_ID, Firmware())
    sim.add_mote(Config.CLIENT_ID, UdpClient(counter_limit=counter_limit, relay_id=Config.RELAY_ID))

    medium = sim.radio_medium
    medium.add_link(Config.SERVER_ID, Config.CLIENT_ID, Config.NOMINAL_PRR)
    medium.add_link(Config.SERVER_ID, Config.RELAY_ID, Config.RELAY_PRR)
    medium.add_link(Config.RELAY_ID, Config.CLIENT_ID, Config.RELAY_PRR)
    sim.boot_all()
    return sim


def build_reception_scenario(seed: Optional[int] = None, prr: Optional[float] = None,
                             counter_limit: Optional[int] = None) -> Simulation:
    limit = Config.RECEPTION_COUNTER_LIMIT if counter_limit is None else counter_limit
    sim = Simulation(seed=seed)
    sim.add_mote(Config.SERVER_ID, UdpServer())
    sim.add_mote(Config.CLIENT_ID, UdpClient(counter_limit=limit, report_progress=False))
    sim.radio_medium.add_link(Config.SERVER_ID, Config.CLIENT_ID, prr)
    sim.boot_all()
    return sim


def build_replay(events, seed: Optional[int] = None) -> Simulation:
    sim = Simulation(seed=seed)
    schedule_replay(sim, events)
    return sim


def run_script(script, sim: Simulation, collector=None, echo: bool = True) -> TestLog:
    """
    Run script against sim until the test ends.

    Args:
        script: LinkFaultScript, ReceptionLossScript, or any object with
            the same setup/handle protocol
        sim: Simulation with motes and events already in place
        collector: Optional TraceCollector receiving log lines, reception
            rows and link events
        echo: Print script log lines to stdout

    Returns:
        The TestLog with the final verdict
    """
    log = TestLog(collector=collector, echo=echo)
    if collector is not None:
        sim.radio_medium.collector = collector
        if hasattr(script, "collector"):
            script.collector = collector

    host = ScriptHost(sim, script, log)
    try:
        host.run()
    finally:
        if collector is not None:
            collector.sim_time_end_ms = sim.now
            collector.verdict = log.verdict
    return log
