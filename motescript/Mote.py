"""
Mote: simulated wireless sensor node and its firmware

This module implements the motes of the reference scenarios:
- A bare Mote with a radio interface and a log output
- UdpServer firmware that reports every counter it receives
- UdpClient firmware that sends a counter periodically and reports its
  progress ("1 third", "2 thirds", "done") as it goes

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from typing import Optional
from motescript.Config import Config
from motescript.RadioMedium import Radio


class Mote:
    """
    Simulated mote.

    Each mote has:
    - An id unique within its simulation
    - A radio interface registered with the simulation's radio medium
    - Optional firmware started by boot()
    """
    def __init__(self, mote_id: int, simulation):
        self.id = mote_id
        self.simulation = simulation
        self.radio = Radio(mote_id)
        self.firmware: Optional["Firmware"] = None

    def install(self, firmware: "Firmware") -> None:
        self.firmware = firmware
        firmware.mote = self

    def boot(self) -> None:
        if self.firmware is not None:
            self.firmware.on_boot()

    def log(self, msg: str) -> None:
        """Emit one log line to whoever is observing the simulation."""
        self.simulation.emit(self, msg)

    def receive(self, src: "Mote", payload) -> None:
        if self.firmware is not None:
            self.firmware.on_receive(src, payload)

    def __repr__(self):
        return f"Mote({self.id})"


class Firmware:
    """Base class for mote applications."""
    mote: Mote = None

    def on_boot(self) -> None:
        self.mote.log(f"{self.mote.id} {Config.KW_STARTED}")

    def on_receive(self, src: Mote, payload) -> None:
        pass


class UdpServer(Firmware):
    """Sink that logs "received <counter>" for every delivered datagram."""

    def __init__(self):
        self.received = 0

    def on_receive(self, src: Mote, payload) -> None:
        self.received += 1
        self.mote.log(f"{Config.KW_RECEIVED} {payload}")


class UdpClient(Firmware):
    """
    Periodic counter sender.

    After boot, waits Config.CLIENT_START_DELAY_MS, then on every tick
    increments its counter and sends it to the server. Progress markers
    are logged when the counter reaches one third, two thirds, and the
    full counter_limit; the last one ends the application.
    """
    def __init__(self, server_id: int = None, counter_limit: int = None,
                 relay_id: Optional[int] = None, report_progress: bool = True):
        self.server_id = Config.SERVER_ID if server_id is None else server_id
        self.counter_limit = (Config.CLIENT_COUNTER_LIMIT
                              if counter_limit is None else counter_limit)
        self.relay_id = relay_id
        self.report_progress = report_progress
        self.counter = 0
        self.sent = 0
        self.delivered = 0
        self.finished = False

    def on_boot(self) -> None:
        super().on_boot()
        self.mote.simulation.schedule(Config.CLIENT_START_DELAY_MS, self._tick)

    def _next_interval(self) -> int:
        return Config.CLIENT_SEND_INTERVAL_MS + self.mote.simulation.rng.randint(0, Config.CLIENT_SEND_JITTER_MS)

    def _tick(self) -> None:
        third = self.counter_limit // 3
        if self.counter == self.counter_limit:
            self.mote.log(Config.KW_DONE)
            self.finished = True
            return
        if self.report_progress and third > 0:
            if self.counter == third:
                self.mote.log(Config.KW_DETERIORATE)
            elif self.counter == 2 * third:
                self.mote.log(Config.KW_IMPROVE)

        self.counter += 1
        self.sent += 1
        if self._send(self.counter):
            self.delivered += 1
        self.mote.simulation.schedule(self._next_interval(), self._tick)

    def _send(self, counter: int) -> bool:
        """
        Deliver counter to the server, directly or through the relay.

        Returns:
            True if the server received the datagram
        """
        sim = self.mote.simulation
        medium = sim.radio_medium
        server = sim.motes.get(self.server_id)
        if server is None:
            return False

        if medium.transmit(self.mote.radio, server.radio):
            server.receive(self.mote, counter)
            return True

        relay = sim.motes.get(self.relay_id) if self.relay_id is not None else None
        if relay is not None and medium.transmit(self.mote.radio, relay.radio) \
                and medium.transmit(relay.radio, server.radio):
            server.receive(self.mote, counter)
            return True
        return False
