"""
RadioMedium: simulated wireless channel between motes

Models each mote pair as a link with a packet reception ratio (PRR).
Test scripts degrade and restore individual links through two one-way
calls; the firmware's transmissions are then drawn against the current
PRR with a seeded numpy generator, so a run is reproducible from its seed.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np
from motescript.Config import Config


class Radio:
    """Radio interface of a single mote."""

    def __init__(self, mote_id: int):
        self.mote_id = mote_id

    def __repr__(self):
        return f"Radio({self.mote_id})"


@dataclass
class Link:
    nominal_prr: float
    prr: float
    deteriorated: bool = False


class RadioMedium:
    """
    Undirected links keyed by mote id pair.

    Links missing from the topology are created on first use with
    Config.NOMINAL_PRR, so a replayed log can mutate links that were never
    declared.
    """
    def __init__(self, seed: Optional[int] = None, sim=None):
        self.links: Dict[Tuple[int, int], Link] = {}
        self.rng = np.random.default_rng(Config.SEED if seed is None else seed)
        self.sim = sim
        self.mutations: List[Tuple[int, str, int, int]] = []
        self.collector = None

    @staticmethod
    def _key(a: int, b: int) -> Tuple[int, int]:
        return (a, b) if a <= b else (b, a)

    def add_link(self, a: int, b: int, prr: float = None) -> Link:
        """
        Declare a link between motes a and b.

        Args:
            a: First mote id
            b: Second mote id
            prr: Nominal packet reception ratio in [0, 1]

        Returns:
            The Link entry
        """
        prr = Config.NOMINAL_PRR if prr is None else float(prr)
        if not 0.0 <= prr <= 1.0:
            raise ValueError(f"PRR must be within [0, 1], got {prr}")
        link = Link(nominal_prr=prr, prr=prr)
        self.links[self._key(a, b)] = link
        return link

    def get_link(self, a: int, b: int) -> Link:
        key = self._key(a, b)
        if key not in self.links:
            self.add_link(a, b)
        return self.links[key]

    def has_link(self, a: int, b: int) -> bool:
        return self._key(a, b) in self.links

    def link_quality(self, a: int, b: int) -> float:
        return self.get_link(a, b).prr

    def _now(self) -> int:
        return self.sim.now if self.sim is not None else 0

    def _record(self, action: str, radio_a: Radio, radio_b: Radio) -> None:
        now = self._now()
        self.mutations.append((now, action, radio_a.mote_id, radio_b.mote_id))
        print(f"[radio] {now:>10}ms {action} link {radio_a.mote_id}<->{radio_b.mote_id}")
        if self.collector is not None:
            self.collector.record_link_event(now, action, radio_a.mote_id, radio_b.mote_id)

    def deteriorate_link(self, radio_a: Radio, radio_b: Radio) -> None:
        link = self.get_link(radio_a.mote_id, radio_b.mote_id)
        link.prr = Config.DETERIORATED_PRR
        link.deteriorated = True
        self._record("deteriorate", radio_a, radio_b)

    def improve_link(self, radio_a: Radio, radio_b: Radio) -> None:
        link = self.get_link(radio_a.mote_id, radio_b.mote_id)
        link.prr = link.nominal_prr
        link.deteriorated = False
        self._record("improve", radio_a, radio_b)

    def transmit(self, src: Radio, dst: Radio) -> bool:
        """
        Attempt one frame from src to dst.

        Motes without a declared link cannot hear each other.

        Returns:
            True if the frame was received
        """
        key = self._key(src.mote_id, dst.mote_id)
        link = self.links.get(key)
        if link is None or link.prr <= 0.0:
            return False
        return bool(self.rng.random() < link.prr)
