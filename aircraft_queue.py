"""
Aircraft Queue Module

A single queue container whose ordering is decided by an injected policy.
Two policies are provided:

- TAKEOFF_POLICY: strict first-in-first-out
- LANDING_POLICY: urgency rules (emergency, critical fuel, passengers, arrival)

The policy only picks the position of the next aircraft in insertion-ordered
storage; the container owns storage, membership and formatting.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from aircraft import Aircraft

# Fuel percentage at or below which an aircraft is treated as critical
CRITICAL_FUEL_PERCENT = 20


# ------ SELECTION POLICIES --------------------------------------------------------------

def _first_matching(aircraft: Sequence[Aircraft], rule: Callable[[Aircraft], bool]) -> Optional[int]:
    for index, candidate in enumerate(aircraft):
        if rule(candidate):
            return index
    return None


def select_first_in(aircraft: Sequence[Aircraft]) -> int:
    """FIFO: the head of storage is always next."""
    return 0


def select_most_urgent(aircraft: Sequence[Aircraft]) -> int:
    """
    Pick the aircraft that should land next.

    Rules are applied in order against the current state of every aircraft,
    and each rule breaks ties by earliest insertion:
    1. any aircraft with an emergency declared
    2. any aircraft with CRITICAL_FUEL_PERCENT fuel or less
    3. any passenger-carrying aircraft
    4. otherwise the earliest inserted aircraft
    """
    rules = (
        lambda a: a.has_emergency,
        lambda a: a.fuel_percent_remaining <= CRITICAL_FUEL_PERCENT,
        lambda a: a.is_passenger_carrying,
    )
    for rule in rules:
        index = _first_matching(aircraft, rule)
        if index is not None:
            return index
    return 0


@dataclass(frozen=True)
class QueuePolicy:
    """Tagged selection strategy: a queue kind name and its selection function."""
    name: str
    select: Callable[[Sequence[Aircraft]], int]


TAKEOFF_POLICY = QueuePolicy("TakeoffQueue", select_first_in)
LANDING_POLICY = QueuePolicy("LandingQueue", select_most_urgent)


# ------ QUEUE CONTAINER --------------------------------------------------------------

class AircraftQueue:
    """
    Ordered collection of aircraft with policy-defined removal order.

    ``add`` does not check for duplicates; the control tower only admits an
    aircraft when ``contains`` is False. Membership is keyed on callsign.
    """

    def __init__(self, policy: QueuePolicy):
        self._policy = policy
        self._aircraft: List[Aircraft] = []

    @classmethod
    def landing(cls) -> "AircraftQueue":
        return cls(LANDING_POLICY)

    @classmethod
    def takeoff(cls) -> "AircraftQueue":
        return cls(TAKEOFF_POLICY)

    @property
    def kind(self) -> str:
        """Name of the queue policy, e.g. LandingQueue."""
        return self._policy.name

    def add(self, aircraft: Aircraft):
        self._aircraft.append(aircraft)

    def peek(self) -> Optional[Aircraft]:
        """Aircraft that would be removed next, or None if the queue is empty."""
        if not self._aircraft:
            return None
        return self._aircraft[self._policy.select(self._aircraft)]

    def remove(self) -> Optional[Aircraft]:
        """Remove and return the next aircraft, or None if the queue is empty."""
        if not self._aircraft:
            return None
        return self._aircraft.pop(self._policy.select(self._aircraft))

    def contains(self, aircraft: Aircraft) -> bool:
        return any(queued.callsign == aircraft.callsign for queued in self._aircraft)

    def in_order(self) -> List[Aircraft]:
        """
        Snapshot of the aircraft in removal order.

        Computed by repeatedly selecting from a scratch copy of storage, so the
        live queue is never touched.
        """
        scratch = list(self._aircraft)
        ordered = []
        while scratch:
            ordered.append(scratch.pop(self._policy.select(scratch)))
        return ordered

    def callsigns(self) -> List[str]:
        return [aircraft.callsign for aircraft in self.in_order()]

    def encode(self) -> str:
        """
        Machine-readable form: ``<Kind>:<count>`` then, when the queue is not
        empty, one line of comma-joined callsigns in removal order.
        """
        callsigns = self.callsigns()
        header = f"{self.kind}:{len(callsigns)}"
        if not callsigns:
            return header
        return header + "\n" + ",".join(callsigns)

    def __contains__(self, aircraft):
        return self.contains(aircraft)

    def __len__(self):
        return len(self._aircraft)

    def __str__(self):
        return f"{self.kind} [{', '.join(self.callsigns())}]"

    def __repr__(self):
        return f"<AircraftQueue {self.kind} size={len(self._aircraft)}>"
