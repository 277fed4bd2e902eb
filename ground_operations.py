"""
Ground Operations Module

Handles the parking side of the airport:
- Gates that hold at most one aircraft each
- Terminals grouping gates by the category of aircraft they serve
- Terminal-wide emergency declarations that take gates out of service

Gate lookup across terminals is arbitrated by the control tower.
"""

from typing import List, Optional

from aircraft import Aircraft, AircraftType

# Maximum number of gates a single terminal can hold
MAX_NUM_GATES = 6


class NoSpaceError(Exception):
    """Raised when a gate or terminal has no room for what is being added."""


class NoSuitableGateError(Exception):
    """Raised when no compatible unoccupied gate can be found for an aircraft."""


# ------ GATE LOGIC --------------------------------------------------------------

class Gate:
    """A single parking position that holds at most one aircraft."""

    def __init__(self, gate_number: int):
        if gate_number < 1:
            raise ValueError("Gate number must be at least one")
        self._gate_number = int(gate_number)
        self._aircraft: Optional[Aircraft] = None

    @property
    def gate_number(self) -> int:
        return self._gate_number

    @property
    def aircraft_at_gate(self) -> Optional[Aircraft]:
        return self._aircraft

    def is_occupied(self) -> bool:
        return self._aircraft is not None

    def park_aircraft(self, aircraft: Aircraft):
        """
        Park an aircraft at this gate.

        Raises
        ------
        NoSpaceError
            If another aircraft is already parked here.
        """
        if self._aircraft is not None:
            raise NoSpaceError(
                f"Gate {self._gate_number} is occupied by {self._aircraft.callsign}"
            )
        self._aircraft = aircraft

    def aircraft_leaves(self):
        """Free the gate."""
        self._aircraft = None

    def encode(self) -> str:
        callsign = self._aircraft.callsign if self._aircraft is not None else "empty"
        return f"{self._gate_number}:{callsign}"

    def __str__(self):
        parked = self._aircraft.callsign if self._aircraft is not None else "empty"
        return f"Gate {self._gate_number} [{parked}]"


# ------ TERMINAL LOGIC --------------------------------------------------------------

class Terminal:
    """
    Parent class for terminals.
    Holds an ordered list of gates and an emergency flag; subclasses declare
    which aircraft type they accept.
    """

    aircraft_type: AircraftType = None

    def __init__(self, terminal_number: int):
        if terminal_number < 1:
            raise ValueError("Terminal number must be at least one")
        self._terminal_number = int(terminal_number)
        self._gates: List[Gate] = []
        self._emergency = False

    @property
    def terminal_number(self) -> int:
        return self._terminal_number

    @property
    def gates(self) -> List[Gate]:
        """Copy of the gates in the order they were added."""
        return list(self._gates)

    def add_gate(self, gate: Gate):
        """
        Add a gate to the terminal.

        Raises
        ------
        NoSpaceError
            If the terminal already holds MAX_NUM_GATES gates.
        """
        if len(self._gates) >= MAX_NUM_GATES:
            raise NoSpaceError(f"Terminal {self._terminal_number} already has {MAX_NUM_GATES} gates")
        self._gates.append(gate)

    def accepts(self, aircraft: Aircraft) -> bool:
        """True if this terminal serves the aircraft's category."""
        return aircraft.aircraft_type is self.aircraft_type

    def has_emergency(self) -> bool:
        return self._emergency

    def declare_emergency(self):
        self._emergency = True

    def clear_emergency(self):
        self._emergency = False

    def find_unoccupied_gate(self) -> Gate:
        """
        Returns the first free gate, in the order gates were added.

        Raises
        ------
        NoSuitableGateError
            If every gate in the terminal is occupied.
        """
        for gate in self._gates:
            if not gate.is_occupied():
                return gate
        raise NoSuitableGateError(f"No free gate in terminal {self._terminal_number}")

    def calculate_occupancy_level(self) -> int:
        """Percentage of gates occupied, rounded to the nearest integer."""
        if not self._gates:
            return 0
        occupied = sum(1 for gate in self._gates if gate.is_occupied())
        return int(round(100.0 * occupied / len(self._gates)))

    def encode(self) -> str:
        lines = [f"{type(self).__name__}:{self._terminal_number}:"
                 f"{str(self._emergency).lower()}:{len(self._gates)}"]
        lines.extend(gate.encode() for gate in self._gates)
        return "\n".join(lines)

    def __str__(self):
        text = (f"{type(self).__name__} {self._terminal_number}, "
                f"{len(self._gates)} gates")
        if self._emergency:
            text += " (EMERGENCY)"
        return text


class AirplaneTerminal(Terminal):
    """Terminal with gates for fixed-wing aircraft."""
    aircraft_type = AircraftType.AIRPLANE


class HelicopterTerminal(Terminal):
    """Terminal with helipads for helicopters."""
    aircraft_type = AircraftType.HELICOPTER


TERMINAL_KINDS = {
    "AirplaneTerminal": AirplaneTerminal,
    "HelicopterTerminal": HelicopterTerminal,
}
