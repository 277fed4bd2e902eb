"""
Unit tests for gates and terminals.
"""

import pytest

from aircraft import AircraftCharacteristics, create_aircraft
from ground_operations import (
    MAX_NUM_GATES,
    AirplaneTerminal,
    Gate,
    HelicopterTerminal,
    NoSpaceError,
    NoSuitableGateError,
)
from save_files import read_task_list


def airplane(callsign="BAW102"):
    model = AircraftCharacteristics.EMBRAER_E170
    return create_aircraft(callsign, model, read_task_list("WAIT,LOAD@50,TAKEOFF,AWAY,LAND"),
                           model.fuel_capacity / 2)


def helicopter(callsign="VHBFK"):
    model = AircraftCharacteristics.ROBINSON_R44
    return create_aircraft(callsign, model, read_task_list("WAIT,LOAD@50,TAKEOFF,AWAY,LAND"),
                           model.fuel_capacity / 2)


def test_gate_number_must_be_positive():
    with pytest.raises(ValueError):
        Gate(0)


def test_gate_holds_one_aircraft():
    gate = Gate(1)
    gate.park_aircraft(airplane("A1"))
    assert gate.is_occupied()
    with pytest.raises(NoSpaceError):
        gate.park_aircraft(airplane("A2"))
    gate.aircraft_leaves()
    assert not gate.is_occupied()
    assert gate.aircraft_at_gate is None


def test_gate_encoding():
    gate = Gate(3)
    assert gate.encode() == "3:empty"
    gate.park_aircraft(airplane("BAW102"))
    assert gate.encode() == "3:BAW102"


def test_terminal_gate_limit():
    terminal = AirplaneTerminal(1)
    for number in range(1, MAX_NUM_GATES + 1):
        terminal.add_gate(Gate(number))
    with pytest.raises(NoSpaceError):
        terminal.add_gate(Gate(MAX_NUM_GATES + 1))
    assert len(terminal.gates) == MAX_NUM_GATES


def test_terminal_compatibility():
    assert AirplaneTerminal(1).accepts(airplane())
    assert not AirplaneTerminal(1).accepts(helicopter())
    assert HelicopterTerminal(2).accepts(helicopter())


def test_find_unoccupied_gate_in_order():
    terminal = AirplaneTerminal(1)
    first, second = Gate(1), Gate(2)
    terminal.add_gate(first)
    terminal.add_gate(second)
    assert terminal.find_unoccupied_gate() is first
    first.park_aircraft(airplane("A1"))
    assert terminal.find_unoccupied_gate() is second
    second.park_aircraft(airplane("A2"))
    with pytest.raises(NoSuitableGateError):
        terminal.find_unoccupied_gate()


def test_occupancy_level_is_rounded_percentage():
    terminal = AirplaneTerminal(1)
    assert terminal.calculate_occupancy_level() == 0
    for number in range(1, 4):
        terminal.add_gate(Gate(number))
    terminal.gates[0].park_aircraft(airplane())
    assert terminal.calculate_occupancy_level() == 33


def test_terminal_emergency_flag():
    terminal = HelicopterTerminal(4)
    terminal.declare_emergency()
    assert terminal.has_emergency()
    assert str(terminal) == "HelicopterTerminal 4, 0 gates (EMERGENCY)"
    terminal.clear_emergency()
    assert not terminal.has_emergency()


def test_terminal_encoding():
    terminal = AirplaneTerminal(2)
    terminal.add_gate(Gate(1))
    terminal.add_gate(Gate(2))
    terminal.gates[1].park_aircraft(airplane("BAW102"))
    terminal.declare_emergency()
    assert terminal.encode() == "AirplaneTerminal:2:true:2\n1:empty\n2:BAW102"
