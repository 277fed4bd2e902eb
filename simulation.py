"""
Simulation Module

Main simulation loop for control tower operations.
Builds the demo airport and drives the tower tick by tick while recording
statistics.
"""

from typing import Optional

from aircraft import AircraftCharacteristics, create_aircraft
from control_tower import ControlTower
from ground_operations import AirplaneTerminal, Gate, HelicopterTerminal
from save_files import read_task_list
from statistical_analysis import TowerStatistics
from terminal_feed import TerminalFeed

# Demo airport layout: (terminal class, number of gates)
DEFAULT_TERMINALS = [
    (AirplaneTerminal, 3),
    (AirplaneTerminal, 2),
    (HelicopterTerminal, 2),
]

# Demo fleet: callsign, model, encoded tasks, fuel fraction, cargo
DEFAULT_FLEET = [
    ("QFA481", AircraftCharacteristics.AIRBUS_A220, "AWAY,LAND,LOAD@80,TAKEOFF", 0.6, 0),
    ("BAW102", AircraftCharacteristics.EMBRAER_E170, "LAND,WAIT,LOAD@60,TAKEOFF,AWAY", 0.45, 70),
    ("UPS119", AircraftCharacteristics.BOEING_747_8F, "WAIT,LOAD@100,TAKEOFF,AWAY,LAND", 0.3, 0),
    ("VHBFK", AircraftCharacteristics.ROBINSON_R44, "LOAD@75,TAKEOFF,AWAY,LAND", 0.5, 0),
    ("SKY01", AircraftCharacteristics.SIKORSKY_SKYCRANE, "TAKEOFF,AWAY,LAND,LOAD@50", 0.9, 4000),
    ("EZY88", AircraftCharacteristics.DASH8_400, "LAND,LOAD@90,TAKEOFF,AWAY", 0.15, 60),
    ("LOG22", AircraftCharacteristics.ATR72_600, "AWAY,AWAY,LAND,WAIT,LOAD@50,TAKEOFF", 0.8, 0),
]


def create_default_tower(feed: Optional[TerminalFeed] = None) -> ControlTower:
    """
    Build the demo airport: two airplane terminals, one helicopter terminal
    and a mixed fleet spread over every task phase.
    """
    tower = ControlTower(feed=feed)
    for number, (terminal_cls, num_gates) in enumerate(DEFAULT_TERMINALS, start=1):
        terminal = terminal_cls(number)
        for gate_number in range(1, num_gates + 1):
            terminal.add_gate(Gate(gate_number))
        tower.add_terminal(terminal)

    for callsign, model, encoded_tasks, fuel_fraction, cargo in DEFAULT_FLEET:
        aircraft = create_aircraft(
            callsign,
            model,
            read_task_list(encoded_tasks),
            fuel_fraction * model.fuel_capacity,
            cargo,
        )
        tower.add_aircraft(aircraft)
    return tower


def run_simulation(tower: ControlTower, ticks: int,
                   statistics: Optional[TowerStatistics] = None) -> TowerStatistics:
    """
    Tick the tower ``ticks`` times, recording statistics after each tick.

    Parameters
    ----------
    tower : ControlTower
        Tower to drive; it is modified in place.
    ticks : int
        Number of ticks to run.
    statistics : TowerStatistics, optional
        Recorder to append to; a new one is created when omitted.

    Returns
    -------
    TowerStatistics
        The recorder holding one entry per tick run.
    """
    if ticks < 0:
        raise ValueError("Number of ticks cannot be negative")
    if statistics is None:
        statistics = TowerStatistics()
    for _ in range(ticks):
        tower.tick()
        statistics.record(tower)
    return statistics
