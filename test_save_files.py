"""
Unit tests for reading and writing the plain-text save format.
"""

import io

import pytest

from aircraft import FreightAircraft, PassengerAircraft
from aircraft_queue import AircraftQueue
from save_files import (
    AIRCRAFT_FILE,
    QUEUES_FILE,
    TERMINALS_FILE,
    TICK_FILE,
    MalformedSaveError,
    create_control_tower,
    encode_aircraft,
    encode_queues,
    encode_terminals,
    load_aircraft,
    load_control_tower,
    load_queues,
    load_terminals_with_gates,
    load_tick,
    read_aircraft,
    read_task_list,
    save_control_tower,
)
from simulation import create_default_tower
from tasks import TaskType

AIRCRAFT = "\n".join([
    "3",
    "QFA481:AIRBUS_A220:AWAY,LAND,LOAD@80,TAKEOFF:10000.00:false:0",
    "UPS119:BOEING_747_8F:LOAD@100,TAKEOFF,AWAY,LAND:5000.00:false:0",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:60",
])

QUEUES = "\n".join([
    "TakeoffQueue:0",
    "LandingQueue:1",
    "EZY88",
    "LoadingAircraft:1",
    "UPS119:2",
])

TERMINALS = "\n".join([
    "2",
    "AirplaneTerminal:1:false:2",
    "1:UPS119",
    "2:empty",
    "HelicopterTerminal:2:true:0",
])


# ------ TICK --------------------------------------------------------------

def test_load_tick():
    assert load_tick("12\n") == 12
    with pytest.raises(MalformedSaveError):
        load_tick("-1")
    with pytest.raises(MalformedSaveError):
        load_tick("twelve")
    with pytest.raises(MalformedSaveError):
        load_tick("")


# ------ AIRCRAFT --------------------------------------------------------------

def test_read_task_list():
    tasks = read_task_list("LOAD@60,TAKEOFF,AWAY,LAND")
    assert len(tasks) == 4
    assert tasks.current_task.type is TaskType.LOAD
    assert tasks.current_task.load_percent == 60


@pytest.mark.parametrize("text", [
    "LOAD@60@1,TAKEOFF,AWAY,LAND",
    "LOAD@x,TAKEOFF,AWAY,LAND",
    "LOAD@101,TAKEOFF,AWAY,LAND",
    "FLY,LAND",
    "AWAY,TAKEOFF",
    "",
])
def test_read_task_list_rejects(text):
    with pytest.raises(MalformedSaveError):
        read_task_list(text)


def test_read_aircraft():
    aircraft = read_aircraft("EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:60")
    assert isinstance(aircraft, PassengerAircraft)
    assert aircraft.callsign == "EZY88"
    assert aircraft.has_emergency
    assert aircraft.cargo == 60
    assert aircraft.fuel_amount == 900.0


@pytest.mark.parametrize("line", [
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:60:1",
    "EZY88:CONCORDE:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:lots:true:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:99999.00:true:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:nan:true:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:inf:true:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:yes:60",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:79",
    "EZY88:DASH8_400:LAND,LOAD@90,TAKEOFF,AWAY:900.00:true:-1",
])
def test_read_aircraft_rejects(line):
    with pytest.raises(MalformedSaveError):
        read_aircraft(line)


def test_load_aircraft_count_must_match():
    aircraft = load_aircraft(io.StringIO(AIRCRAFT))
    assert [a.callsign for a in aircraft] == ["QFA481", "UPS119", "EZY88"]
    assert isinstance(aircraft[1], FreightAircraft)
    with pytest.raises(MalformedSaveError):
        load_aircraft(AIRCRAFT.replace("3", "4", 1))
    with pytest.raises(MalformedSaveError):
        load_aircraft(AIRCRAFT.replace("3", "2", 1))


def test_negative_counts_are_malformed():
    with pytest.raises(MalformedSaveError):
        load_aircraft("-1")
    with pytest.raises(MalformedSaveError):
        load_terminals_with_gates("-1", [])


# ------ QUEUES --------------------------------------------------------------

def test_load_queues():
    aircraft = load_aircraft(AIRCRAFT)
    takeoff, landing, loading = AircraftQueue.takeoff(), AircraftQueue.landing(), {}
    load_queues(QUEUES, aircraft, takeoff, landing, loading)
    assert len(takeoff) == 0
    assert landing.callsigns() == ["EZY88"]
    assert {a.callsign: ticks for a, ticks in loading.items()} == {"UPS119": 2}


@pytest.mark.parametrize("text", [
    QUEUES.replace("LandingQueue:1", "LandingQueue:2"),
    QUEUES.replace("EZY88", "NOPE"),
    QUEUES.replace("TakeoffQueue:0", "LandingQueue:0"),
    QUEUES.replace("UPS119:2", "UPS119:-2"),
    QUEUES.replace("UPS119:2", "UPS119"),
    "TakeoffQueue:0\nLandingQueue:0",
    # repeated within one queue
    QUEUES.replace("LandingQueue:1\nEZY88", "LandingQueue:2\nEZY88,EZY88"),
    QUEUES.replace("LoadingAircraft:1\nUPS119:2", "LoadingAircraft:2\nUPS119:2,UPS119:1"),
    # present in more than one structure
    QUEUES.replace("TakeoffQueue:0", "TakeoffQueue:1\nEZY88"),
    QUEUES.replace("LoadingAircraft:1\nUPS119:2", "LoadingAircraft:2\nEZY88:1,UPS119:2"),
])
def test_load_queues_rejects(text):
    aircraft = load_aircraft(AIRCRAFT)
    with pytest.raises(MalformedSaveError):
        load_queues(text, aircraft, AircraftQueue.takeoff(), AircraftQueue.landing(), {})


# ------ TERMINALS --------------------------------------------------------------

def test_load_terminals_with_gates():
    aircraft = load_aircraft(AIRCRAFT)
    terminals = load_terminals_with_gates(TERMINALS, aircraft)
    assert len(terminals) == 2
    assert terminals[0].gates[0].aircraft_at_gate is aircraft[1]
    assert not terminals[0].gates[1].is_occupied()
    assert terminals[1].has_emergency()
    assert encode_terminals(terminals) == TERMINALS


@pytest.mark.parametrize("text", [
    TERMINALS.replace("2\n", "3\n", 1),
    TERMINALS.replace("AirplaneTerminal", "SpaceTerminal"),
    TERMINALS.replace("false:2", "false:7"),
    TERMINALS.replace("1:UPS119", "1:NOPE"),
    TERMINALS.replace("2:empty", "0:empty"),
    TERMINALS.replace(":true:", ":maybe:"),
    TERMINALS.replace("false:2", "false:3"),
])
def test_load_terminals_rejects(text):
    with pytest.raises(MalformedSaveError):
        load_terminals_with_gates(text, load_aircraft(AIRCRAFT))


# ------ WHOLE TOWER --------------------------------------------------------------

def test_create_control_tower_from_streams():
    tower = create_control_tower("4", AIRCRAFT, QUEUES, TERMINALS)
    assert tower.ticks_elapsed == 4
    assert len(tower.aircraft) == 3
    assert len(tower.terminals) == 2
    assert tower.encode_loading_aircraft() == "LoadingAircraft:1\nUPS119:2"
    assert encode_aircraft(tower.aircraft) == AIRCRAFT
    assert encode_queues(tower) == QUEUES


def test_duplicate_callsigns_in_save_are_malformed():
    duplicated = AIRCRAFT.replace("QFA481", "EZY88")
    with pytest.raises(MalformedSaveError):
        create_control_tower("0", duplicated, QUEUES, TERMINALS)


def test_save_and_reload_round_trip(tmp_path):
    tower = create_default_tower()
    for _ in range(5):
        tower.tick()
    save_control_tower(tower, str(tmp_path))
    for name in (TICK_FILE, AIRCRAFT_FILE, QUEUES_FILE, TERMINALS_FILE):
        assert (tmp_path / name).exists()

    loaded = load_control_tower(str(tmp_path))
    assert loaded.ticks_elapsed == tower.ticks_elapsed
    assert encode_aircraft(loaded.aircraft) == encode_aircraft(tower.aircraft)
    assert encode_queues(loaded) == encode_queues(tower)
    assert encode_terminals(loaded.terminals) == encode_terminals(tower.terminals)

    # Both towers keep evolving identically
    for _ in range(4):
        tower.tick()
        loaded.tick()
    assert encode_queues(loaded) == encode_queues(tower)
    assert encode_terminals(loaded.terminals) == encode_terminals(tower.terminals)


def test_load_missing_directory_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        load_control_tower(str(tmp_path / "missing"))
