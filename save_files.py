"""
Save Files Module

Reads and writes the plain-text save format of a control tower. A save is
made of four text streams:

- tick.txt: number of ticks elapsed
- aircraft.txt: aircraft count, then one encoded aircraft per line
- queues.txt: takeoff queue, landing queue and loading aircraft
- terminalsWithGates.txt: terminal count, then each terminal and its gates

Every reader accepts any iterable of lines (an open file, ``io.StringIO`` or a
list of strings). Invalid content raises MalformedSaveError describing the
first rule that was violated.
"""

import math
import os
from typing import Dict, Iterable, Iterator, List, Optional

from aircraft import Aircraft, AircraftCharacteristics, create_aircraft
from aircraft_queue import AircraftQueue
from control_tower import ControlTower
from ground_operations import MAX_NUM_GATES, TERMINAL_KINDS, Gate, NoSpaceError, Terminal
from tasks import Task, TaskList, TaskType

TICK_FILE = "tick.txt"
AIRCRAFT_FILE = "aircraft.txt"
QUEUES_FILE = "queues.txt"
TERMINALS_FILE = "terminalsWithGates.txt"

LOADING_HEADER = "LoadingAircraft"


class MalformedSaveError(ValueError):
    """Raised when save file content does not follow the save format."""


# ------ HELPERS --------------------------------------------------------------

def _lines(reader) -> Iterator[str]:
    """Iterator over the reader's lines with trailing newlines removed."""
    if isinstance(reader, str):
        reader = reader.splitlines()
    return (line.rstrip("\r\n") for line in reader)


def _next_line(lines: Iterator[str]) -> Optional[str]:
    return next(lines, None)


def _parse_int(text: Optional[str], message: str) -> int:
    try:
        return int(text)
    except (TypeError, ValueError):
        raise MalformedSaveError(message) from None


def _parse_bool(text: str, message: str) -> bool:
    if text not in ("true", "false"):
        raise MalformedSaveError(message)
    return text == "true"


def _find_aircraft(callsign: str, aircraft: List[Aircraft]) -> Aircraft:
    for candidate in aircraft:
        if candidate.callsign == callsign:
            return candidate
    raise MalformedSaveError(f"Callsign {callsign} does not match any known aircraft")


# ------ TICK --------------------------------------------------------------

def load_tick(reader) -> int:
    """Number of ticks elapsed: a single non-negative integer."""
    line = _next_line(_lines(reader))
    ticks = _parse_int(line, "The number of ticks elapsed is not an integer")
    if ticks < 0:
        raise MalformedSaveError("The number of ticks elapsed is less than zero")
    return ticks


# ------ AIRCRAFT --------------------------------------------------------------

def read_task_list(text: str) -> TaskList:
    """
    Decode a comma-separated task list such as ``AWAY,LAND,WAIT,LOAD@60,TAKEOFF``.
    """
    tasks = []
    for encoded in text.split(","):
        parts = encoded.split("@")
        if len(parts) > 2:
            raise MalformedSaveError("More than one at-symbol (@) in a task")
        try:
            task_type = TaskType[parts[0]]
        except KeyError:
            raise MalformedSaveError(f"Unknown task type {parts[0]!r}") from None
        load_percent = 0
        if len(parts) == 2:
            load_percent = _parse_int(parts[1], "A task's load percentage is not an integer")
            if not 0 <= load_percent <= 100:
                raise MalformedSaveError("A task's load percentage is less than zero or greater than 100")
        tasks.append(Task(task_type, load_percent))
    try:
        return TaskList(tasks)
    except ValueError as e:
        raise MalformedSaveError(f"The task list is invalid: {e}") from e


def read_aircraft(line: str) -> Aircraft:
    """
    Decode one aircraft from ``callsign:MODEL:tasks:fuel:emergency:cargo``.
    """
    parts = line.split(":")
    if len(parts) != 6:
        raise MalformedSaveError("More/fewer colons (:) than expected in an aircraft")
    callsign, model, task_text, fuel_text, emergency_text, cargo_text = parts

    try:
        characteristics = AircraftCharacteristics[model]
    except KeyError:
        raise MalformedSaveError(f"Unknown aircraft characteristics {model!r}") from None

    try:
        fuel = float(fuel_text)
    except ValueError:
        raise MalformedSaveError("The aircraft's fuel amount is not a number") from None
    if not math.isfinite(fuel):
        raise MalformedSaveError("The aircraft's fuel amount is not a finite number")
    if fuel < 0 or fuel > characteristics.fuel_capacity:
        raise MalformedSaveError("The aircraft's fuel amount is out of range")

    emergency = _parse_bool(emergency_text, "The aircraft's emergency state is not true or false")

    cargo = _parse_int(cargo_text, "The amount of cargo onboard is not an integer")
    capacity = characteristics.passenger_capacity or characteristics.freight_capacity
    if cargo < 0 or cargo > capacity:
        raise MalformedSaveError("The amount of cargo onboard is out of range")

    task_list = read_task_list(task_text)
    return create_aircraft(callsign, characteristics, task_list, fuel, cargo, emergency)


def load_aircraft(reader) -> List[Aircraft]:
    lines = _lines(reader)
    count = _parse_int(_next_line(lines), "The number of aircraft is not an integer")
    if count < 0:
        raise MalformedSaveError("The number of aircraft is less than zero")
    aircraft = []
    for _ in range(count):
        line = _next_line(lines)
        if line is None:
            raise MalformedSaveError("Fewer aircraft than the number specified")
        aircraft.append(read_aircraft(line))
    if _next_line(lines) not in (None, ""):
        raise MalformedSaveError("More aircraft than the number specified")
    return aircraft


# ------ QUEUES --------------------------------------------------------------

def _read_header(line: Optional[str], expected: str) -> int:
    if line is None:
        raise MalformedSaveError(f"Expected a {expected} header but reached the end")
    parts = line.split(":")
    if len(parts) != 2:
        raise MalformedSaveError("More/fewer colons (:) than expected in a queue header")
    if parts[0] != expected:
        raise MalformedSaveError(f"Expected {expected} but found {parts[0]!r}")
    return _parse_int(parts[1], "The number of aircraft in a queue is not an integer")


def read_queue(lines: Iterator[str], aircraft: List[Aircraft], queue: AircraftQueue):
    """Read one ``<Kind>:<count>`` block into the given queue."""
    count = _read_header(_next_line(lines), queue.kind)
    if count <= 0:
        return
    line = _next_line(lines)
    if line is None:
        raise MalformedSaveError("Missing callsign line for a non-empty queue")
    callsigns = line.split(",")
    if len(callsigns) != count:
        raise MalformedSaveError("Number of callsigns does not match the queue count")
    if len(set(callsigns)) != len(callsigns):
        raise MalformedSaveError(f"A callsign appears more than once in the {queue.kind}")
    for callsign in callsigns:
        queue.add(_find_aircraft(callsign, aircraft))


def read_loading_aircraft(lines: Iterator[str], aircraft: List[Aircraft],
                          loading_aircraft: Dict[Aircraft, int]):
    """Read the ``LoadingAircraft:<count>`` block of ``callsign:ticks`` pairs."""
    count = _read_header(_next_line(lines), LOADING_HEADER)
    if count <= 0:
        return
    line = _next_line(lines)
    if line is None:
        raise MalformedSaveError("Missing callsign line for loading aircraft")
    pairs = line.split(",")
    if len(pairs) != count:
        raise MalformedSaveError("Number of loading aircraft does not match the count")
    for pair in pairs:
        parts = pair.split(":")
        if len(parts) != 2:
            raise MalformedSaveError("A loading entry does not have exactly one colon (:)")
        ticks = _parse_int(parts[1], "A loading time is not an integer")
        if ticks < 0:
            raise MalformedSaveError("A loading time is less than zero")
        loading = _find_aircraft(parts[0], aircraft)
        if loading in loading_aircraft:
            raise MalformedSaveError(f"{loading.callsign} appears more than once in LoadingAircraft")
        loading_aircraft[loading] = ticks


def load_queues(reader, aircraft: List[Aircraft], takeoff_queue: AircraftQueue,
                landing_queue: AircraftQueue, loading_aircraft: Dict[Aircraft, int]):
    """
    Fill the given (empty) queues and loading map from the queues stream.

    An aircraft may appear in at most one of the takeoff queue, the landing
    queue and the loading map.
    """
    lines = _lines(reader)
    read_queue(lines, aircraft, takeoff_queue)
    read_queue(lines, aircraft, landing_queue)
    read_loading_aircraft(lines, aircraft, loading_aircraft)

    seen = set()
    for callsign in (takeoff_queue.callsigns() + landing_queue.callsigns()
                     + [a.callsign for a in loading_aircraft]):
        if callsign in seen:
            raise MalformedSaveError(f"{callsign} is in more than one queue")
        seen.add(callsign)


# ------ TERMINALS --------------------------------------------------------------

def read_gate(line: str, aircraft: List[Aircraft]) -> Gate:
    """Decode ``<number>:<callsign|empty>``."""
    parts = line.split(":")
    if len(parts) != 2:
        raise MalformedSaveError("More/fewer colons (:) than expected in a gate")
    number = _parse_int(parts[0], "The gate number is not an integer")
    if number < 1:
        raise MalformedSaveError("The gate number is less than one")
    gate = Gate(number)
    if parts[1] != "empty":
        gate.park_aircraft(_find_aircraft(parts[1], aircraft))
    return gate


def read_terminal(line: str, lines: Iterator[str], aircraft: List[Aircraft]) -> Terminal:
    """Decode a terminal header and the gate lines that follow it."""
    parts = line.split(":")
    if len(parts) != 4:
        raise MalformedSaveError("More/fewer colons (:) than expected in a terminal")
    kind, number_text, emergency_text, gates_text = parts
    if kind not in TERMINAL_KINDS:
        raise MalformedSaveError(f"Unknown terminal type {kind!r}")
    number = _parse_int(number_text, "The terminal number is not an integer")
    if number < 1:
        raise MalformedSaveError("The terminal number is less than one")
    emergency = _parse_bool(emergency_text, "The terminal emergency state is not true or false")
    num_gates = _parse_int(gates_text, "The number of gates is not an integer")
    if num_gates < 0 or num_gates > MAX_NUM_GATES:
        raise MalformedSaveError(f"The number of gates must be between 0 and {MAX_NUM_GATES}")

    terminal = TERMINAL_KINDS[kind](number)
    if emergency:
        terminal.declare_emergency()
    for _ in range(num_gates):
        gate_line = _next_line(lines)
        if gate_line is None:
            raise MalformedSaveError("Expected a gate but reached the end")
        try:
            terminal.add_gate(read_gate(gate_line, aircraft))
        except NoSpaceError as e:
            raise MalformedSaveError(str(e)) from e
    return terminal


def load_terminals_with_gates(reader, aircraft: List[Aircraft]) -> List[Terminal]:
    lines = _lines(reader)
    count = _parse_int(_next_line(lines), "The number of terminals is not an integer")
    if count < 0:
        raise MalformedSaveError("The number of terminals is less than zero")
    terminals = []
    for _ in range(count):
        line = _next_line(lines)
        if line is None:
            raise MalformedSaveError("Fewer terminals than the number specified")
        terminals.append(read_terminal(line, lines, aircraft))
    return terminals


# ------ WHOLE TOWER --------------------------------------------------------------

def create_control_tower(tick, aircraft, queues, terminals_with_gates, feed=None) -> ControlTower:
    """
    Build a control tower from the four save streams.

    Streams are read in order: tick, aircraft, terminals with gates, queues.
    """
    ticks_elapsed = load_tick(tick)
    roster = load_aircraft(aircraft)
    terminals = load_terminals_with_gates(terminals_with_gates, roster)
    landing_queue = AircraftQueue.landing()
    takeoff_queue = AircraftQueue.takeoff()
    loading: Dict[Aircraft, int] = {}
    load_queues(queues, roster, takeoff_queue, landing_queue, loading)
    try:
        tower = ControlTower(ticks_elapsed, roster, landing_queue, takeoff_queue, loading, feed=feed)
    except ValueError as e:
        raise MalformedSaveError(str(e)) from e
    for terminal in terminals:
        tower.add_terminal(terminal)
    return tower


def load_control_tower(directory: str, feed=None) -> ControlTower:
    """Load a tower from the four save files in ``directory``."""
    paths = [os.path.join(directory, name)
             for name in (TICK_FILE, AIRCRAFT_FILE, QUEUES_FILE, TERMINALS_FILE)]
    with open(paths[0]) as tick, open(paths[1]) as aircraft, \
            open(paths[2]) as queues, open(paths[3]) as terminals:
        return create_control_tower(tick, aircraft, queues, terminals, feed=feed)


def encode_aircraft(aircraft: Iterable[Aircraft]) -> str:
    aircraft = list(aircraft)
    return "\n".join([str(len(aircraft))] + [a.encode() for a in aircraft])


def encode_queues(tower: ControlTower) -> str:
    return "\n".join([
        tower.takeoff_queue.encode(),
        tower.landing_queue.encode(),
        tower.encode_loading_aircraft(),
    ])


def encode_terminals(terminals: Iterable[Terminal]) -> str:
    terminals = list(terminals)
    return "\n".join([str(len(terminals))] + [t.encode() for t in terminals])


def save_control_tower(tower: ControlTower, directory: str):
    """Write the four save files for ``tower`` into ``directory``."""
    os.makedirs(directory, exist_ok=True)
    contents = {
        TICK_FILE: str(tower.ticks_elapsed),
        AIRCRAFT_FILE: encode_aircraft(tower.aircraft),
        QUEUES_FILE: encode_queues(tower),
        TERMINALS_FILE: encode_terminals(tower.terminals),
    }
    for name, text in contents.items():
        with open(os.path.join(directory, name), "w") as f:
            f.write(text + "\n")
