"""
Control Tower Module

The control tower owns every aircraft at the airport and arbitrates access to
the scarce resources: runway use (expressed as landing/takeoff ordering) and
gates. Each call to ``tick`` advances the simulation by one discrete step.
"""

from typing import Dict, List, Optional

from aircraft import Aircraft
from aircraft_queue import AircraftQueue
from ground_operations import Gate, NoSpaceError, NoSuitableGateError, Terminal
from tasks import TaskType
from terminal_feed import TerminalFeed

# Task types that require the aircraft to be parked when it is registered
PARKED_TASK_TYPES = (TaskType.WAIT, TaskType.LOAD)

# Task types resolved instantly at the start of an aircraft's turn
INSTANT_TASK_TYPES = (TaskType.AWAY, TaskType.WAIT)


class ControlTower:
    """
    Central coordinator of the airport.

    Holds the aircraft roster, the registered terminals, the landing and
    takeoff queues, and the registry of aircraft currently loading at a gate
    (callsign -> ticks remaining). All state lives on the instance and is only
    changed through its methods.
    """

    def __init__(
        self,
        ticks_elapsed: int = 0,
        aircraft: Optional[List[Aircraft]] = None,
        landing_queue: Optional[AircraftQueue] = None,
        takeoff_queue: Optional[AircraftQueue] = None,
        loading_aircraft: Optional[Dict[Aircraft, int]] = None,
        feed: Optional[TerminalFeed] = None,
    ):
        """
        Initialise the control tower.

        Parameters
        ----------
        ticks_elapsed : int
            Ticks already elapsed, non-zero when resuming a saved simulation.
        aircraft : list of Aircraft, optional
            Roster to take over as-is (already validated, e.g. from a save).
        landing_queue, takeoff_queue : AircraftQueue, optional
            Pre-populated queues; empty ones are created when omitted.
        loading_aircraft : dict, optional
            Aircraft currently loading mapped to ticks remaining.
        feed : TerminalFeed, optional
            Where status events are reported; silent when omitted.
        """
        if ticks_elapsed < 0:
            raise ValueError("Ticks elapsed cannot be negative")
        self._ticks_elapsed = int(ticks_elapsed)
        self._aircraft: List[Aircraft] = []
        self._aircraft_by_callsign: Dict[str, Aircraft] = {}
        for existing in aircraft or []:
            self._register(existing)
        self._terminals: List[Terminal] = []
        self._landing_queue = landing_queue if landing_queue is not None else AircraftQueue.landing()
        self._takeoff_queue = takeoff_queue if takeoff_queue is not None else AircraftQueue.takeoff()
        self._loading: Dict[str, int] = {}
        for loading, remaining in (loading_aircraft or {}).items():
            if loading.callsign not in self._aircraft_by_callsign:
                raise ValueError(f"Loading aircraft {loading.callsign} is not managed by this tower")
            self._loading[loading.callsign] = int(remaining)
        self.feed = feed

    # ------ ACCESSORS --------------------------------------------------------------

    @property
    def ticks_elapsed(self) -> int:
        return self._ticks_elapsed

    @property
    def aircraft(self) -> List[Aircraft]:
        """Copy of the roster, in the order aircraft were added."""
        return list(self._aircraft)

    @property
    def terminals(self) -> List[Terminal]:
        """Copy of the terminals, in the order they were added."""
        return list(self._terminals)

    @property
    def landing_queue(self) -> AircraftQueue:
        return self._landing_queue

    @property
    def takeoff_queue(self) -> AircraftQueue:
        return self._takeoff_queue

    @property
    def loading_aircraft(self) -> Dict[Aircraft, int]:
        """Snapshot of loading aircraft and their ticks remaining, ordered by callsign."""
        return {self._aircraft_by_callsign[callsign]: self._loading[callsign]
                for callsign in sorted(self._loading)}

    def get_aircraft(self, callsign: str) -> Optional[Aircraft]:
        return self._aircraft_by_callsign.get(callsign)

    def find_gate_of_aircraft(self, aircraft: Aircraft) -> Optional[Gate]:
        """Gate the aircraft is parked at, or None if it is not parked anywhere."""
        for terminal in self._terminals:
            for gate in terminal.gates:
                parked = gate.aircraft_at_gate
                if parked is not None and parked.callsign == aircraft.callsign:
                    return gate
        return None

    # ------ REGISTRATION --------------------------------------------------------------

    def add_terminal(self, terminal: Terminal):
        self._terminals.append(terminal)

    def _register(self, aircraft: Aircraft):
        if aircraft.callsign in self._aircraft_by_callsign:
            raise ValueError(f"Aircraft {aircraft.callsign} is already managed by this tower")
        self._aircraft.append(aircraft)
        self._aircraft_by_callsign[aircraft.callsign] = aircraft

    def add_aircraft(self, aircraft: Aircraft):
        """
        Bring an aircraft under the control of this tower.

        Aircraft whose current task is WAIT or LOAD are parked at a suitable
        gate first. The roster is only changed once parking has succeeded.

        Raises
        ------
        NoSuitableGateError
            If the aircraft needs a gate and none is available.
        ValueError
            If an aircraft with the same callsign is already registered.
        """
        if aircraft.callsign in self._aircraft_by_callsign:
            raise ValueError(f"Aircraft {aircraft.callsign} is already managed by this tower")
        if aircraft.current_task_type in PARKED_TASK_TYPES:
            gate = self.find_unoccupied_gate(aircraft)
            try:
                gate.park_aircraft(aircraft)
            except NoSpaceError as e:
                raise NoSuitableGateError(str(e)) from e
            self._gate_event(f"{aircraft.callsign} parked at gate {gate.gate_number}")
        self._register(aircraft)
        self.place_aircraft_in_queues(aircraft)

    # ------ GATE LOGIC --------------------------------------------------------------

    def find_unoccupied_gate(self, aircraft: Aircraft) -> Gate:
        """
        First free gate for the aircraft across compatible terminals.

        Terminals are checked in the order they were added; terminals serving
        another aircraft type or under an emergency are skipped.

        Raises
        ------
        NoSuitableGateError
            If no compatible terminal has a free gate.
        """
        for terminal in self._terminals:
            if not terminal.accepts(aircraft) or terminal.has_emergency():
                continue
            try:
                return terminal.find_unoccupied_gate()
            except NoSuitableGateError:
                continue
        raise NoSuitableGateError(f"No gate available for {aircraft.callsign}")

    # ------ RUNWAY LOGIC --------------------------------------------------------------

    def try_land_aircraft(self) -> bool:
        """
        Attempt to land the aircraft at the front of the landing queue.

        The aircraft stays queued when no gate can be found. Otherwise it is
        parked, removed from the queue, unloaded and moved to its next task.

        Returns
        -------
        bool
            True if an aircraft landed, False otherwise.
        """
        candidate = self._landing_queue.peek()
        if candidate is None:
            return False
        try:
            gate = self.find_unoccupied_gate(candidate)
            gate.park_aircraft(candidate)
        except (NoSuitableGateError, NoSpaceError) as e:
            self._announce(f"{candidate.callsign} holding, {e}")
            return False
        self._landing_queue.remove()
        candidate.unload()
        candidate.task_list.move_to_next_task()
        self._announce(f"{candidate.callsign} landed, parked at gate {gate.gate_number}")
        return True

    def try_take_off_aircraft(self):
        """Let the aircraft at the front of the takeoff queue depart, if any."""
        departing = self._takeoff_queue.remove()
        if departing is None:
            return
        departing.task_list.move_to_next_task()
        self._announce(f"{departing.callsign} cleared for takeoff")

    # ------ LOADING LOGIC --------------------------------------------------------------

    def load_aircraft(self, callsigns: Optional[List[str]] = None):
        """
        Count down loading aircraft by one tick.

        Aircraft reaching zero leave the registry, vacate their gate and move
        to their next task.

        Parameters
        ----------
        callsigns : list of str, optional
            Registry entries to count down; every entry when omitted.
        """
        if callsigns is None:
            callsigns = list(self._loading)
        for callsign in callsigns:
            if callsign not in self._loading:
                continue
            self._loading[callsign] -= 1
            if self._loading[callsign] > 0:
                continue
            del self._loading[callsign]
            aircraft = self._aircraft_by_callsign[callsign]
            gate = self.find_gate_of_aircraft(aircraft)
            if gate is not None:
                gate.aircraft_leaves()
                self._gate_event(f"{callsign} vacated gate {gate.gate_number}")
            aircraft.task_list.move_to_next_task()
            if self.feed is not None:
                self.feed.loading_event(f"{callsign} finished loading")

    # ------ QUEUE ADMISSION --------------------------------------------------------------

    def place_aircraft_in_queues(self, aircraft: Aircraft):
        """Admit the aircraft to the queue or registry matching its current task."""
        task = aircraft.task_list.current_task
        if task.type is TaskType.LAND:
            if not self._landing_queue.contains(aircraft):
                self._landing_queue.add(aircraft)
        elif task.type is TaskType.TAKEOFF:
            if not self._takeoff_queue.contains(aircraft):
                self._takeoff_queue.add(aircraft)
        elif task.type is TaskType.LOAD:
            if aircraft.callsign not in self._loading:
                self._loading[aircraft.callsign] = aircraft.loading_time

    def place_all_aircraft_in_queues(self):
        for aircraft in self._aircraft:
            self.place_aircraft_in_queues(aircraft)

    # ------ FULL TOWER UPDATE LOOP --------------------------------------------------------------

    def tick(self):
        """
        Advance the simulation by one tick.

        Processes:
        1. For each aircraft in roster order:
           a. the aircraft's own tick (fuel, cargo)
           b. AWAY and WAIT resolve instantly to the next task
           c. runway arbitration: on even-parity ticks try to land and fall
              back to a takeoff, on odd-parity ticks only try a takeoff
           d. every aircraft is re-admitted to the queue matching its task
        2. Loading countdown for aircraft that were loading when the tick
           began, so each one gets ``loading_time`` load steps
        3. Re-admission of aircraft released from loading
        4. Tick counter advances by one
        """
        loading_at_start = list(self._loading)
        for aircraft in list(self._aircraft):
            aircraft.tick()
            if aircraft.current_task_type in INSTANT_TASK_TYPES:
                aircraft.task_list.move_to_next_task()

            # Arbitration runs once per aircraft visited, not once per tick
            if (self._ticks_elapsed - 1) % 2 == 0:
                if not self.try_land_aircraft():
                    self.try_take_off_aircraft()
            else:
                self.try_take_off_aircraft()

            self.place_all_aircraft_in_queues()
        self.load_aircraft(loading_at_start)
        self.place_all_aircraft_in_queues()
        self._ticks_elapsed += 1
        if self.feed is not None:
            self.feed.status_update(f"Tick {self._ticks_elapsed}: {self}")

    # ------ REPORTING --------------------------------------------------------------

    def _announce(self, text: str):
        if self.feed is not None:
            self.feed.announce_clearance(text)

    def _gate_event(self, text: str):
        if self.feed is not None:
            self.feed.gate_event(text)

    def encode_loading_aircraft(self) -> str:
        """``LoadingAircraft:<count>`` then ``callsign:ticks`` pairs ordered by callsign."""
        header = f"LoadingAircraft:{len(self._loading)}"
        if not self._loading:
            return header
        pairs = ",".join(f"{callsign}:{self._loading[callsign]}"
                         for callsign in sorted(self._loading))
        return header + "\n" + pairs

    def count_gates(self) -> int:
        return sum(len(terminal.gates) for terminal in self._terminals)

    def count_occupied_gates(self) -> int:
        return sum(1 for terminal in self._terminals
                   for gate in terminal.gates if gate.is_occupied())

    def get_status(self) -> dict:
        """Get current tower status."""
        return {
            'ticks_elapsed': self._ticks_elapsed,
            'num_terminals': len(self._terminals),
            'num_aircraft': len(self._aircraft),
            'landing': len(self._landing_queue),
            'takeoff': len(self._takeoff_queue),
            'loading': len(self._loading),
            'gates_occupied': self.count_occupied_gates(),
            'gates_total': self.count_gates(),
        }

    def __str__(self):
        return (f"ControlTower: {len(self._terminals)} terminals, "
                f"{len(self._aircraft)} total aircraft "
                f"({len(self._landing_queue)} LAND, {len(self._takeoff_queue)} TAKEOFF, "
                f"{len(self._loading)} LOAD)")
