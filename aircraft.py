"""
Aircraft Module

Defines the Aircraft parent class and the passenger/freight subclasses used in the
simulation. Each aircraft carries its model characteristics, a task list, fuel and
cargo bookkeeping, and an emergency flag.
"""

import math
from enum import Enum
from typing import Optional

import numpy as np

from tasks import TaskList, TaskType

# Fraction of fuel capacity burnt for every tick spent away from the airport
AWAY_FUEL_BURN_FRACTION = 0.1

# Freight loading thresholds (kg)
SMALL_FREIGHT_LOAD = 1000
MEDIUM_FREIGHT_LOAD = 50000


class AircraftType(Enum):
    """Broad category of aircraft, used for terminal compatibility."""
    AIRPLANE = "airplane"
    HELICOPTER = "helicopter"


class AircraftCharacteristics(Enum):
    """
    Fixed specifications of each aircraft model in the fleet.

    Each member holds (type, empty weight kg, max takeoff weight kg,
    fuel capacity litres, passenger capacity, freight capacity kg).
    """
    EMBRAER_E170 = (AircraftType.AIRPLANE, 21140, 37200, 11625, 78, 0)
    AIRBUS_A220 = (AircraftType.AIRPLANE, 35222, 70900, 21805, 135, 0)
    DASH8_400 = (AircraftType.AIRPLANE, 17819, 29574, 6526, 78, 0)
    ATR72_600 = (AircraftType.AIRPLANE, 13500, 22800, 6370, 72, 0)
    BOEING_747_8F = (AircraftType.AIRPLANE, 197131, 447700, 226117, 0, 137756)
    ROBINSON_R44 = (AircraftType.HELICOPTER, 658, 1134, 190, 4, 0)
    SIKORSKY_SKYCRANE = (AircraftType.HELICOPTER, 8724, 21000, 3328, 0, 9100)

    def __init__(self, aircraft_type, empty_weight, max_takeoff_weight,
                 fuel_capacity, passenger_capacity, freight_capacity):
        self.type = aircraft_type
        self.empty_weight = empty_weight
        self.max_takeoff_weight = max_takeoff_weight
        self.fuel_capacity = fuel_capacity
        self.passenger_capacity = passenger_capacity
        self.freight_capacity = freight_capacity


class Aircraft:
    """
    Parent class for all aircraft managed by the control tower.
    Handles identity, fuel, emergency state and task progression.

    Two aircraft are equal when their callsigns are equal.
    """

    def __init__(self, callsign: str, characteristics: AircraftCharacteristics,
                 task_list: TaskList, fuel_amount: float):
        """
        Initialise an Aircraft instance.

        Parameters
        ----------
        callsign : str
            Unique callsign (e.g., 'QFA481', 'UPS119').
        characteristics : AircraftCharacteristics
            Model specifications of this aircraft.
        task_list : TaskList
            Circular list of tasks the aircraft works through.
        fuel_amount : float
            Fuel onboard in litres, between zero and the model's capacity.
        """
        if not math.isfinite(fuel_amount) or not 0 <= fuel_amount <= characteristics.fuel_capacity:
            raise ValueError("Fuel amount must be between zero and fuel capacity")

        # Private identifier (immutable once set)
        self.__callsign = str(callsign)

        self._characteristics = characteristics
        self._task_list = task_list
        self._fuel_amount = float(fuel_amount)
        self._emergency = False

    # ------------------ GETTERS AND SETTERS ---------------------------------
    @property
    def callsign(self) -> str:
        """Return the private aircraft callsign."""
        return self.__callsign

    @property
    def characteristics(self) -> AircraftCharacteristics:
        return self._characteristics

    @property
    def aircraft_type(self) -> AircraftType:
        return self._characteristics.type

    @property
    def task_list(self) -> TaskList:
        return self._task_list

    @property
    def current_task_type(self) -> TaskType:
        """Shortcut for the type of the task the aircraft is currently on."""
        return self._task_list.current_task.type

    @property
    def fuel_amount(self) -> float:
        """Get fuel onboard (litres)."""
        return self._fuel_amount

    @property
    def fuel_percent_remaining(self) -> int:
        """Fuel onboard as a rounded percentage of capacity."""
        return int(round(100.0 * self._fuel_amount / self._characteristics.fuel_capacity))

    @property
    def has_emergency(self) -> bool:
        return self._emergency

    def declare_emergency(self):
        self._emergency = True

    def clear_emergency(self):
        self._emergency = False

    # ------------------ CARGO (overridden in subclasses) --------------------
    @property
    def is_passenger_carrying(self) -> bool:
        return False

    @property
    def cargo(self) -> int:
        """Passengers or freight currently onboard."""
        raise NotImplementedError

    @property
    def loading_time(self) -> int:
        """Number of ticks needed to complete the current loading task."""
        raise NotImplementedError

    def unload(self):
        """Remove all passengers or freight from the aircraft."""
        raise NotImplementedError

    def _load_cargo(self):
        """Load one tick's share of cargo during a LOAD task."""

    def _amount_to_load(self, capacity: int) -> int:
        percent = self._task_list.current_task.load_percent
        return int(round(capacity * percent / 100.0))

    # ------------------ SIMULATION ------------------------------------------
    def tick(self):
        """
        Advance the aircraft's own state by one tick.

        Aircraft that are away burn a fixed fraction of their fuel capacity.
        Aircraft that are loading refuel and take on cargo in equal steps so
        that both are complete after ``loading_time`` ticks.
        """
        capacity = self._characteristics.fuel_capacity
        task_type = self.current_task_type
        if task_type is TaskType.AWAY:
            burn = AWAY_FUEL_BURN_FRACTION * capacity
            self._fuel_amount = float(np.clip(self._fuel_amount - burn, 0.0, capacity))
        elif task_type is TaskType.LOAD:
            refuel = capacity / self.loading_time
            self._fuel_amount = float(np.clip(self._fuel_amount + refuel, 0.0, capacity))
            self._load_cargo()

    def encode(self) -> str:
        return ":".join([
            self.callsign,
            self._characteristics.name,
            self._task_list.encode(),
            f"{self._fuel_amount:.2f}",
            str(self._emergency).lower(),
            str(self.cargo),
        ])

    def __eq__(self, other):
        if not isinstance(other, Aircraft):
            return NotImplemented
        return self.callsign == other.callsign

    def __hash__(self):
        return hash(self.callsign)

    def __str__(self):
        text = (f"{self._characteristics.name} {self.callsign} "
                f"at {self.fuel_percent_remaining}% fuel {self.current_task_type.name}")
        if self._emergency:
            text += " (EMERGENCY)"
        return text

    def __repr__(self):
        return f"<{type(self).__name__} {self.callsign}, task={self.current_task_type.name}>"


# ------ AIRCRAFT SUBCLASSES --------------------------------------------------------------

class PassengerAircraft(Aircraft):
    """
    Aircraft that carries passengers.

    Loading time grows with the order of magnitude of the number of
    passengers to board: log10 of that number, rounded, and at least one tick.
    """

    def __init__(self, callsign: str, characteristics: AircraftCharacteristics,
                 task_list: TaskList, fuel_amount: float, num_passengers: int = 0):
        super().__init__(callsign, characteristics, task_list, fuel_amount)
        if num_passengers < 0 or num_passengers > characteristics.passenger_capacity:
            raise ValueError("Number of passengers must be between zero and capacity")
        self._num_passengers = int(num_passengers)

    @property
    def is_passenger_carrying(self) -> bool:
        return True

    @property
    def cargo(self) -> int:
        return self._num_passengers

    @property
    def passengers_to_load(self) -> int:
        return self._amount_to_load(self._characteristics.passenger_capacity)

    @property
    def loading_time(self) -> int:
        to_load = self.passengers_to_load
        if to_load <= 0:
            return 1
        return max(1, int(round(math.log10(to_load))))

    def _load_cargo(self):
        step = math.ceil(self.passengers_to_load / self.loading_time)
        self._num_passengers = min(self._num_passengers + step, self.passengers_to_load)

    def unload(self):
        self._num_passengers = 0


class FreightAircraft(Aircraft):
    """
    Aircraft that carries freight only.

    Loading time is one tick for light loads, two for medium loads and three
    for anything above MEDIUM_FREIGHT_LOAD kilogrammes.
    """

    def __init__(self, callsign: str, characteristics: AircraftCharacteristics,
                 task_list: TaskList, fuel_amount: float, freight_amount: int = 0):
        super().__init__(callsign, characteristics, task_list, fuel_amount)
        if freight_amount < 0 or freight_amount > characteristics.freight_capacity:
            raise ValueError("Freight amount must be between zero and capacity")
        self._freight_amount = int(freight_amount)

    @property
    def cargo(self) -> int:
        return self._freight_amount

    @property
    def freight_to_load(self) -> int:
        return self._amount_to_load(self._characteristics.freight_capacity)

    @property
    def loading_time(self) -> int:
        to_load = self.freight_to_load
        if to_load < SMALL_FREIGHT_LOAD:
            return 1
        if to_load <= MEDIUM_FREIGHT_LOAD:
            return 2
        return 3

    def _load_cargo(self):
        step = math.ceil(self.freight_to_load / self.loading_time)
        self._freight_amount = min(self._freight_amount + step, self.freight_to_load)

    def unload(self):
        self._freight_amount = 0


def create_aircraft(callsign: str, characteristics: AircraftCharacteristics,
                    task_list: TaskList, fuel_amount: float, cargo: int = 0,
                    emergency: bool = False) -> Aircraft:
    """
    Build the right aircraft subclass for a model.

    Models with passenger capacity become PassengerAircraft, everything else
    becomes FreightAircraft.
    """
    if characteristics.passenger_capacity > 0:
        aircraft = PassengerAircraft(callsign, characteristics, task_list, fuel_amount, cargo)
    else:
        aircraft = FreightAircraft(callsign, characteristics, task_list, fuel_amount, cargo)
    if emergency:
        aircraft.declare_emergency()
    return aircraft
