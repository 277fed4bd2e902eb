"""
Tasks Module

Defines the task types an aircraft cycles through (away, land, wait, load,
takeoff) and the circular task list that tracks which one is current.
"""

from enum import Enum
from typing import List


class TaskType(Enum):
    """Operational phases an aircraft can be in."""
    AWAY = "Flying outside the airport"
    LAND = "Waiting in the queue to land"
    WAIT = "Waiting idle at gate"
    LOAD = "Loading at gate"
    TAKEOFF = "Waiting in the queue to take off"

    @property
    def description(self) -> str:
        return self.value


# Legal successors for each task type; the list wraps from last to first
ALLOWED_NEXT = {
    TaskType.AWAY: (TaskType.AWAY, TaskType.LAND),
    TaskType.LAND: (TaskType.WAIT, TaskType.LOAD),
    TaskType.WAIT: (TaskType.WAIT, TaskType.LOAD),
    TaskType.LOAD: (TaskType.TAKEOFF,),
    TaskType.TAKEOFF: (TaskType.AWAY,),
}


class Task:
    """
    A single entry in an aircraft's task list.

    Parameters
    ----------
    task_type : TaskType
        Phase represented by this task.
    load_percent : int
        Percentage of capacity to load (only meaningful for LOAD tasks).
    """

    def __init__(self, task_type: TaskType, load_percent: int = 0):
        if not 0 <= load_percent <= 100:
            raise ValueError("Load percentage must be between 0 and 100")
        self._type = task_type
        self._load_percent = int(load_percent)

    @property
    def type(self) -> TaskType:
        return self._type

    @property
    def load_percent(self) -> int:
        return self._load_percent

    def encode(self) -> str:
        if self._type is TaskType.LOAD:
            return f"{self._type.name}@{self._load_percent}"
        return self._type.name

    def __eq__(self, other):
        if not isinstance(other, Task):
            return NotImplemented
        return self._type is other._type and self._load_percent == other._load_percent

    def __hash__(self):
        return hash((self._type, self._load_percent))

    def __str__(self):
        return self.encode()

    def __repr__(self):
        return f"Task({self.encode()})"


class TaskList:
    """
    Circular list of tasks with a cursor on the current task.

    The list is validated on construction: it may not be empty and every task
    must be followed by a legal successor, including the last task wrapping
    around to the first.
    """

    def __init__(self, tasks: List[Task]):
        tasks = list(tasks)
        if not tasks:
            raise ValueError("Task list must contain at least one task")
        for i, task in enumerate(tasks):
            successor = tasks[(i + 1) % len(tasks)]
            if successor.type not in ALLOWED_NEXT[task.type]:
                raise ValueError(
                    f"{task.type.name} cannot be followed by {successor.type.name}"
                )
        self._tasks = tasks
        self._index = 0

    @property
    def current_task(self) -> Task:
        return self._tasks[self._index]

    @property
    def next_task(self) -> Task:
        return self._tasks[(self._index + 1) % len(self._tasks)]

    def move_to_next_task(self):
        """Advance the cursor, wrapping to the first task after the last."""
        self._index = (self._index + 1) % len(self._tasks)

    def __len__(self):
        return len(self._tasks)

    def encode(self) -> str:
        """Comma-joined task encodings, starting from the current task."""
        rotated = self._tasks[self._index:] + self._tasks[:self._index]
        return ",".join(task.encode() for task in rotated)

    def __str__(self):
        return (f"TaskList currently on {self.current_task} "
                f"[{self._index + 1}/{len(self._tasks)}]")
