"""
Unit tests for task types and the circular task list.
"""

import pytest

from tasks import ALLOWED_NEXT, Task, TaskList, TaskType


def make_cycle():
    return TaskList([
        Task(TaskType.AWAY),
        Task(TaskType.LAND),
        Task(TaskType.LOAD, 60),
        Task(TaskType.TAKEOFF),
    ])


def test_task_rejects_bad_load_percent():
    with pytest.raises(ValueError):
        Task(TaskType.LOAD, 101)
    with pytest.raises(ValueError):
        Task(TaskType.LOAD, -1)


def test_task_encoding_only_shows_percent_for_load():
    assert Task(TaskType.LOAD, 45).encode() == "LOAD@45"
    assert Task(TaskType.LAND).encode() == "LAND"
    assert Task(TaskType.LOAD, 45) == Task(TaskType.LOAD, 45)
    assert Task(TaskType.LOAD, 45) != Task(TaskType.LOAD, 50)


def test_every_task_type_has_successors():
    assert set(ALLOWED_NEXT) == set(TaskType)
    assert TaskType.WAIT.description == "Waiting idle at gate"


def test_empty_task_list_is_rejected():
    with pytest.raises(ValueError):
        TaskList([])


@pytest.mark.parametrize("types", [
    [TaskType.AWAY, TaskType.TAKEOFF],
    [TaskType.LAND, TaskType.TAKEOFF, TaskType.AWAY],
    [TaskType.LOAD, TaskType.LAND],
    # wrap-around from TAKEOFF back to LAND is illegal
    [TaskType.LAND, TaskType.LOAD, TaskType.TAKEOFF],
])
def test_illegal_successors_are_rejected(types):
    with pytest.raises(ValueError):
        TaskList([Task(t) for t in types])


def test_single_away_task_is_a_valid_cycle():
    tasks = TaskList([Task(TaskType.AWAY)])
    tasks.move_to_next_task()
    assert tasks.current_task.type is TaskType.AWAY


def test_cursor_wraps_around():
    tasks = make_cycle()
    assert tasks.current_task.type is TaskType.AWAY
    assert tasks.next_task.type is TaskType.LAND
    for _ in range(len(tasks)):
        tasks.move_to_next_task()
    assert tasks.current_task.type is TaskType.AWAY


def test_encoding_starts_from_current_task():
    tasks = make_cycle()
    assert tasks.encode() == "AWAY,LAND,LOAD@60,TAKEOFF"
    tasks.move_to_next_task()
    tasks.move_to_next_task()
    assert tasks.encode() == "LOAD@60,TAKEOFF,AWAY,LAND"


def test_str_reports_position():
    tasks = make_cycle()
    tasks.move_to_next_task()
    assert str(tasks) == "TaskList currently on LAND [2/4]"
