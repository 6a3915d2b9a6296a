from dataclasses import dataclass, field
from enum import Enum

from changetrack import TrackedInstance, get_tracker


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Task:
    """Plain task record; proxies track every field assignment."""

    description: str
    status: TaskStatus = TaskStatus.PENDING
    notes: list[str] = field(default_factory=list)


def progress(task: Task) -> None:
    """Move a task one step through its lifecycle."""
    if task.status == TaskStatus.PENDING:
        task.status = TaskStatus.IN_PROGRESS
    elif task.status == TaskStatus.IN_PROGRESS:
        task.status = TaskStatus.COMPLETED


def main() -> None:
    tracked = TrackedInstance(Task, "Collect data", log_history=True)
    task = tracked.instance

    # Constructor assignments are tracked too; start from a clean slate.
    # The facade tracker is read-only, so clear through a NO_SET handle.
    clearing = get_tracker(task)
    clearing.clear()
    clearing.clear_history()

    tracked.tracker.subscribe(
        lambda event: print(f"{event.property} -> {event.value!r}")
    )

    progress(task)
    progress(task)
    task.notes = ["done early"]

    print(f"Changed: {[pid.name for pid, _ in tracked.tracker.get_values()]}")
    print(f"Status history: {[s.value for s in tracked.tracker.get_history('status')]}")

    # Replay the tracked changes onto a fresh proxy without recording them
    replay = TrackedInstance(Task, "Collect data", snapshot=tracked.tracker)
    print(f"Replayed status: {replay.instance.status.value}")
    print(f"Replay tracker empty: {len(get_tracker(replay.instance)) == 0}")


if __name__ == "__main__":
    main()
