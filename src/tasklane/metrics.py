"""Counts and percentages derived from a task list.

Everything here is a pure function of its input; the dashboard recomputes
it on every render from whatever it last loaded.
"""

from dataclasses import dataclass, field

from tasklane.model.entities import STATUS_TITLES, STATUSES, Status, Task


def percent(count: int, total: int) -> float:
    """``count`` as a percentage of ``total``; 0.0 when there is nothing."""
    if total == 0:
        return 0.0
    return count / total * 100


@dataclass(frozen=True)
class StatusShare:
    status: Status
    title: str
    count: int
    percent: float


@dataclass(frozen=True)
class TaskMetrics:
    total: int = 0
    todo: int = 0
    in_progress: int = 0
    done: int = 0
    distribution: tuple[StatusShare, ...] = field(default_factory=tuple)

    @property
    def completed(self) -> int:
        return self.done

    @property
    def pending(self) -> int:
        return self.total - self.done

    def count(self, status: Status | str) -> int:
        return {Status.TODO: self.todo, Status.IN_PROGRESS: self.in_progress, Status.DONE: self.done}[Status(status)]


def compute_metrics(tasks: list[Task]) -> TaskMetrics:
    counts = {status: 0 for status in STATUSES}
    for task in tasks:
        counts[task.status] += 1
    total = len(tasks)
    return TaskMetrics(
        total=total,
        todo=counts[Status.TODO],
        in_progress=counts[Status.IN_PROGRESS],
        done=counts[Status.DONE],
        distribution=tuple(
            StatusShare(status, STATUS_TITLES[status], counts[status], percent(counts[status], total))
            for status in STATUSES
        ),
    )


@dataclass(frozen=True)
class DashboardStats:
    """Figures shown on the dashboard."""

    boards: int
    tasks: TaskMetrics

    @classmethod
    def from_lists(cls, boards: list, tasks: list[Task]) -> "DashboardStats":
        return cls(boards=len(boards), tasks=compute_metrics(tasks))

    def tiles(self) -> list[tuple[str, int]]:
        return [
            ("Total Boards", self.boards),
            ("Total Tasks", self.tasks.total),
            ("Completed", self.tasks.completed),
            ("Pending", self.tasks.pending),
        ]
