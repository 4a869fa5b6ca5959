"""What a screen is currently doing with a dialog, if anything."""

from dataclasses import dataclass

from tasklane.model.entities import Board, Task, TaskComment


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Editing:
    """Creating (``entity is None``) or editing a board or task."""

    entity: Board | Task | None = None

    @property
    def creating(self) -> bool:
        return self.entity is None


@dataclass(frozen=True)
class Deleting:
    entity: Board | Task | TaskComment


@dataclass(frozen=True)
class Assigning:
    task: Task


@dataclass(frozen=True)
class Commenting:
    task: Task


UiMode = Idle | Editing | Deleting | Assigning | Commenting

IDLE = Idle()
