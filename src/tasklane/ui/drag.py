"""Mouse drag-and-drop for task cards.

A press on a ``DraggableMixin`` widget becomes a drag once the pointer has
travelled past ``DRAG_THRESHOLD`` cells; a release before that is a click.
While dragging, the hosting screen owns the mouse and must forward moves
and releases to ``screen.active_drag`` (see ``BoardScreen``). Landing is
decided by the innermost ``DropTarget`` under the pointer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from textual.geometry import Offset

if TYPE_CHECKING:
    from textual.widget import Widget


class DropTarget:
    """Mixin for containers that can receive a dragged widget."""

    def drag_enter(self, draggable: DraggableMixin) -> bool:
        """The pointer moved onto this target. Return True if it would accept a drop."""
        return False

    def drag_leave(self, draggable: DraggableMixin) -> None:
        """The pointer left this target, or the drag ended."""

    def drop(self, draggable: DraggableMixin) -> bool:
        """The pointer was released here. Return True if the drop was taken."""
        return False


@dataclass
class DragState:
    ghost: Widget
    grab: Offset
    target: DropTarget | None = None


class DraggableMixin:
    """Mixin for widgets the user can pick up with the mouse.

    Subclasses call ``_init_draggable()`` from ``__init__`` and implement
    ``draggable_make_ghost`` and ``draggable_clicked``.
    """

    DRAG_THRESHOLD = 2

    def _init_draggable(self) -> None:
        self._press: Offset | None = None
        self._drag: DragState | None = None

    # -- press / click detection, while this widget holds the mouse --

    def on_mouse_down(self, event) -> None:
        if event.button != 1:
            return
        event.stop()
        event.prevent_default()
        self._press = Offset(event.screen_x, event.screen_y)
        self.capture_mouse()

    def on_mouse_move(self, event) -> None:
        if self._press is None:
            return
        event.stop()
        event.prevent_default()
        travelled = Offset(event.screen_x, event.screen_y) - self._press
        if max(abs(travelled.x), abs(travelled.y)) > self.DRAG_THRESHOLD:
            press, self._press = self._press, None
            self.release_mouse()
            self.begin_drag(press)

    def on_mouse_up(self, event) -> None:
        event.stop()
        event.prevent_default()
        self.release_mouse()
        if self._press is not None:
            self._press = None
            self.draggable_clicked()

    # -- the drag itself, driven by the screen --

    def begin_drag(self, press: Offset) -> None:
        region = self.region
        ghost = self.draggable_make_ghost()
        ghost.styles.width = region.width
        ghost.styles.offset = (region.x, region.y)
        self._drag = DragState(ghost, press - region.offset)
        self.add_class("dragging")
        self.screen.mount(ghost)
        self.screen.active_drag = self
        self.screen.capture_mouse()
        self.draggable_started()

    def drag_to(self, x: int, y: int) -> None:
        """Follow the pointer and tell targets when it crosses them."""
        drag = self._drag
        if drag is None:
            return
        drag.ghost.styles.offset = (x - drag.grab.x, y - drag.grab.y)
        target = self.target_at(x, y)
        if target is None or target is drag.target:
            return
        if drag.target is not None:
            drag.target.drag_leave(self)
        drag.target = target
        target.drag_enter(self)

    def release_at(self, x: int, y: int) -> None:
        """Drop on the target under the pointer, else the last one hovered."""
        drag = self._drag
        if drag is None:
            return
        target = self.target_at(x, y) or drag.target
        if target is None or not target.drop(self):
            self.cancel_drag()
            return
        if drag.target is not None and drag.target is not target:
            drag.target.drag_leave(self)
        self._end_drag()

    def cancel_drag(self) -> None:
        drag = self._drag
        if drag is None:
            return
        if drag.target is not None:
            drag.target.drag_leave(self)
        self._end_drag()
        self.draggable_cancelled()

    def _end_drag(self) -> None:
        drag, self._drag = self._drag, None
        self.screen.release_mouse()
        drag.ghost.remove()
        self.remove_class("dragging")
        self.screen.active_drag = None

    def target_at(self, x: int, y: int) -> DropTarget | None:
        """Innermost DropTarget at a screen position, looking through the ghost."""
        ghost = self._drag.ghost if self._drag else None
        for widget, _region in self.screen.get_widgets_at(x, y):
            if ghost is not None and (widget is ghost or ghost in widget.ancestors):
                continue
            for node in (widget, *widget.ancestors):
                if isinstance(node, DropTarget) and node is not self:
                    return node
        return None

    def draggable_make_ghost(self) -> Widget:
        raise NotImplementedError

    def draggable_clicked(self) -> None:
        raise NotImplementedError

    def draggable_started(self) -> None:
        """Called once the press has turned into a drag."""

    def draggable_cancelled(self) -> None:
        """Called when a drag ends without a drop."""
