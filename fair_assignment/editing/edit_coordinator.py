# fair_assignment/editing/edit_coordinator.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..config import CATEGORY_KIND, STUDENT_KIND
from ..errors import EditLockedError
from ..logger import logger


@dataclass(frozen=True)
class EditTarget:
    kind: str   # CATEGORY_KIND or STUDENT_KIND
    name: str


@dataclass
class EditCoordinator:
    """
    Single-editor flag: at most one row (category or student) is in rename
    mode at a time. There is no cancel; a rename commit is the only way out.
    """
    editing: Optional[EditTarget] = None

    @property
    def active(self) -> bool:
        return self.editing is not None

    def begin_edit(self, kind: str, name: str) -> EditTarget:
        if kind not in (CATEGORY_KIND, STUDENT_KIND):
            raise ValueError(f"Unknown edit kind: {kind}")

        target = EditTarget(kind=kind, name=name)
        if self.editing is not None and self.editing != target:
            raise EditLockedError(
                f"Finish editing {self.editing.kind} {self.editing.name!r} first."
            )
        logger.info("Editing %s %r", kind, name)
        self.editing = target
        return target

    def end_edit(self) -> None:
        self.editing = None

    def ensure_idle(self) -> None:
        if self.editing is not None:
            raise EditLockedError(
                f"Finish editing {self.editing.kind} {self.editing.name!r} first."
            )

    def ensure_may_rename(self, kind: str, name: str) -> None:
        """A rename is allowed when idle or when it commits the row being edited."""
        if self.editing is not None and self.editing != EditTarget(kind=kind, name=name):
            raise EditLockedError(
                f"Finish editing {self.editing.kind} {self.editing.name!r} first."
            )
