# fair_assignment/editing/commands.py
"""
Typed commands accepted by Workspace.dispatch.

The presentation layer turns raw input into these values (stripped strings,
ints); the core never parses form data.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from ..models import Category
from ..errors import FairAssignmentError


@dataclass(frozen=True)
class AddCategory:
    name: str
    max_placements: int


@dataclass(frozen=True)
class RenameCategory:
    old_name: str
    new_name: str
    new_max_placements: Optional[int] = None


@dataclass(frozen=True)
class RemoveCategory:
    category: Category


@dataclass(frozen=True)
class AddStudent:
    name: str


@dataclass(frozen=True)
class RenameStudent:
    old_name: str
    new_name: str


@dataclass(frozen=True)
class RemoveStudent:
    name: str


@dataclass(frozen=True)
class BeginEdit:
    kind: str   # "category" or "student"
    name: str


@dataclass(frozen=True)
class AddPreference:
    student_name: str
    category: Category


@dataclass(frozen=True)
class RemovePreference:
    student_name: str
    category: Category


@dataclass(frozen=True)
class MovePreference:
    student_name: str
    dragged: Category
    target: Category


@dataclass(frozen=True)
class AddExclude:
    student_name: str
    category: Category


@dataclass(frozen=True)
class RemoveExclude:
    student_name: str
    category: Category


@dataclass(frozen=True)
class ToggleMode:
    # None flips the current mode
    multi: Optional[bool] = None


@dataclass(frozen=True)
class RequestMatch:
    pass


@dataclass(frozen=True)
class ClearMatch:
    pass


@dataclass(frozen=True)
class ResetAll:
    pass


@dataclass(frozen=True)
class CommandOutcome:
    ok: bool
    error: Optional[FairAssignmentError] = None
    value: Any = None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""
