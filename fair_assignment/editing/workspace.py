# fair_assignment/editing/workspace.py
from __future__ import annotations

import random
from copy import deepcopy
from typing import Any, Callable, Dict, Optional

from ..models import AssignmentResult, Category, Student, WorkingState
from ..config import CATEGORY_KIND, STUDENT_KIND, DEFAULT_STATE_PATH
from ..errors import EmptyFieldError, FairAssignmentError, NotFoundError
from ..logger import logger
from ..matching.gateway import MatchingEngine, request_match, clear_match
from ..persistence.adapter import PersistenceAdapter
from ..persistence.store import InMemoryStore, JsonFileStore
from . import commands as cmd
from . import entity_store
from . import preference_editor
from .edit_coordinator import EditCoordinator, EditTarget


class Workspace:
    """
    The single owner of the working state.

    Every mutating method checks the edit lock, applies the change, drops a
    stale match result and saves the full state. Methods raise
    FairAssignmentError subclasses; `dispatch` turns them into outcomes.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        engine: Optional[MatchingEngine] = None,
    ):
        self.adapter = adapter
        self.engine = engine
        self.state: WorkingState = adapter.load()
        self.coordinator = EditCoordinator()

        self._handlers: Dict[type, Callable[[Any], Any]] = {
            cmd.AddCategory: lambda c: self.add_category(c.name, c.max_placements),
            cmd.RenameCategory: lambda c: self.rename_category(
                c.old_name, c.new_name, c.new_max_placements
            ),
            cmd.RemoveCategory: lambda c: self.remove_category(c.category),
            cmd.AddStudent: lambda c: self.add_student(c.name),
            cmd.RenameStudent: lambda c: self.rename_student(c.old_name, c.new_name),
            cmd.RemoveStudent: lambda c: self.remove_student(c.name),
            cmd.BeginEdit: lambda c: self.begin_edit(c.kind, c.name),
            cmd.AddPreference: lambda c: self.add_preference(c.student_name, c.category),
            cmd.RemovePreference: lambda c: self.remove_preference(c.student_name, c.category),
            cmd.MovePreference: lambda c: self.move_preference(
                c.student_name, c.dragged, c.target
            ),
            cmd.AddExclude: lambda c: self.add_exclude(c.student_name, c.category),
            cmd.RemoveExclude: lambda c: self.remove_exclude(c.student_name, c.category),
            cmd.ToggleMode: lambda c: self.toggle_mode(c.multi),
            cmd.RequestMatch: lambda c: self.request_match(),
            cmd.ClearMatch: lambda c: self.clear_match(),
            cmd.ResetAll: lambda c: self.reset_all(),
        }

    @classmethod
    def in_memory(cls, engine: Optional[MatchingEngine] = None) -> Workspace:
        return cls(PersistenceAdapter(InMemoryStore()), engine=engine)

    @classmethod
    def from_file(
        cls,
        path: str = DEFAULT_STATE_PATH,
        engine: Optional[MatchingEngine] = None,
    ) -> Workspace:
        return cls(PersistenceAdapter(JsonFileStore(path)), engine=engine)

    # ---------- Read side ----------

    def snapshot(self) -> WorkingState:
        return deepcopy(self.state)

    @property
    def editing(self) -> Optional[EditTarget]:
        return self.coordinator.editing

    # ---------- Command surface ----------

    def dispatch(self, command: Any) -> cmd.CommandOutcome:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {command!r}")

        try:
            value = handler(command)
        except FairAssignmentError as e:
            logger.info("%s rejected: %s", type(command).__name__, e.message)
            return cmd.CommandOutcome(ok=False, error=e)
        return cmd.CommandOutcome(ok=True, value=value)

    def _commit(self, data_changed: bool = True) -> None:
        if data_changed:
            clear_match(self.state)
        self.adapter.save(self.state)

    # ---------- Categories ----------

    def add_category(self, name: str, max_placements: int) -> Category:
        self.coordinator.ensure_idle()
        category = entity_store.add_category(self.state, name, max_placements)
        self._commit()
        return category

    def rename_category(
        self,
        old_name: str,
        new_name: str,
        new_max_placements: Optional[int] = None,
    ) -> Category:
        self.coordinator.ensure_may_rename(CATEGORY_KIND, old_name)
        try:
            category = entity_store.rename_category(
                self.state, old_name, new_name, new_max_placements
            )
        finally:
            # A rejected rename still leaves edit mode; the change is dropped.
            self.coordinator.end_edit()
        self._commit()
        return category

    def remove_category(self, category: Category) -> None:
        self.coordinator.ensure_idle()
        entity_store.remove_category(self.state, category)
        self._commit()

    # ---------- Students ----------

    def add_student(self, name: str) -> Student:
        self.coordinator.ensure_idle()
        student = entity_store.add_student(self.state, name)
        self._commit()
        return student

    def rename_student(self, old_name: str, new_name: str) -> Student:
        self.coordinator.ensure_may_rename(STUDENT_KIND, old_name)
        try:
            student = entity_store.rename_student(self.state, old_name, new_name)
        finally:
            self.coordinator.end_edit()
        self._commit()
        return student

    def remove_student(self, name: str) -> None:
        self.coordinator.ensure_idle()
        entity_store.remove_student(self.state, name)
        self._commit()

    # ---------- Edit mode ----------

    def begin_edit(self, kind: str, name: str) -> EditTarget:
        if kind == CATEGORY_KIND:
            exists = entity_store.find_category(self.state, name) is not None
        elif kind == STUDENT_KIND:
            exists = entity_store.find_student(self.state, name) is not None
        else:
            raise ValueError(f"Unknown edit kind: {kind}")
        if not exists:
            raise NotFoundError(f"No {kind} named {name!r}.")
        return self.coordinator.begin_edit(kind, name)

    # ---------- Preferences / excludes ----------

    def add_preference(self, student_name: str, category: Category) -> None:
        self.coordinator.ensure_idle()
        preference_editor.add_preference(self.state, student_name, category)
        self._commit()

    def remove_preference(self, student_name: str, category: Category) -> None:
        self.coordinator.ensure_idle()
        preference_editor.remove_preference(self.state, student_name, category)
        self._commit()

    def move_preference(self, student_name: str, dragged: Category, target: Category) -> bool:
        self.coordinator.ensure_idle()
        moved = preference_editor.move_preference(self.state, student_name, dragged, target)
        self._commit(data_changed=moved)
        return moved

    def add_exclude(self, student_name: str, category: Category) -> None:
        self.coordinator.ensure_idle()
        preference_editor.add_exclude(self.state, student_name, category)
        self._commit()

    def remove_exclude(self, student_name: str, category: Category) -> None:
        self.coordinator.ensure_idle()
        preference_editor.remove_exclude(self.state, student_name, category)
        self._commit()

    # ---------- Matching ----------

    def toggle_mode(self, multi: Optional[bool] = None) -> bool:
        if multi is not None and not isinstance(multi, bool):
            raise EmptyFieldError(f"Mode flag must be True, False or None, got {multi!r}.")
        self.state.multi_match_mode = (
            not self.state.multi_match_mode if multi is None else multi
        )
        logger.info("multi_match set to: %s", self.state.multi_match_mode)
        self._commit(data_changed=False)
        return self.state.multi_match_mode

    def request_match(self, rng: Optional[random.Random] = None) -> AssignmentResult:
        self.coordinator.ensure_idle()
        result = request_match(self.state, engine=self.engine, rng=rng)
        self._commit(data_changed=False)
        return result

    def clear_match(self) -> None:
        self._commit(data_changed=True)

    def reset_all(self) -> WorkingState:
        logger.info("Deleting all data")
        self.coordinator.end_edit()
        self.state = self.adapter.reset()
        return self.state
