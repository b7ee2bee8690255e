# fair_assignment/editing/preference_editor.py
from __future__ import annotations

from typing import List

from ..models import Category, Student, WorkingState
from ..errors import DuplicateNameError, NotFoundError
from ..logger import logger
from .entity_store import require_student


def _require_stored_category(state: WorkingState, category: Category) -> None:
    if category not in state.categories:
        raise NotFoundError(
            f"No category {category.name!r} with {category.max_placements} places."
        )


def _check_not_listed(student: Student, category: Category) -> None:
    """A category may sit in preferences or exclude, never both, never twice."""
    if category in student.preferences:
        raise DuplicateNameError(
            f"{category.name!r} is already a preference of {student.name!r}."
        )
    if category in student.exclude:
        raise DuplicateNameError(
            f"{category.name!r} is already excluded for {student.name!r}."
        )


def add_preference(state: WorkingState, student_name: str, category: Category) -> None:
    logger.info("Adding preference: %r %r", student_name, category)
    student = require_student(state, student_name)
    _require_stored_category(state, category)
    _check_not_listed(student, category)
    student.preferences.append(category)


def add_exclude(state: WorkingState, student_name: str, category: Category) -> None:
    logger.info("Adding exclude: %r %r", student_name, category)
    student = require_student(state, student_name)
    _require_stored_category(state, category)
    _check_not_listed(student, category)
    student.exclude.append(category)


def _remove_first(entries: List[Category], category: Category) -> bool:
    try:
        entries.remove(category)
    except ValueError:
        return False
    return True


def remove_preference(state: WorkingState, student_name: str, category: Category) -> None:
    logger.info("Remove preference %r for %r", category, student_name)
    student = require_student(state, student_name)
    if not _remove_first(student.preferences, category):
        logger.debug("Preference %r not present for %r", category, student_name)


def remove_exclude(state: WorkingState, student_name: str, category: Category) -> None:
    logger.info("Remove exclude %r for %r", category, student_name)
    student = require_student(state, student_name)
    if not _remove_first(student.exclude, category):
        logger.debug("Exclude %r not present for %r", category, student_name)


def move_preference(
    state: WorkingState,
    student_name: str,
    dragged: Category,
    target: Category,
) -> bool:
    """
    Drag-and-drop reorder: take `dragged` out of the list and insert it at the
    index `target` had before the removal.

        [A, B, C]  A onto B  ->  [B, A, C]
        [A, B, C]  C onto A  ->  [C, A, B]

    Returns False (and leaves the list alone) when either category is absent
    or both are the same.
    """
    logger.info("Move preference %r to %r for %r", dragged, target, student_name)
    student = require_student(state, student_name)
    prefs = student.preferences

    if dragged == target or dragged not in prefs or target not in prefs:
        return False

    i = prefs.index(dragged)
    j = prefs.index(target)
    prefs.insert(j, prefs.pop(i))
    return True


def available_categories(state: WorkingState, student_name: str) -> List[Category]:
    """Categories that are neither preferred nor excluded by the student."""
    student = require_student(state, student_name)
    return [
        c for c in state.categories
        if c not in student.preferences and c not in student.exclude
    ]
