# fair_assignment/editing/entity_store.py
from __future__ import annotations

from typing import List, Optional

from ..models import Category, Student, WorkingState
from ..errors import DuplicateNameError, EmptyFieldError, NotFoundError
from ..logger import logger


def clean_name(name: str, kind: str) -> str:
    """Strip surrounding whitespace and reject blank names."""
    if not isinstance(name, str) or not name.strip():
        raise EmptyFieldError(f"A {kind} name is required.")
    return name.strip()


def check_max_placements(max_placements: int) -> int:
    # bool is an int subclass; reject it explicitly
    if (
        not isinstance(max_placements, int)
        or isinstance(max_placements, bool)
        or max_placements <= 0
    ):
        raise EmptyFieldError(
            "A name and a positive number of available places are required."
        )
    return max_placements


def find_category(state: WorkingState, name: str) -> Optional[Category]:
    for c in state.categories:
        if c.name == name:
            return c
    return None


def find_student(state: WorkingState, name: str) -> Optional[Student]:
    for s in state.students:
        if s.name == name:
            return s
    return None


def require_student(state: WorkingState, name: str) -> Student:
    student = find_student(state, name)
    if student is None:
        raise NotFoundError(f"No student named {name!r}.")
    return student


# ---------- Categories ----------

def add_category(state: WorkingState, name: str, max_placements: int) -> Category:
    name = clean_name(name, "category")
    max_placements = check_max_placements(max_placements)

    if find_category(state, name) is not None:
        raise DuplicateNameError(f"A category named {name!r} already exists.")

    category = Category(name=name, max_placements=max_placements)
    logger.info("Adding category: %r", category)
    state.categories.append(category)
    return category


def _replace_by_name(
    entries: List[Category],
    old_name: str,
    replacement: Category,
) -> int:
    """Swap every entry named old_name for replacement. Returns the number swapped."""
    swapped = 0
    for i, c in enumerate(entries):
        if c.name == old_name:
            entries[i] = replacement
            swapped += 1
    return swapped


def rename_category(
    state: WorkingState,
    old_name: str,
    new_name: str,
    new_max_placements: Optional[int] = None,
) -> Category:
    """
    Rename a category and/or change its capacity, then cascade the new value
    into every student's preferences and excludes.

    Student entries are matched on the old name only, so a capacity-only
    change still reaches them.
    """
    new_name = clean_name(new_name, "category")
    if new_max_placements is not None:
        check_max_placements(new_max_placements)

    logger.info(
        "Change category name from %r to %r with max_placements %r",
        old_name, new_name, new_max_placements,
    )

    if new_name != old_name and find_category(state, new_name) is not None:
        raise DuplicateNameError(f"A category named {new_name!r} already exists.")

    current = find_category(state, old_name)
    if current is None:
        raise NotFoundError(f"No category named {old_name!r}.")

    updated = Category(
        name=new_name,
        max_placements=(
            new_max_placements if new_max_placements is not None else current.max_placements
        ),
    )
    state.categories[state.categories.index(current)] = updated

    touched = 0
    for student in state.students:
        touched += _replace_by_name(student.preferences, old_name, updated)
        touched += _replace_by_name(student.exclude, old_name, updated)
    logger.info("Cascaded %r to %d student reference(s)", updated, touched)

    return updated


def remove_category(state: WorkingState, category: Category) -> None:
    logger.info("Remove category %r", category)

    if category not in state.categories:
        raise NotFoundError(f"No category {category.name!r} with {category.max_placements} places.")
    state.categories.remove(category)

    for student in state.students:
        student.preferences[:] = [c for c in student.preferences if c != category]
        student.exclude[:] = [c for c in student.exclude if c != category]


# ---------- Students ----------

def add_student(state: WorkingState, name: str) -> Student:
    name = clean_name(name, "student")

    if find_student(state, name) is not None:
        raise DuplicateNameError(f"A student named {name!r} already exists.")

    student = Student(name=name)
    logger.info("Adding student: %r", student)
    state.students.append(student)
    return student


def rename_student(state: WorkingState, old_name: str, new_name: str) -> Student:
    new_name = clean_name(new_name, "student")
    logger.info("Change student name from %r to %r", old_name, new_name)

    if new_name != old_name and find_student(state, new_name) is not None:
        raise DuplicateNameError(f"A student named {new_name!r} already exists.")

    student = require_student(state, old_name)
    student.name = new_name
    return student


def remove_student(state: WorkingState, name: str) -> None:
    logger.info("Remove student %r", name)
    student = require_student(state, name)
    state.students.remove(student)
