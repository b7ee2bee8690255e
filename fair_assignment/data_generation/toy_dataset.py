# fair_assignment/data_generation/toy_dataset.py
from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import random

from ..config import (
    NUM_CATEGORIES_DEFAULT,
    NUM_STUDENTS_DEFAULT,
    MAX_PLACEMENTS_RANGE,
    PREFERENCES_PER_STUDENT,
    EXCLUDE_PROBABILITY,
    DEFAULT_CATEGORY_NAMES,
    DEFAULT_SEED,
)
from ..editing.workspace import Workspace


# Chess (2 places) and Art (1 place), three students.
REFERENCE_CATEGORIES: List[Tuple[str, int]] = [("Chess", 2), ("Art", 1)]
REFERENCE_PREFERENCES: Dict[str, List[str]] = {
    "Ann": ["Chess", "Art"],
    "Bo": ["Chess"],
    "Cy": ["Art", "Chess"],
}


def fill_workspace(
    workspace: Workspace,
    categories: List[Tuple[str, int]],
    preferences: Dict[str, List[str]],
    excludes: Optional[Dict[str, List[str]]] = None,
) -> Workspace:
    """
    Push categories, students, preferences and excludes through the
    workspace's commands so every invariant check runs.
    """
    excludes = excludes or {}
    by_name = {}
    for name, places in categories:
        by_name[name] = workspace.add_category(name, places)

    for student_name, prefs in preferences.items():
        workspace.add_student(student_name)
        for cname in prefs:
            workspace.add_preference(student_name, by_name[cname])
        for cname in excludes.get(student_name, []):
            workspace.add_exclude(student_name, by_name[cname])

    return workspace


def make_reference_workspace(workspace: Optional[Workspace] = None) -> Workspace:
    if workspace is None:
        workspace = Workspace.in_memory()
    return fill_workspace(workspace, REFERENCE_CATEGORIES, REFERENCE_PREFERENCES)


def make_toy_workspace(
    num_categories: int = NUM_CATEGORIES_DEFAULT,
    num_students: int = NUM_STUDENTS_DEFAULT,
    seed: int = DEFAULT_SEED,
    prefs_per_student: int = PREFERENCES_PER_STUDENT,
    exclude_probability: float = EXCLUDE_PROBABILITY,
    workspace: Optional[Workspace] = None,
) -> Workspace:
    """
    Random but reproducible workspace: category capacities drawn from
    MAX_PLACEMENTS_RANGE, each student ranks `prefs_per_student` random
    categories and may exclude one of the rest.
    """
    if num_categories > len(DEFAULT_CATEGORY_NAMES):
        raise ValueError(
            f"At most {len(DEFAULT_CATEGORY_NAMES)} toy categories are available."
        )

    rng = random.Random(seed)
    lo, hi = MAX_PLACEMENTS_RANGE

    categories = [
        (name, rng.randint(lo, hi))
        for name in DEFAULT_CATEGORY_NAMES[:num_categories]
    ]
    names = [c[0] for c in categories]

    preferences: Dict[str, List[str]] = {}
    excludes: Dict[str, List[str]] = {}
    for s_idx in range(1, num_students + 1):
        sid = f"Student {s_idx:02d}"
        ranked = rng.sample(names, k=min(prefs_per_student, len(names)))
        preferences[sid] = ranked

        rest = [n for n in names if n not in ranked]
        if rest and rng.random() < exclude_probability:
            excludes[sid] = [rng.choice(rest)]

    if workspace is None:
        workspace = Workspace.in_memory()
    return fill_workspace(workspace, categories, preferences, excludes)
