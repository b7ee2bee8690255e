# fair_assignment/matching/da_stb.py
from __future__ import annotations

import random
from typing import Dict, List, Set

from ..models import AssignmentResult, Category, Student


def _tie_break_ranks(students: List[Student], rng: random.Random) -> Dict[str, int]:
    """
    Single tie-break: one random permutation of the students is the
    priority order of every category (lower rank wins).
    """
    order = [s.name for s in students]
    rng.shuffle(order)
    return {name: i for i, name in enumerate(order)}


def _allowed_preferences(
    student: Student,
    capacity: Dict[str, int],
) -> List[str]:
    excluded = {c.name for c in student.exclude}
    prefs: List[str] = []
    for c in student.preferences:
        if c.name in capacity and c.name not in excluded and c.name not in prefs:
            prefs.append(c.name)
    return prefs


def deferred_acceptance(
    prefs: Dict[str, List[str]],
    capacity: Dict[str, int],
    rank: Dict[str, int],
) -> Dict[str, List[str]]:
    """
    Student-proposing deferred acceptance.

    prefs: student -> category names, most preferred first
    capacity: category -> free places
    rank: student -> tie-break rank, shared by all categories

    Returns category -> students tentatively held at the end.
    """
    held: Dict[str, List[str]] = {c: [] for c in capacity}
    next_idx = {s: 0 for s in prefs}
    free = sorted(prefs, key=lambda s: rank[s])

    while free:
        s = free.pop(0)
        submitted = prefs[s]

        while next_idx[s] < len(submitted):
            c = submitted[next_idx[s]]
            next_idx[s] += 1
            if capacity[c] <= 0:
                continue

            held[c].append(s)
            held[c].sort(key=lambda x: rank[x])
            if len(held[c]) <= capacity[c]:
                break

            rejected = held[c].pop()
            if rejected != s:
                # s is held; the displaced student resumes from its next choice
                free.append(rejected)
                break

    return held


class DeferredAcceptanceEngine:
    """
    Deferred acceptance with a single random tie-break (DA-STB).

    Students left without a category are placed, in tie-break order, into a
    random non-excluded category that still has room. Only students that fit
    nowhere end up in `not_placable`.
    """

    def match(
        self,
        students: List[Student],
        categories: List[Category],
        multi: bool,
        rng: random.Random,
    ) -> AssignmentResult:
        remaining: Dict[str, int] = {c.name: c.max_placements for c in categories}
        rank = _tie_break_ranks(students, rng)
        assigned: Dict[str, List[str]] = {s.name: [] for s in students}

        if multi:
            self._multi_rounds(students, remaining, rank, assigned)
        else:
            prefs = {s.name: _allowed_preferences(s, remaining) for s in students}
            held = deferred_acceptance(prefs, dict(remaining), rank)
            for cname, names in held.items():
                for name in names:
                    assigned[name].append(cname)
                    remaining[cname] -= 1

        self._place_leftovers(students, categories, remaining, rank, assigned, rng)
        return self._build_result(students, categories, rank, assigned)

    @staticmethod
    def _multi_rounds(
        students: List[Student],
        remaining: Dict[str, int],
        rank: Dict[str, int],
        assigned: Dict[str, List[str]],
    ) -> None:
        """Repeat DA over not-yet-granted preferences until a round places nobody."""
        while True:
            prefs = {
                s.name: [
                    c for c in _allowed_preferences(s, remaining)
                    if c not in assigned[s.name]
                ]
                for s in students
            }
            held = deferred_acceptance(prefs, dict(remaining), rank)

            placed_any = False
            for cname, names in held.items():
                for name in names:
                    assigned[name].append(cname)
                    remaining[cname] -= 1
                    placed_any = True
            if not placed_any:
                return

    @staticmethod
    def _place_leftovers(
        students: List[Student],
        categories: List[Category],
        remaining: Dict[str, int],
        rank: Dict[str, int],
        assigned: Dict[str, List[str]],
        rng: random.Random,
    ) -> None:
        for s in sorted(students, key=lambda x: rank[x.name]):
            if assigned[s.name]:
                continue
            excluded: Set[str] = {c.name for c in s.exclude}
            options = [
                c.name for c in categories
                if c.name not in excluded and remaining[c.name] > 0
            ]
            if not options:
                continue
            cname = rng.choice(options)
            assigned[s.name].append(cname)
            remaining[cname] -= 1

    @staticmethod
    def _build_result(
        students: List[Student],
        categories: List[Category],
        rank: Dict[str, int],
        assigned: Dict[str, List[str]],
    ) -> AssignmentResult:
        by_category: Dict[str, List[Student]] = {c.name: [] for c in categories}
        not_placable: List[Student] = []

        for s in students:
            if not assigned[s.name]:
                not_placable.append(s)
            for cname in assigned[s.name]:
                by_category[cname].append(s)

        placed = {
            cname: tuple(sorted(members, key=lambda x: rank[x.name]))
            for cname, members in by_category.items()
        }
        return AssignmentResult(placed=placed, not_placable=tuple(not_placable))
