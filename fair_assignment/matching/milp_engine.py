# fair_assignment/matching/milp_engine.py
from __future__ import annotations

import random
from typing import Dict, List, Set, Tuple

import pulp

from ..models import AssignmentResult, Category, Student
from ..config import RANK_WEIGHT, FALLBACK_SCORE, TIE_BREAK_NOISE
from ..logger import logger
from .milp_model import build_milp_assignment_model


def _build_scores(
    students: List[Student],
    capacity: Dict[str, int],
    rng: random.Random,
) -> Tuple[Dict[str, List[str]], Dict[str, Set[str]], Dict[Tuple[str, str], float]]:
    """
    Per student:
      preferred[s]: preference names still present in the input
      allowed[s]: every category that is not excluded
      score[(s, c)]: rank score + small random tie-break noise
    """
    k = len(capacity)
    preferred: Dict[str, List[str]] = {}
    allowed: Dict[str, Set[str]] = {}
    score: Dict[Tuple[str, str], float] = {}

    for st in students:
        excluded = {c.name for c in st.exclude}
        prefs = [
            c.name for c in st.preferences
            if c.name in capacity and c.name not in excluded
        ]
        preferred[st.name] = prefs
        allowed[st.name] = {c for c in capacity if c not in excluded}

        for c in capacity:
            if c not in allowed[st.name]:
                continue
            base = (k - prefs.index(c)) * RANK_WEIGHT if c in prefs else FALLBACK_SCORE
            score[(st.name, c)] = base + rng.random() * TIE_BREAK_NOISE

    return preferred, allowed, score


class MilpEngine:
    """
    Optimising alternative to deferred acceptance: maximizes total
    preference score with CBC, breaking ties with random noise.
    """

    def __init__(self, msg: bool = False):
        self.msg = msg

    def match(
        self,
        students: List[Student],
        categories: List[Category],
        multi: bool,
        rng: random.Random,
    ) -> AssignmentResult:
        capacity = {c.name: c.max_placements for c in categories}
        S = [s.name for s in students]
        preferred, allowed, score = _build_scores(students, capacity, rng)

        prob, x = build_milp_assignment_model(
            S=S,
            C=capacity,
            preferred=preferred,
            allowed=allowed,
            score=score,
            multi=multi,
        )
        if not x:
            return AssignmentResult(
                placed={c.name: () for c in categories},
                not_placable=tuple(students),
            )

        solver = pulp.PULP_CBC_CMD(msg=self.msg)
        prob.solve(solver)

        status = pulp.LpStatus[prob.status]
        logger.info("MILP solver status: %s", status)
        if status != "Optimal":
            raise RuntimeError(f"Assignment model could not be solved: {status}")

        order = list(S)
        rng.shuffle(order)
        rank = {name: i for i, name in enumerate(order)}

        by_category: Dict[str, List[Student]] = {c.name: [] for c in categories}
        not_placable: List[Student] = []
        for st in students:
            got = [
                c for c in capacity
                if (st.name, c) in x
                and x[(st.name, c)].varValue is not None
                and x[(st.name, c)].varValue > 0.5
            ]
            if not got:
                not_placable.append(st)
            for c in got:
                by_category[c].append(st)

        placed = {
            c: tuple(sorted(members, key=lambda m: rank[m.name]))
            for c, members in by_category.items()
        }
        return AssignmentResult(placed=placed, not_placable=tuple(not_placable))
