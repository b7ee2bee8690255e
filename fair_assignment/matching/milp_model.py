# fair_assignment/matching/milp_model.py
from __future__ import annotations

from typing import Dict, List, Set, Tuple
import pulp


def build_milp_assignment_model(
    S: List[str],
    C: Dict[str, int],
    preferred: Dict[str, List[str]],
    allowed: Dict[str, Set[str]],
    score: Dict[Tuple[str, str], float],
    multi: bool = False,
) -> Tuple[pulp.LpProblem, Dict[Tuple[str, str], pulp.LpVariable]]:
    """
    MILP for placing students into capacity-bounded categories.

    Variables:
        x[s, c] = 1 if student s is placed in category c
        (only created for c in allowed[s], so excludes can never be violated).

    Rules encoded:

      1) Capacity:
           ∀c: sum_s x[s,c] ≤ C[c]

      2) Single mode, at most one category per student:
           ∀s: sum_c x[s,c] ≤ 1

      3) Multi mode, a non-preferred (fallback) category only when the
         student gets none of its preferences, and at most one of those:
           ∀s: sum_{c ∉ preferred[s]} x[s,c] ≤ 1
           ∀s, ∀p ∈ preferred[s], ∀f ∉ preferred[s]: x[s,p] + x[s,f] ≤ 1

    Objective:
        maximize sum score[s,c] * x[s,c]
    """

    # ---------- Problem ----------
    prob = pulp.LpProblem("Fair_Assignment", pulp.LpMaximize)

    # ---------- Decision variables ----------
    # Names use positional indices; pulp would mangle spaces in entity names.
    c_index = {c: j for j, c in enumerate(C)}
    x: Dict[Tuple[str, str], pulp.LpVariable] = {}
    for i, s in enumerate(S):
        for c in C:
            if c in allowed[s]:
                x[(s, c)] = pulp.LpVariable(
                    f"x_{i}_{c_index[c]}", lowBound=0, upBound=1, cat="Binary"
                )

    # ---------- Objective ----------
    prob += pulp.lpSum(score[key] * var for key, var in x.items()), "PreferenceScore"

    # ---------- Constraints ----------

    # (1) Category capacity
    for c, cap in C.items():
        members = [x[(s, c)] for s in S if (s, c) in x]
        if members:
            prob += (
                pulp.lpSum(members) <= cap,
                f"Capacity_c_{c_index[c]}",
            )

    for i, s in enumerate(S):
        mine = [c for c in C if (s, c) in x]
        if not mine:
            continue

        if not multi:
            # (2) One category per student
            prob += (
                pulp.lpSum(x[(s, c)] for c in mine) <= 1,
                f"OneCategory_s_{i}",
            )
            continue

        # (3) Fallback only without any preference granted
        fallback = [c for c in mine if c not in preferred[s]]
        wanted = [c for c in mine if c in preferred[s]]
        if fallback:
            prob += (
                pulp.lpSum(x[(s, c)] for c in fallback) <= 1,
                f"OneFallback_s_{i}",
            )
            for p in wanted:
                for f in fallback:
                    prob += (
                        x[(s, p)] + x[(s, f)] <= 1,
                        f"FallbackExclusive_s_{i}_p_{c_index[p]}_f_{c_index[f]}",
                    )

    return prob, x
