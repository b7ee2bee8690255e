# run_toy.py

import random

import pandas as pd

from fair_assignment.config import DEFAULT_SEED
from fair_assignment.data_generation.toy_dataset import make_toy_workspace
from fair_assignment.matching.milp_engine import MilpEngine
from fair_assignment.matching.result_table import (
    placements_frame,
    preference_matrix,
    export_result_csv,
)


def print_result(title, result, categories):
    print(f"=== {title} ===")
    for c in categories:
        students = result.students_in(c.name)
        names = ", ".join(s.name for s in students) or "No students in this category"
        print(f"{c.name} [{len(students)}/{c.max_placements}]: {names}")

    if result.not_placable:
        print("Not placed:", ", ".join(s.name for s in result.not_placable))
    print()


def main():
    # ---- Session settings ----
    num_categories = 5
    num_students = 20

    workspace = make_toy_workspace(
        num_categories=num_categories,
        num_students=num_students,
        seed=DEFAULT_SEED,
    )
    state = workspace.snapshot()

    # ============================
    #  PRINT PREFERENCES (PANDAS)
    # ============================
    print("=== PREFERENCE MATRIX (rank, X = excluded) ===")
    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(preference_matrix(state))
    print()

    print("=== CAPACITY ===")
    total = sum(c.max_placements for c in state.categories)
    for c in state.categories:
        print(f"{c.name}: {c.max_placements}")
    print(f"Total places: {total} for {len(state.students)} students")
    print()

    # ---- Deferred acceptance, single tie-break ----
    rng = random.Random(DEFAULT_SEED)
    result = workspace.request_match(rng=rng)
    print_result("DA-STB: SINGLE ASSIGNMENT", result, state.categories)

    workspace.toggle_mode(True)
    result = workspace.request_match(rng=random.Random(DEFAULT_SEED))
    print_result("DA-STB: MULTI ASSIGNMENT", result, state.categories)

    # ---- MILP, same data ----
    workspace.toggle_mode(False)
    workspace.engine = MilpEngine()
    result = workspace.request_match(rng=random.Random(DEFAULT_SEED))
    print_result("MILP: SINGLE ASSIGNMENT", result, state.categories)

    print("=== PLACEMENTS TABLE ===")
    print(placements_frame(result).to_string(index=False))
    print()

    roster = export_result_csv(result, "toy_roster.csv")
    print(f"Wrote {len(roster)} rows to toy_roster.csv")


if __name__ == "__main__":
    main()
