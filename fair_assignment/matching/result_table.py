# fair_assignment/matching/result_table.py
from __future__ import annotations

from typing import List

import pandas as pd

from ..models import AssignmentResult, WorkingState


def placements_frame(result: AssignmentResult) -> pd.DataFrame:
    """One row per placement: category, 1-based position, student."""
    rows = [
        {"category": cname, "position": i + 1, "student": st.name}
        for cname, students in result.placed.items()
        for i, st in enumerate(students)
    ]
    return pd.DataFrame(rows, columns=["category", "position", "student"])


def not_placable_frame(result: AssignmentResult) -> pd.DataFrame:
    return pd.DataFrame(
        {"student": [st.name for st in result.not_placable]},
        columns=["student"],
    )


def preference_matrix(state: WorkingState) -> pd.DataFrame:
    """
    Students x categories. Cell = 1-based preference rank, "X" for an
    excluded category, "" otherwise.
    """
    columns: List[str] = [c.name for c in state.categories]
    matrix = []
    for st in state.students:
        row = {c: "" for c in columns}
        for i, c in enumerate(st.preferences):
            row[c.name] = i + 1
        for c in st.exclude:
            row[c.name] = "X"
        matrix.append([row[c] for c in columns])

    return pd.DataFrame(
        matrix,
        index=[st.name for st in state.students],
        columns=columns,
        dtype=object,
    )


def export_result_csv(result: AssignmentResult, path: str) -> pd.DataFrame:
    """
    Write the printable roster: every placement, then the not-placable
    students with an empty category.
    """
    placed = placements_frame(result)
    leftover = not_placable_frame(result)
    leftover.insert(0, "category", "")
    leftover.insert(1, "position", pd.NA)

    frames = [f for f in (placed, leftover) if not f.empty]
    if frames:
        roster = pd.concat(frames, ignore_index=True)
    else:
        roster = placed
    roster.to_csv(path, index=False)
    return roster
