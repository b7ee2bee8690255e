# run_interactive.py

from __future__ import annotations

import sys

from fair_assignment.config import DEFAULT_STATE_PATH, CATEGORY_KIND, STUDENT_KIND
from fair_assignment.editing import commands as cmd
from fair_assignment.editing.workspace import Workspace
from fair_assignment.matching.result_table import preference_matrix, export_result_csv


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _ask_int(prompt: str):
    """Raw text -> int, or None; the core reports None/0 as an empty field."""
    raw = _ask(prompt)
    try:
        return int(raw)
    except ValueError:
        return None


def _pick_category(workspace: Workspace, prompt: str):
    name = _ask(prompt)
    for c in workspace.state.categories:
        if c.name == name:
            return c
    print(f"Unknown category: {name!r}")
    return None


def _report(outcome: cmd.CommandOutcome) -> None:
    if outcome.ok:
        print("OK")
    else:
        print(f"Error: {outcome.message}")


def _print_state(workspace: Workspace) -> None:
    state = workspace.snapshot()
    print("\n========== CATEGORIES ==========")
    if not state.categories:
        print("- none")
    for c in state.categories:
        print(f"- {c.name} ({c.max_placements} places)")

    print("\n========== STUDENTS ==========")
    if state.students:
        print(preference_matrix(state))
    else:
        print("- none")

    mode = "multi" if state.multi_match_mode else "single"
    print(f"\nMatching mode: {mode}")
    if workspace.editing is not None:
        print(f"Editing {workspace.editing.kind} {workspace.editing.name!r}")

    if state.result is not None:
        print("\n========== RESULT ==========")
        for c in state.categories:
            names = ", ".join(s.name for s in state.result.students_in(c.name))
            print(f"{c.name}: {names or 'No students in this category'}")
        if state.result.not_placable:
            print("Not placed:", ", ".join(s.name for s in state.result.not_placable))


MENU = (
    "\nChoose an action:\n"
    "  1) Add category            2) Edit category          3) Remove category\n"
    "  4) Add student             5) Edit student           6) Remove student\n"
    "  7) Add preference          8) Remove preference      9) Move preference\n"
    " 10) Add exclude            11) Remove exclude        12) Toggle multi mode\n"
    " 13) Make matches           14) Change data           15) Export result CSV\n"
    " 16) Delete all data        17) Show state             0) Quit\n"
)


def main(path: str = DEFAULT_STATE_PATH):
    workspace = Workspace.from_file(path)
    print(f"Working state file: {path}")
    _print_state(workspace)

    while True:
        print(MENU)
        choice = _ask("Your choice: ")

        if choice == "0":
            return

        elif choice == "1":
            name = _ask("Category name: ")
            places = _ask_int("Number of places: ")
            _report(workspace.dispatch(cmd.AddCategory(name, places)))

        elif choice == "2":
            old = _ask("Category to edit: ")
            outcome = workspace.dispatch(cmd.BeginEdit(CATEGORY_KIND, old))
            if not outcome.ok:
                _report(outcome)
                continue
            new = _ask(f"New name [{old}]: ") or old
            places = _ask_int("New number of places (blank keeps it): ")
            _report(workspace.dispatch(cmd.RenameCategory(old, new, places)))

        elif choice == "3":
            category = _pick_category(workspace, "Category to remove: ")
            if category is not None:
                _report(workspace.dispatch(cmd.RemoveCategory(category)))

        elif choice == "4":
            _report(workspace.dispatch(cmd.AddStudent(_ask("Student name: "))))

        elif choice == "5":
            old = _ask("Student to edit: ")
            outcome = workspace.dispatch(cmd.BeginEdit(STUDENT_KIND, old))
            if not outcome.ok:
                _report(outcome)
                continue
            new = _ask(f"New name [{old}]: ") or old
            _report(workspace.dispatch(cmd.RenameStudent(old, new)))

        elif choice == "6":
            _report(workspace.dispatch(cmd.RemoveStudent(_ask("Student to remove: "))))

        elif choice in ("7", "8", "10", "11"):
            student = _ask("Student: ")
            category = _pick_category(workspace, "Category: ")
            if category is None:
                continue
            command = {
                "7": cmd.AddPreference,
                "8": cmd.RemovePreference,
                "10": cmd.AddExclude,
                "11": cmd.RemoveExclude,
            }[choice]
            _report(workspace.dispatch(command(student, category)))

        elif choice == "9":
            student = _ask("Student: ")
            dragged = _pick_category(workspace, "Category to move: ")
            target = _pick_category(workspace, "Drop onto category: ")
            if dragged is not None and target is not None:
                _report(workspace.dispatch(cmd.MovePreference(student, dragged, target)))

        elif choice == "12":
            _report(workspace.dispatch(cmd.ToggleMode()))

        elif choice == "13":
            outcome = workspace.dispatch(cmd.RequestMatch())
            _report(outcome)
            if outcome.ok:
                _print_state(workspace)

        elif choice == "14":
            _report(workspace.dispatch(cmd.ClearMatch()))

        elif choice == "15":
            if workspace.state.result is None:
                print("No result yet. Make matches first.")
                continue
            target = _ask("CSV path [roster.csv]: ") or "roster.csv"
            export_result_csv(workspace.state.result, target)
            print(f"Wrote {target}")

        elif choice == "16":
            if _ask("Delete ALL data? Type 'yes' to confirm: ").lower() == "yes":
                _report(workspace.dispatch(cmd.ResetAll()))

        elif choice == "17":
            _print_state(workspace)

        else:
            print("Invalid choice, please select 0–17.")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_STATE_PATH)
