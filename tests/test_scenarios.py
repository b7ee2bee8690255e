# tests/test_scenarios.py
import unittest
import random
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fair_assignment.data_generation.toy_dataset import (
    make_reference_workspace,
    make_toy_workspace,
)
from fair_assignment.editing.workspace import Workspace
from fair_assignment.matching.milp_engine import MilpEngine
from fair_assignment.persistence.adapter import PersistenceAdapter
from fair_assignment.persistence.store import InMemoryStore


class TestAssignmentScenarios(unittest.TestCase):

    def verify_capacity_and_excludes(self, state, result, multi=False):
        """Every category within capacity, no excluded placement, everyone accounted for."""
        students = {s.name: s for s in state.students}

        for c in state.categories:
            placed = result.students_in(c.name)
            self.assertLessEqual(
                len(placed), c.max_placements,
                f"{c.name} holds {len(placed)} > {c.max_placements}",
            )
            for st in placed:
                excluded = {e.name for e in students[st.name].exclude}
                self.assertNotIn(c.name, excluded, f"{st.name} placed in excluded {c.name}")

        seen = {}
        for students_here in result.placed.values():
            for st in students_here:
                seen[st.name] = seen.get(st.name, 0) + 1
        if not multi:
            for name, count in seen.items():
                self.assertEqual(count, 1, f"{name} placed {count} times in single mode")

        not_placed = {s.name for s in result.not_placable}
        self.assertFalse(not_placed & set(seen))
        self.assertEqual(set(seen) | not_placed, set(students))

    def test_reference_scenario_single_assignment(self):
        """Chess(2) + Art(1), three students: everyone placed by capacity exhaustion."""
        for seed in range(10):
            workspace = make_reference_workspace()
            result = workspace.request_match(rng=random.Random(seed))

            self.assertEqual(len(result.students_in("Chess")), 2)
            self.assertEqual(len(result.students_in("Art")), 1)
            self.assertEqual(result.not_placable, ())
            self.assertEqual({s.name for s in result.students_in("Chess")}, {"Ann", "Bo"})
            self.assertEqual([s.name for s in result.students_in("Art")], ["Cy"])

    def test_reference_scenario_with_milp_engine(self):
        workspace = make_reference_workspace(Workspace.in_memory(engine=MilpEngine()))
        result = workspace.request_match(rng=random.Random(1))

        self.assertEqual({s.name for s in result.students_in("Chess")}, {"Ann", "Bo"})
        self.assertEqual([s.name for s in result.students_in("Art")], ["Cy"])
        self.assertEqual(result.not_placable, ())

    def test_rename_after_match_cascades(self):
        """Chess -> Chess Club keeps capacity 2 and replaces every reference in place."""
        workspace = make_reference_workspace()
        workspace.request_match(rng=random.Random(0))

        workspace.begin_edit("category", "Chess")
        workspace.rename_category("Chess", "Chess Club", None)

        state = workspace.snapshot()
        self.assertIsNone(state.result)
        self.assertEqual([c.name for c in state.categories], ["Chess Club", "Art"])
        self.assertEqual(state.categories[0].max_placements, 2)

        prefs = {s.name: [(c.name, c.max_placements) for c in s.preferences] for s in state.students}
        self.assertEqual(prefs["Ann"], [("Chess Club", 2), ("Art", 1)])
        self.assertEqual(prefs["Bo"], [("Chess Club", 2)])
        self.assertEqual(prefs["Cy"], [("Art", 1), ("Chess Club", 2)])

        result = workspace.request_match(rng=random.Random(0))
        self.assertEqual(len(result.students_in("Chess Club")), 2)

    def test_toy_workspace_single_and_multi(self):
        for seed in (1, 7, 42):
            workspace = make_toy_workspace(num_categories=4, num_students=15, seed=seed)
            state = workspace.snapshot()

            result = workspace.request_match(rng=random.Random(seed))
            self.verify_capacity_and_excludes(state, result)

            workspace.toggle_mode(True)
            result = workspace.request_match(rng=random.Random(seed))
            self.verify_capacity_and_excludes(state, result, multi=True)

    def test_toy_workspace_milp(self):
        workspace = make_toy_workspace(
            num_categories=4, num_students=12, seed=3,
            workspace=Workspace.in_memory(engine=MilpEngine()),
        )
        state = workspace.snapshot()
        result = workspace.request_match(rng=random.Random(3))
        self.verify_capacity_and_excludes(state, result)

        workspace.toggle_mode(True)
        result = workspace.request_match(rng=random.Random(3))
        self.verify_capacity_and_excludes(state, result, multi=True)

    def test_state_survives_restart(self):
        """Everything typed in one session is back after reloading from the same store."""
        store = InMemoryStore()
        first = make_reference_workspace(Workspace(PersistenceAdapter(store)))
        first.toggle_mode(True)
        first.request_match(rng=random.Random(5))

        second = Workspace(PersistenceAdapter(store))
        self.assertEqual(second.state.to_dict(), first.state.to_dict())
        self.assertTrue(second.state.multi_match_mode)
        self.assertIsNotNone(second.state.result)


if __name__ == '__main__':
    unittest.main()
