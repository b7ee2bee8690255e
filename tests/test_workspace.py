# tests/test_workspace.py
import unittest
import json
import random
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fair_assignment.models import Category
from fair_assignment.config import STORAGE_KEY
from fair_assignment.errors import (
    DuplicateNameError,
    EditLockedError,
    EmptyFieldError,
    NotFoundError,
)
from fair_assignment.editing import commands as cmd
from fair_assignment.editing.workspace import Workspace
from fair_assignment.persistence.adapter import PersistenceAdapter
from fair_assignment.persistence.store import InMemoryStore


class TestWorkspace(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryStore()
        self.ws = Workspace(PersistenceAdapter(self.store))
        self.ws.add_category("Chess", 2)
        self.ws.add_category("Art", 1)
        self.ws.add_student("Ann")
        self.ws.add_student("Bo")

    def stored(self):
        return json.loads(self.store.get(STORAGE_KEY))

    def test_every_command_saves(self):
        self.assertEqual([c["name"] for c in self.stored()["categories"]], ["Chess", "Art"])

        outcome = self.ws.dispatch(cmd.AddPreference("Ann", Category("Art", 1)))
        self.assertTrue(outcome.ok)
        ann = self.stored()["students"][0]
        self.assertEqual(ann["preferences"], [{"name": "Art", "max_placements": 1}])

        self.ws.dispatch(cmd.ToggleMode())
        self.assertTrue(self.stored()["multi_matches"])
        self.ws.dispatch(cmd.ToggleMode(multi=False))
        self.assertFalse(self.stored()["multi_matches"])

    def test_dispatch_reports_errors(self):
        outcome = self.ws.dispatch(cmd.AddCategory("Chess", 3))
        self.assertFalse(outcome.ok)
        self.assertIsInstance(outcome.error, DuplicateNameError)
        self.assertTrue(outcome.message)

        outcome = self.ws.dispatch(cmd.AddCategory("Drama", 0))
        self.assertIsInstance(outcome.error, EmptyFieldError)

        outcome = self.ws.dispatch(cmd.RemoveStudent("Zed"))
        self.assertIsInstance(outcome.error, NotFoundError)

        outcome = self.ws.dispatch(cmd.RemovePreference("Ann", Category("Chess", 2)))
        self.assertTrue(outcome.ok)

        with self.assertRaises(TypeError):
            self.ws.dispatch("AddCategory")

    def test_edit_mode_locks_other_commands(self):
        self.ws.add_preference("Ann", Category("Chess", 2))
        self.ws.add_exclude("Bo", Category("Art", 1))
        self.assertTrue(self.ws.dispatch(cmd.BeginEdit("category", "Chess")).ok)
        self.assertEqual(self.ws.editing.name, "Chess")
        before = self.store.get(STORAGE_KEY)

        for command in (
            cmd.AddCategory("Drama", 2),
            cmd.AddStudent("Cy"),
            cmd.RemoveStudent("Bo"),
            cmd.RemoveCategory(Category("Art", 1)),
            cmd.AddPreference("Ann", Category("Art", 1)),
            cmd.RemovePreference("Ann", Category("Chess", 2)),
            cmd.AddExclude("Ann", Category("Art", 1)),
            cmd.RemoveExclude("Bo", Category("Art", 1)),
            cmd.MovePreference("Ann", Category("Art", 1), Category("Chess", 2)),
            cmd.RequestMatch(),
            cmd.BeginEdit("student", "Ann"),
            cmd.RenameStudent("Ann", "Anna"),
        ):
            outcome = self.ws.dispatch(command)
            self.assertIsInstance(outcome.error, EditLockedError, command)
            self.assertEqual(self.store.get(STORAGE_KEY), before, command)

        self.assertEqual(self.ws.state.students[0].preferences, [Category("Chess", 2)])
        self.assertEqual(self.ws.state.students[1].exclude, [Category("Art", 1)])
        self.assertEqual(len(self.ws.state.categories), 2)
        self.assertEqual(len(self.ws.state.students), 2)

        # Re-entering the same row is fine; committing it releases the lock.
        self.assertTrue(self.ws.dispatch(cmd.BeginEdit("category", "Chess")).ok)
        self.assertTrue(self.ws.dispatch(cmd.RenameCategory("Chess", "Go", 3)).ok)
        self.assertIsNone(self.ws.editing)
        self.assertTrue(self.ws.dispatch(cmd.AddStudent("Cy")).ok)

    def test_mode_and_clear_allowed_while_editing(self):
        self.ws.request_match(rng=random.Random(0))
        self.ws.begin_edit("student", "Bo")

        outcome = self.ws.dispatch(cmd.ToggleMode())
        self.assertTrue(outcome.ok)
        self.assertTrue(self.stored()["multi_matches"])

        outcome = self.ws.dispatch(cmd.ClearMatch())
        self.assertTrue(outcome.ok)
        self.assertIsNone(self.stored()["match_result"])

        self.assertEqual(self.ws.editing.name, "Bo")

    def test_failed_dispatch_leaves_store_untouched(self):
        before = self.store.get(STORAGE_KEY)
        for command in (
            cmd.AddCategory("Chess", 3),
            cmd.AddCategory("Drama", 0),
            cmd.AddStudent("  "),
            cmd.RemoveStudent("Zed"),
            cmd.AddPreference("Ann", Category("Chess", 9)),
        ):
            outcome = self.ws.dispatch(command)
            self.assertFalse(outcome.ok, command)
            self.assertEqual(self.store.get(STORAGE_KEY), before, command)

    def test_toggle_mode_rejects_non_bool_flag(self):
        before = self.store.get(STORAGE_KEY)
        for flag in (1, 0, "yes"):
            outcome = self.ws.dispatch(cmd.ToggleMode(multi=flag))
            self.assertIsInstance(outcome.error, EmptyFieldError, flag)
            self.assertFalse(self.ws.state.multi_match_mode)
            self.assertEqual(self.store.get(STORAGE_KEY), before)

        reloaded = Workspace(PersistenceAdapter(self.store))
        self.assertEqual([c.name for c in reloaded.state.categories], ["Chess", "Art"])
        self.assertEqual([s.name for s in reloaded.state.students], ["Ann", "Bo"])

    def test_rename_collision_exits_edit_mode_without_change(self):
        self.ws.begin_edit("student", "Ann")
        outcome = self.ws.dispatch(cmd.RenameStudent("Ann", "Bo"))

        self.assertIsInstance(outcome.error, DuplicateNameError)
        self.assertIsNone(self.ws.editing)
        self.assertEqual([s.name for s in self.ws.state.students], ["Ann", "Bo"])

        self.ws.begin_edit("category", "Chess")
        outcome = self.ws.dispatch(cmd.RenameCategory("Chess", "Art", 5))
        self.assertIsInstance(outcome.error, DuplicateNameError)
        self.assertIsNone(self.ws.editing)
        self.assertEqual(self.ws.state.categories, [Category("Chess", 2), Category("Art", 1)])

    def test_begin_edit_needs_existing_row(self):
        outcome = self.ws.dispatch(cmd.BeginEdit("student", "Zed"))
        self.assertIsInstance(outcome.error, NotFoundError)
        self.assertIsNone(self.ws.editing)

    def test_mutation_discards_match_result(self):
        self.ws.add_preference("Ann", Category("Chess", 2))
        self.ws.request_match(rng=random.Random(0))
        self.assertIsNotNone(self.ws.state.result)
        self.assertIsNotNone(self.stored()["match_result"])

        self.ws.add_student("Cy")
        self.assertIsNone(self.ws.state.result)
        self.assertIsNone(self.stored()["match_result"])

        self.ws.request_match(rng=random.Random(0))
        self.ws.dispatch(cmd.ClearMatch())
        self.assertIsNone(self.ws.state.result)

    def test_toggle_mode_keeps_result(self):
        self.ws.request_match(rng=random.Random(0))
        self.ws.toggle_mode()
        self.assertIsNotNone(self.ws.state.result)

    def test_reset_all(self):
        self.ws.begin_edit("student", "Bo")
        self.ws.toggle_mode(True)
        outcome = self.ws.dispatch(cmd.ResetAll())

        self.assertTrue(outcome.ok)
        self.assertIsNone(self.ws.editing)
        self.assertEqual(self.ws.state.categories, [])
        self.assertEqual(self.ws.state.students, [])
        self.assertFalse(self.ws.state.multi_match_mode)
        self.assertEqual(self.stored()["categories"], [])

    def test_snapshot_is_detached(self):
        snap = self.ws.snapshot()
        snap.students[0].preferences.append(Category("Chess", 2))
        snap.categories.clear()
        self.assertEqual(self.ws.state.students[0].preferences, [])
        self.assertEqual(len(self.ws.state.categories), 2)

    def test_move_preference_through_dispatch(self):
        chess, art = Category("Chess", 2), Category("Art", 1)
        self.ws.add_preference("Bo", chess)
        self.ws.add_preference("Bo", art)
        outcome = self.ws.dispatch(cmd.MovePreference("Bo", art, chess))
        self.assertTrue(outcome.ok)
        self.assertTrue(outcome.value)
        self.assertEqual(self.stored()["students"][1]["preferences"][0]["name"], "Art")


if __name__ == '__main__':
    unittest.main()
