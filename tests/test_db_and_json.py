import os
import sqlite3
import tempfile
import unittest

from assigner import (
    CHILDREN_IDS,
    AssignmentState,
    Group,
    Item,
    SnapshotGateway,
    UndoStep,
    catalog_problems,
    db_load_snapshot,
    db_store_snapshot,
    group_from_json,
    history_to_json,
    json_to_history,
    json_to_state,
    placeholder_catalog,
    split_catalog,
    state_to_json,
)


def _sample_state():
    return AssignmentState(
        pool=(Item(5, "Item 5"), Item(6, "Item 6")),
        groups=(
            Group(1, "Item 1", children=(Item(4, "Item 4"), Item(3, "Item 3")), expanded=True),
            Group(2, "Item 2"),
        ),
    )


class TestJson(unittest.TestCase):
    def test_given_state_when_encoded_then_original_shape_with_predecessors(self):
        sj = state_to_json(_sample_state())
        self.assertEqual(sj["pool"], [{"id": 5, "description": "Item 5"}, {"id": 6, "description": "Item 6"}])
        g0 = sj["groups"][0]
        self.assertEqual(g0["id"], 1)
        self.assertTrue(g0["isExpanded"])
        self.assertEqual(g0["predecessorCount"], 2)
        self.assertEqual([c["id"] for c in g0["children"]], [4, 3])
        self.assertEqual(sj["predecessors"], [4, 3])
        self.assertEqual(json_to_state(sj), _sample_state())

    def test_given_ids_mode_when_decoding_then_children_resolved_from_catalog(self):
        sj = state_to_json(_sample_state(), CHILDREN_IDS)
        self.assertEqual(sj["groups"][0]["children"], [4, 3])
        lookup = {it.id: it for it in placeholder_catalog(6)}
        self.assertEqual(json_to_state(sj, lookup), _sample_state())
        with self.assertRaises(ValueError):
            json_to_state(sj)

    def test_given_group_with_missing_optional_fields_then_defaults_applied(self):
        g = group_from_json({"id": 7, "description": "Item 7"})
        self.assertEqual(g.children, ())
        self.assertFalse(g.expanded)

    def test_given_duplicate_ids_when_decoding_then_rejected(self):
        sj = state_to_json(_sample_state())
        sj["pool"].append({"id": 4, "description": "Item 4"})
        with self.assertRaises(ValueError):
            json_to_state(sj)
        sj2 = state_to_json(_sample_state())
        sj2["groups"][1]["id"] = 1
        with self.assertRaises(ValueError):
            json_to_state(sj2)

    def test_given_history_when_roundtrip_then_order_kept(self):
        h = (UndoStep(1, 3), UndoStep(2, 4))
        hj = history_to_json(h)
        self.assertEqual(hj[-1], {"groupId": 2, "itemId": 4})
        self.assertEqual(json_to_history(hj), h)
        self.assertEqual(json_to_history(None), ())


class TestCatalog(unittest.TestCase):
    def test_given_odd_catalog_when_split_then_extra_item_goes_to_pool(self):
        s = split_catalog(placeholder_catalog(5))
        self.assertEqual([g.id for g in s.groups], [1, 2])
        self.assertEqual([it.id for it in s.pool], [3, 4, 5])

    def test_given_seed_when_generating_then_deterministic_permutation(self):
        a = placeholder_catalog(10, seed=3)
        b = placeholder_catalog(10, seed=3)
        self.assertEqual(a, b)
        self.assertEqual(sorted(it.id for it in a), list(range(1, 11)))

    def test_given_state_outside_catalog_when_checking_then_problems_listed(self):
        catalog = placeholder_catalog(4)
        fresh = split_catalog(catalog)
        self.assertEqual(catalog_problems(fresh, catalog), [])
        ghost = AssignmentState(pool=(Item(999, "ghost"),), groups=fresh.groups)
        problems = catalog_problems(ghost, catalog)
        self.assertIn("item 999 is not in the catalog", problems)
        self.assertIn("item 3 is missing", problems)
        no_groups = AssignmentState(pool=fresh.pool, groups=())
        self.assertEqual(len(catalog_problems(no_groups, catalog)), 1)

    def test_given_duplicate_catalog_when_split_then_value_error(self):
        with self.assertRaises(ValueError):
            split_catalog((Item(1, "a"), Item(1, "b")))
        with self.assertRaises(ValueError):
            placeholder_catalog(-1)


class TestSnapshotDb(unittest.TestCase):
    def test_given_empty_db_when_loading_then_none(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "sub", "assign.db")
            self.assertIsNone(db_load_snapshot(path))
            self.assertTrue(os.path.isfile(path))

    def test_given_saved_state_when_loading_then_equal_and_latest_wins(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "assign.db")
            db_store_snapshot(path, split_catalog(placeholder_catalog(4)))
            db_store_snapshot(path, _sample_state())
            self.assertEqual(db_load_snapshot(path), _sample_state())
            conn = sqlite3.connect(path)
            try:
                (n,) = conn.execute("SELECT COUNT(*) FROM snapshots").fetchone()
            finally:
                conn.close()
            self.assertEqual(n, 1)

    def test_given_gateway_when_saving_then_acknowledged_and_loadable(self):
        with tempfile.TemporaryDirectory() as td:
            gw = SnapshotGateway(os.path.join(td, "assign.db"), name="session-a")
            self.assertIsNone(gw.load())
            self.assertTrue(gw.save(_sample_state()))
            self.assertEqual(gw.load(), _sample_state())
            other = SnapshotGateway(gw.db_path, name="session-b")
            self.assertIsNone(other.load())


if __name__ == "__main__":
    unittest.main(verbosity=2)
