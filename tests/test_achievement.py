"""Tests for the MSL achievement calculator."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fieldsales.achievement.calculator import (
    build_msl_index,
    compute_achievement,
    sort_by_priority,
    store_achievement,
)
from fieldsales.models.achievement import StoreVisitFacts
from fieldsales.models.records import MSLItem


def facts(category, *skus, store_id=None):
    return StoreVisitFacts(store_id=store_id, store_category=category, bought_skus=frozenset(skus))


class TestComputeAchievement(unittest.TestCase):
    MSL = {"X": {"A", "B", "C"}}

    def test_single_store(self):
        result = compute_achievement(self.MSL, [facts("X", "A", "C")])
        self.assertAlmostEqual(result.stores[0].achievement, 200 / 3)
        self.assertEqual(result.stores[0].matched, 2)
        self.assertEqual(result.stores[0].msl_size, 3)
        self.assertAlmostEqual(result.overall, 66.6667, places=3)

    def test_unweighted_mean(self):
        result = compute_achievement(self.MSL, [facts("X", "A", "C"), facts("X", "Z")])
        self.assertAlmostEqual(result.overall, 100 / 3)
        self.assertEqual(result.included_count, 2)

    def test_category_without_msl_is_excluded(self):
        """No MSL at all: zero stores included and overall 0, not NaN."""
        result = compute_achievement({}, [facts("X", "A")])
        self.assertEqual(result.overall, 0)
        self.assertEqual(result.included_count, 0)
        self.assertEqual(result.excluded_count, 1)

    def test_empty_msl_set_is_excluded(self):
        result = compute_achievement({"X": set()}, [facts("X", "A")])
        self.assertEqual(result.included_count, 0)

    def test_excluded_store_does_not_change_denominator(self):
        msl = {"X": {"A", "B"}}
        result = compute_achievement(msl, [facts("X", "A"), facts("Y", "A", "B")])
        self.assertAlmostEqual(result.overall, 50)
        self.assertEqual(result.excluded_count, 1)

    def test_no_visits(self):
        result = compute_achievement(self.MSL, [])
        self.assertEqual(result.overall, 0)
        self.assertEqual(result.stores, [])

    def test_non_msl_skus_do_not_count(self):
        result = compute_achievement({"X": {"A"}}, [facts("X", "B", "C", "D")])
        self.assertEqual(result.overall, 0)

    def test_store_achievement_keeps_store_id(self):
        scored = store_achievement(self.MSL, facts("X", "A", "B", "C", store_id="s1"))
        self.assertEqual(scored.store_id, "s1")
        self.assertEqual(scored.achievement, 100)
        self.assertIsNone(store_achievement(self.MSL, facts("Y", "A")))


class TestMslIndex(unittest.TestCase):
    def test_build_index(self):
        items = [
            MSLItem(category="X", sku_code="A", product_name="a", priority=1),
            MSLItem(category="X", sku_code="B", product_name="b", priority=2),
            MSLItem(category="Y", sku_code="A", product_name="a", priority=1),
        ]
        self.assertEqual(build_msl_index(items), {"X": frozenset({"A", "B"}), "Y": frozenset({"A"})})

    def test_sort_by_priority(self):
        items = [
            MSLItem(category="X", sku_code=sku, product_name=sku, priority=p)
            for sku, p in (("C", 3), ("A", 1), ("B", 2), ("A2", 1))
        ]
        self.assertEqual([i.sku_code for i in sort_by_priority(items)], ["A", "A2", "B", "C"])


if __name__ == "__main__":
    unittest.main()
