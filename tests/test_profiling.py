"""Tests for build and verify profiling"""
# pylint: skip-file

import unittest

from merkle_trees import build, MerkleTree
from merkle_trees.profiling import OperationMetrics, PerformanceTracker, Sample, track_performance


class TestPerformanceTracker(unittest.TestCase):

    def setUp(self):
        self.tracker = PerformanceTracker.get_instance()
        self.tracker.reset()
        self.tracker.enable()

    def tearDown(self):
        self.tracker.disable()
        self.tracker.reset()

    def test_singleton(self):
        self.assertIs(PerformanceTracker.get_instance(), self.tracker)

    def test_build_counts_payloads(self):
        build([b"a", b"b", b"c"])
        build([b"d"])
        metrics = self.tracker.operations["TreeBuilder.build"]
        self.assertEqual(metrics.unit, "payloads")
        self.assertEqual(metrics.calls, 2)
        self.assertEqual([s.units for s in metrics.samples], [3, 1])
        self.assertEqual(metrics.total_units, 4)

    def test_verify_counts_nodes(self):
        tree = build([b"a", b"b", b"c"])
        tree.verify()
        tree.verify()
        metrics = self.tracker.operations["Verifier.verify"]
        self.assertEqual(metrics.unit, "nodes")
        self.assertEqual(metrics.calls, 2)
        self.assertEqual(metrics.total_units, 2 * len(tree))

    def test_failed_build_is_timed_with_no_units(self):
        with self.assertRaises(ValueError):
            build([])
        metrics = self.tracker.operations["TreeBuilder.build"]
        self.assertEqual(metrics.calls, 1)
        self.assertEqual(metrics.total_units, 0)

    def test_disabled_records_nothing(self):
        self.tracker.disable()
        build([b"a"])
        self.assertEqual(self.tracker.operations, {})

    def test_report(self):
        tree = build([b"a", b"b"])
        tree.verify()
        report = MerkleTree.get_performance_report()
        self.assertIn("TreeBuilder.build", report)
        self.assertIn("payloads/s", report)
        self.assertIn("nodes/s", report)
        MerkleTree.reset_performance_metrics()
        self.assertEqual(MerkleTree.get_performance_report(), "No performance data collected.")

    def test_report_sort_order(self):
        self.tracker.record("small", "nodes", 0.1, 5)
        self.tracker.record("large", "nodes", 0.2, 1)
        rows = self.tracker.report(sort_by="total_units").splitlines()[3:]
        self.assertTrue(rows[0].startswith("small"))
        rows = self.tracker.report(sort_by="total_time").splitlines()[3:]
        self.assertTrue(rows[0].startswith("large"))

    def test_custom_count(self):
        @track_performance("double", "items", lambda result, items: len(items))
        def double(items):
            return [x * 2 for x in items]

        self.assertEqual(double([1, 2, 3]), [2, 4, 6])
        self.assertEqual(self.tracker.operations["double"].total_units, 3)


class TestOperationMetrics(unittest.TestCase):

    def test_aggregates(self):
        metrics = OperationMetrics("payloads")
        for elapsed, units in ((0.3, 30), (0.1, 10), (0.1, 20)):
            metrics.samples.append(Sample(elapsed, units))
        self.assertEqual(metrics.calls, 3)
        self.assertAlmostEqual(metrics.total_time, 0.5)
        self.assertAlmostEqual(metrics.median_time, 0.1)
        self.assertEqual(metrics.total_units, 60)
        self.assertAlmostEqual(metrics.throughput, 120.0)

    def test_empty(self):
        metrics = OperationMetrics("nodes")
        self.assertEqual(metrics.calls, 0)
        self.assertEqual(metrics.median_time, 0.0)
        self.assertEqual(metrics.throughput, 0.0)


if __name__ == "__main__":
    unittest.main()
