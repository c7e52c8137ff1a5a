import unittest

from local_embeddings import metrics


class MetricsTests(unittest.TestCase):
    def setUp(self):
        metrics.reset()

    def tearDown(self):
        metrics.reset()

    def test_empty_snapshot(self):
        snap = metrics.snapshot()
        self.assertEqual(snap["embed"]["requests"], 0)
        self.assertEqual(snap["batch"]["avg_latency_per_text_ms"], 0.0)

    def test_averages(self):
        metrics.record_embed(10.0)
        metrics.record_embed(20.0)
        metrics.record_batch(30.0, 3)
        metrics.record_load(500.0)
        snap = metrics.snapshot()
        self.assertEqual(snap["embed"]["requests"], 2)
        self.assertEqual(snap["embed"]["avg_latency_ms"], 15.0)
        self.assertEqual(snap["batch"]["texts"], 3)
        self.assertEqual(snap["batch"]["avg_latency_per_text_ms"], 10.0)
        self.assertEqual(snap["pipeline"]["loads"], 1)


if __name__ == "__main__":
    unittest.main()
