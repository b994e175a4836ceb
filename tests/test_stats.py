"""Unit tests for engine.stats -- pure measurement arithmetic."""

import unittest

from engine.constants import DEFAULT_CONTENT_LENGTH
from engine.stats import (
    calculate_jitter,
    calculate_ping,
    download_progress,
    format_latency,
    format_speed,
    parse_content_length,
    round_half_up,
    summarize_latency,
    throughput_mbps,
)


class TestRoundHalfUp(unittest.TestCase):
    def test_halves_round_up(self):
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(2.5), 3)

    def test_below_half(self):
        self.assertEqual(round_half_up(55.49), 55)

    def test_integer(self):
        self.assertEqual(round_half_up(38.0), 38)


class TestPingAndJitter(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(calculate_ping([]))
        self.assertIsNone(calculate_jitter([]))
        self.assertEqual(summarize_latency([]), (None, None))

    def test_single_sample(self):
        self.assertEqual(calculate_ping([42.4]), 42)
        self.assertEqual(calculate_jitter([42.4]), 0)

    def test_constant(self):
        self.assertEqual(calculate_jitter([5.0, 5.0, 5.0]), 0)

    def test_worked_example(self):
        # mean = 72.2; deviations 32.2, 30.2, 34.2, 31.2, 127.8 -> 51.12
        samples = [40.0, 42.0, 38.0, 41.0, 200.0]
        self.assertEqual(calculate_ping(samples), 38)
        self.assertEqual(calculate_jitter(samples), 51)

    def test_mean_absolute_not_consecutive_difference(self):
        # Consecutive-difference jitter would be 10; MAD is 5.
        self.assertEqual(calculate_jitter([10.0, 20.0, 10.0, 20.0]), 5)

    def test_ping_rounds_minimum(self):
        self.assertEqual(calculate_ping([12.7, 30.1, 12.2]), 12)

    def test_subset(self):
        ping, jitter = summarize_latency([20.0, 30.0])
        self.assertEqual(ping, 20)
        self.assertEqual(jitter, 5)


class TestContentLength(unittest.TestCase):
    def test_numeric(self):
        self.assertEqual(parse_content_length("1234"), 1234)

    def test_missing(self):
        self.assertEqual(parse_content_length(None), DEFAULT_CONTENT_LENGTH)

    def test_non_numeric(self):
        self.assertEqual(parse_content_length("lots"), DEFAULT_CONTENT_LENGTH)

    def test_zero_or_negative(self):
        self.assertEqual(parse_content_length("0"), DEFAULT_CONTENT_LENGTH)
        self.assertEqual(parse_content_length("-5"), DEFAULT_CONTENT_LENGTH)


class TestDownloadProgress(unittest.TestCase):
    def test_default_length(self):
        self.assertAlmostEqual(download_progress(1_000_000, DEFAULT_CONTENT_LENGTH), 20.0)

    def test_clamped(self):
        self.assertEqual(download_progress(7_500_000, DEFAULT_CONTENT_LENGTH), 100.0)

    def test_partial(self):
        self.assertAlmostEqual(download_progress(250, 1000), 25.0)


class TestThroughput(unittest.TestCase):
    def test_worked_example(self):
        # 10 MB in 4 s -> 19.07 Mbps
        self.assertEqual(throughput_mbps(10_000_000, 4.0), 19)

    def test_binary_megabit(self):
        self.assertEqual(throughput_mbps(1_048_576 // 8, 1.0), 1)

    def test_zero_elapsed(self):
        self.assertEqual(throughput_mbps(1000, 0.0), 0)

    def test_nothing_received(self):
        self.assertEqual(throughput_mbps(0, 2.0), 0)


class TestFormatting(unittest.TestCase):
    def test_speed(self):
        self.assertEqual(format_speed(50), "50.00 Mbps")
        self.assertEqual(format_speed(1500), "1.50 Gbps")

    def test_speed_missing(self):
        self.assertEqual(format_speed(None), "-")

    def test_latency(self):
        self.assertEqual(format_latency(25), "25 ms")
        self.assertEqual(format_latency(1500), "1.50 s")
        self.assertEqual(format_latency(None), "-")


if __name__ == "__main__":
    unittest.main()
