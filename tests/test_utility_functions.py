"""Tests for the balancing rule helpers."""

import unittest

from balanced_merkle.utils import count_last_level_leaves, floor_log2, is_power_of_two, level_sizes


class TestBalancingRule(unittest.TestCase):

    def test_is_power_of_two(self):
        for n in [1, 2, 4, 8, 1024, 1 << 40]:
            with self.subTest(n=n):
                self.assertTrue(is_power_of_two(n))
        for n in [0, -2, 3, 5, 6, 7, 9, 1023, (1 << 40) + 1]:
            with self.subTest(n=n):
                self.assertFalse(is_power_of_two(n))

    def test_floor_log2(self):
        expected_results = {1: 0, 2: 1, 3: 1, 4: 2, 5: 2, 7: 2, 8: 3, 1000: 9, 1_000_000: 19}
        for n, expected in expected_results.items():
            with self.subTest(n=n):
                self.assertEqual(floor_log2(n), expected)

    def test_floor_log2_exact_for_large_values(self):
        # float log2 rounds 2**53 - 1 up to 53
        n = (1 << 53) - 1
        self.assertEqual(floor_log2(n), 52)
        self.assertEqual(floor_log2(1 << 53), 53)

    def test_floor_log2_invalid_inputs(self):
        for n in [0, -1, -8]:
            with self.subTest(n=n), self.assertRaises(ValueError):
                floor_log2(n)

    def test_count_last_level_leaves(self):
        expected_results = {
            1: 1, 2: 2, 3: 2, 4: 4, 5: 2, 6: 4, 7: 6, 8: 8,
            9: 2, 10: 4, 15: 14, 16: 16, 17: 2, 1_000_000: 951_424,
        }
        for n, expected in expected_results.items():
            with self.subTest(n=n):
                self.assertEqual(count_last_level_leaves(n), expected)

    def test_count_last_level_leaves_is_even_and_bounded(self):
        for n in range(2, 600):
            with self.subTest(n=n):
                m = count_last_level_leaves(n)
                self.assertEqual(m % 2, 0)
                self.assertLessEqual(m, n)
                expected = n // 2 if is_power_of_two(n) else 1 << floor_log2(n)
                self.assertEqual(m // 2 + (n - m), expected)

    def test_count_last_level_leaves_invalid_inputs(self):
        for n in [0, -1]:
            with self.subTest(n=n), self.assertRaises(ValueError):
                count_last_level_leaves(n)

    def test_level_sizes(self):
        expected_results = {
            1: [1],
            2: [2, 1],
            3: [3, 2, 1],
            4: [4, 2, 1],
            5: [5, 4, 2, 1],
            6: [6, 4, 2, 1],
            9: [9, 8, 4, 2, 1],
            16: [16, 8, 4, 2, 1],
        }
        for n, expected in expected_results.items():
            with self.subTest(n=n):
                self.assertEqual(level_sizes(n), expected)


if __name__ == "__main__":
    unittest.main()
