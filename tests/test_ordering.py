#!/usr/bin/env python3
"""
Unit tests for the display-position rules in app/services/ordering.py.

Run with:
    python -m pytest tests/test_ordering.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.services.ordering import MAX_POSITION, Position, heal_positions


class TestPosition(unittest.TestCase):

    def test_unassigned(self):
        self.assertFalse(Position().assigned)
        self.assertIsNone(Position(None).value)
        self.assertEqual(Position(None), Position(None))

    def test_assigned(self):
        p = Position(3)
        self.assertTrue(p.assigned)
        self.assertEqual(p.value, 3)

    def test_zero_is_assigned(self):
        self.assertTrue(Position(0).assigned)

    def test_negative_rejected(self):
        with self.assertRaises(ValueError):
            Position(-1)

    def test_non_integer_rejected(self):
        for bad in ('1', 1.5, True):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    Position(bad)

    def test_equality_and_hash(self):
        self.assertEqual(Position(2), Position(2))
        self.assertNotEqual(Position(2), Position(3))
        self.assertNotEqual(Position(0), Position(None))
        self.assertEqual(len({Position(1), Position(1), Position(None)}), 2)

    def test_repr(self):
        self.assertEqual(repr(Position(4)), 'Position(4)')
        self.assertEqual(repr(Position(None)), 'Position(unassigned)')

    def test_upper_bound(self):
        self.assertEqual(Position(MAX_POSITION).value, MAX_POSITION)
        for bad in (MAX_POSITION + 1, 2 ** 64):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    Position(bad)


class TestHealPositions(unittest.TestCase):

    def test_nothing_to_heal(self):
        self.assertEqual(heal_positions([Position(0), Position(5)]), [])

    def test_empty(self):
        self.assertEqual(heal_positions([]), [])

    def test_unassigned_get_scan_index(self):
        plan = heal_positions([Position(0), Position(None), Position(None)])
        self.assertEqual(plan, [(1, Position(1)), (2, Position(2))])

    def test_assigned_left_alone_even_with_collisions(self):
        plan = heal_positions([Position(4), Position(4), Position(None)])
        self.assertEqual(plan, [(2, Position(2))])

    def test_accepts_generator(self):
        plan = heal_positions(Position(v) for v in (None, None))
        self.assertEqual(plan, [(0, Position(0)), (1, Position(1))])


if __name__ == '__main__':
    unittest.main()
