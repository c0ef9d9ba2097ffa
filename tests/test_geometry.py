import math
import unittest

from avsim.domain.geometry import distance_to_line, in_direction, signed_angle

def rotate(vector, angle):
    c, s = math.cos(angle), math.sin(angle)
    return (c * vector[0] - s * vector[1], s * vector[0] + c * vector[1])

class TestInDirection(unittest.TestCase):
    DIRECTIONS = [(1.0, 0.0), (0.0, 1.0), (-0.6, 0.8), (0.70710678, -0.70710678)]

    def test_angle_battery(self):
        for max_angle in (0.6, 1.0, 1.57):
            for direction in self.DIRECTIONS:
                with self.subTest(max_angle=max_angle, direction=direction):
                    self.assertTrue(in_direction(direction, rotate(direction, 0.0), max_angle))
                    self.assertTrue(in_direction(direction, rotate(direction, max_angle / 2), max_angle))
                    self.assertTrue(in_direction(direction, rotate(direction, -max_angle / 2), max_angle))
                    self.assertFalse(in_direction(direction, rotate(direction, max_angle + 1e-6), max_angle))
                    self.assertFalse(in_direction(direction, rotate(direction, -max_angle - 1e-6), max_angle))
                    self.assertFalse(in_direction(direction, rotate(direction, math.pi), max_angle))

    def test_negated_vector_is_not_in_direction(self):
        for max_angle in (1.0, 1.57):
            for direction in self.DIRECTIONS:
                for angle in (0.0, max_angle / 2, -max_angle / 2):
                    vector = rotate(direction, angle)
                    negated = (-vector[0], -vector[1])
                    self.assertTrue(in_direction(direction, vector, max_angle))
                    self.assertFalse(in_direction(direction, negated, max_angle))

    def test_boundary_is_exclusive(self):
        # perpendicular vector sits exactly on a quarter turn
        self.assertFalse(in_direction((1.0, 0.0), (0.0, 1.0), math.pi / 2))
        self.assertTrue(in_direction((1.0, 0.0), (0.0, 1.0), math.pi / 2 + 1e-9))

    def test_signed_angle_sign(self):
        # +z relative to +x is a negative angle in the ground plane convention
        self.assertAlmostEqual(signed_angle((1.0, 0.0), (0.0, 1.0)), -math.pi / 2)
        self.assertAlmostEqual(signed_angle((1.0, 0.0), (0.0, -1.0)), math.pi / 2)

class TestDistanceToLine(unittest.TestCase):
    def test_signed_distance(self):
        self.assertAlmostEqual(distance_to_line((0.5, 0.0), (0.0, 1.0), (1.0, 1.0)), 1.0)
        self.assertAlmostEqual(distance_to_line((0.5, 2.0), (0.0, 1.0), (1.0, 1.0)), -1.0)
        self.assertAlmostEqual(distance_to_line((7.0, 1.0), (0.0, 1.0), (1.0, 1.0)), 0.0)

    def test_coincident_points(self):
        self.assertIsNone(distance_to_line((0.5, 0.0), (1.0, 1.0), (1.0, 1.0)))

if __name__ == '__main__':
    unittest.main()
