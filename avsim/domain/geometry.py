import math
from typing import Optional, Tuple

Vector2 = Tuple[float, float]

def signed_angle(direction: Vector2, vector: Vector2) -> float:
    """Signed angle from `direction` to `vector` in the x/z ground plane."""
    cross = direction[1] * vector[0] - direction[0] * vector[1]
    dot = direction[0] * vector[0] + direction[1] * vector[1]
    return math.atan2(cross, dot)

def in_direction(direction: Vector2, vector: Vector2, max_angle: float) -> bool:
    angle = signed_angle(direction, vector)
    return -max_angle < angle < max_angle

def vector_between(origin: Vector2, target: Vector2) -> Vector2:
    return (target[0] - origin[0], target[1] - origin[1])

def length(vector: Vector2) -> float:
    return math.hypot(vector[0], vector[1])

def normalize(vector: Vector2) -> Vector2:
    norm = length(vector)
    if norm == 0.0:
        return (0.0, 0.0)
    return (vector[0] / norm, vector[1] / norm)

def distance_to_line(point: Vector2, p1: Vector2, p2: Vector2) -> Optional[float]:
    """Signed distance from `point` to the infinite line through p1 and p2.

    https://en.wikipedia.org/wiki/Distance_from_a_point_to_a_line#Line_defined_by_two_points
    Returns None when p1 and p2 coincide.
    """
    x1, y1 = p1
    x2, y2 = p2
    xc, yc = point
    denominator = math.hypot(x2 - x1, y2 - y1)
    if denominator == 0.0:
        return None
    numerator = (x2 - x1) * (y1 - yc) - (x1 - xc) * (y2 - y1)
    return numerator / denominator
