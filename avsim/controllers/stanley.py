import math
from typing import NamedTuple

import numpy as np

from avsim.domain.geometry import distance_to_line
from avsim.domain.graph import GraphNode

class StanleyResult(NamedTuple):
    steering_angle: float     # deg
    cross_track_error: float  # m
    heading_error: float      # rad

class StanleyController:
    """Geometric path tracking on the front axle (Stanley method)."""

    @staticmethod
    def get_steering_angle(previous_waypoint: GraphNode, next_waypoint: GraphNode, current_speed: float,
                           front_axle_transform: np.ndarray, k: float) -> StanleyResult:
        xc = float(front_axle_transform[0, 2])
        yc = float(front_axle_transform[1, 2])
        hx = float(front_axle_transform[0, 0])
        hz = float(front_axle_transform[1, 0])
        dx = next_waypoint.x - previous_waypoint.x
        dz = next_waypoint.z - previous_waypoint.z

        # coincident waypoints carry no line, so no cross track correction
        cross_track_error = distance_to_line((xc, yc), previous_waypoint.position, next_waypoint.position)
        if cross_track_error is None:
            cross_track_error = 0.0

        heading_error = -math.atan2(hz * dx - hx * dz, hx * dx + hz * dz)
        cross_track_steering = math.atan2(k * cross_track_error, current_speed)

        steering_angle = math.degrees(heading_error + cross_track_steering)
        return StanleyResult(steering_angle, cross_track_error, heading_error)
