import math
from collections import deque
from typing import Deque

from avsim.domain import config

def _buffer(fill: float) -> Deque[float]:
    return deque([fill] * config.TELEMETRY_LENGTH, maxlen=config.TELEMETRY_LENGTH)

class Telemetry:
    """Rolling chart samples and low-latency dashboard readouts."""

    def __init__(self):
        self.speeds = _buffer(0.0)
        self.steering_angles = _buffer(0.0)
        self.cross_track_errors = _buffer(0.0)
        self.heading_errors = _buffer(0.0)
        self.distances = _buffer(math.nan) # NaN: no obstacle ahead
        self.dashboard_speed = 0
        self.dashboard_wheel_angle = 0

    def add_speed(self, value: float):
        self.speeds.append(value)

    def add_steering_angle(self, value: float):
        self.steering_angles.append(value)

    def add_cross_track_error(self, value: float):
        self.cross_track_errors.append(value)

    def add_heading_error(self, value: float):
        self.heading_errors.append(value)

    def add_distance(self, value: float):
        self.distances.append(value)

    def set_speed(self, speed: float):
        value = int(speed)
        if value != self.dashboard_speed:
            self.dashboard_speed = value

    def set_wheel_angle(self, steering_angle: float):
        value = int(steering_angle * config.WHEEL_ANGLE_SCALE)
        if value != self.dashboard_wheel_angle:
            self.dashboard_wheel_angle = value

    def reset_dashboard(self):
        self.set_speed(0)
        self.set_wheel_angle(0)
