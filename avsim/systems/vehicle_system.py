import math
from typing import Optional, Tuple

import numpy as np

from avsim.domain import config
from avsim.domain.geometry import Vector2, signed_angle

def translation(x: float, z: float) -> np.ndarray:
    transform = np.identity(3)
    transform[0, 2] = x
    transform[1, 2] = z
    return transform

def y_axis_rotation(angle: float) -> np.ndarray:
    """Rotation about the vertical axis, projected onto the x/z plane."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])

def pose_matrix(position: Vector2, heading: Vector2) -> np.ndarray:
    """Rigid transform whose local x axis points along `heading`."""
    hx, hz = heading
    return np.array([
        [hx, -hz, position[0]],
        [hz, hx, position[1]],
        [0.0, 0.0, 1.0],
    ])

class BicycleModel:
    """Kinematic bicycle model of a car steering with its front axle.

    The pose is the centre of the rear axle; local x points forward. Speed
    and steering angle are carried between steps so both can only change
    at bounded rates.
    """

    def __init__(self, transform: Optional[np.ndarray] = None,
                 wheelbase: float = config.WHEELBASE,
                 track_width: float = config.TRACK_WIDTH,
                 max_acceleration: float = config.MAX_ACCELERATION,
                 max_deceleration: float = config.MAX_DECELERATION,
                 max_steering_rate: float = config.MAX_STEERING_RATE):
        self.wheelbase = wheelbase
        self.track_width = track_width
        self.max_acceleration = max_acceleration
        self.max_deceleration = max_deceleration
        self.max_steering_rate = max_steering_rate

        self._start_transform = np.identity(3) if transform is None else np.array(transform, dtype=float)
        self._transform = self._start_transform.copy()
        self._speed = 0.0
        self._steering_angle = 0.0
        self._wheel_angles = (0.0, 0.0)

    def reset(self):
        self._transform = self._start_transform.copy()
        self._speed = 0.0
        self._steering_angle = 0.0
        self._wheel_angles = (0.0, 0.0)

    def step_duty_cycle(self, throttle: float, steering: float, dt: float):
        """Drive from raw inputs.

        - throttle: [-1, 1], fraction of MAX_SPEED
        - steering: [-1, 1], fraction of MAX_STEERING_ANGLE, negative is left
        """
        self.step(throttle * config.MAX_SPEED, steering * config.MAX_STEERING_ANGLE, dt)

    def step(self, target_speed: float, target_steering_angle: float, dt: float):
        self._update_speed(target_speed, dt)

        steering_angle = min(max(target_steering_angle, -config.MAX_STEERING_ANGLE), config.MAX_STEERING_ANGLE)
        max_change = self.max_steering_rate * dt
        self._steering_angle += min(max(steering_angle - self._steering_angle, -max_change), max_change)

        if self._steering_angle == 0:
            delta = translation(self._speed * dt, 0.0)
            self._wheel_angles = (0.0, 0.0)
        else:
            radius = self.wheelbase / math.tan(math.radians(self._steering_angle))
            angular_velocity = self._speed / radius
            dyaw = -angular_velocity * dt

            # rotate about the turning centre, which lies on the rear axle line
            to_centre = translation(0.0, -radius)
            delta = np.linalg.inv(to_centre) @ y_axis_rotation(dyaw) @ to_centre
            self._wheel_angles = self._ackermann_angles(radius)

        self._transform = self._transform @ delta

    def step_towards(self, direction: Vector2, speed: float, dt: float):
        """Snap the heading onto `direction` and drive straight.

        Ignores the steering rate limit, so only small direction changes
        between steps look plausible. `speed` is a duty cycle of MAX_SPEED.
        """
        self._update_speed(speed * config.MAX_SPEED, dt)

        dyaw = signed_angle(self.heading, direction)
        if math.isnan(dyaw):
            dyaw = 0.0

        delta = y_axis_rotation(dyaw)
        delta[0, 2] = self._speed * dt
        self._transform = self._transform @ delta

    def _update_speed(self, target_speed: float, dt: float):
        change = min(max(target_speed - self._speed, -self.max_deceleration * dt), self.max_acceleration * dt)
        self._speed += change

    def _ackermann_angles(self, turning_radius: float) -> Tuple[float, float]:
        # visual only, radians for left and right front wheel
        left = -math.atan(self.wheelbase / (turning_radius - self.track_width / 2))
        right = -math.atan(self.wheelbase / (turning_radius + self.track_width / 2))
        return left, right

    @property
    def transform(self) -> np.ndarray:
        return self._transform.copy()

    @property
    def position(self) -> Vector2:
        return (float(self._transform[0, 2]), float(self._transform[1, 2]))

    @property
    def heading(self) -> Vector2:
        return (float(self._transform[0, 0]), float(self._transform[1, 0]))

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def speed_kph(self) -> float:
        # the model is 1:10, scale up for a realistic readout
        return self._speed * config.KPH_SCALE

    @property
    def steering_angle(self) -> float:
        return self._steering_angle

    @property
    def wheel_angles(self) -> Tuple[float, float]:
        return self._wheel_angles

    def front_axle_transform(self) -> np.ndarray:
        return self._transform @ translation(self.wheelbase, 0.0)

    def vector_from(self, position: Vector2) -> Vector2:
        own = self.position
        return (own[0] - position[0], own[1] - position[1])

    def distance_from(self, position: Vector2) -> float:
        return math.hypot(*self.vector_from(position))
