from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

class SceneRenderer(ABC):
    """What the simulation needs from whatever draws the scene."""

    @abstractmethod
    def update_vehicle(self, vehicle_id: str, transform: np.ndarray):
        pass

    @abstractmethod
    def draw_path(self, points: Sequence[Point]):
        pass

    @abstractmethod
    def remove_path(self):
        pass

    @abstractmethod
    def set_view_mode(self, perception_view: bool, clipping_distance: float):
        pass

    @abstractmethod
    def set_camera_mode(self, onboard: bool):
        pass

class SceneRecorder(SceneRenderer):
    """Keeps the latest scene in memory for the API and for tests."""

    def __init__(self):
        self.transforms: Dict[str, np.ndarray] = {}
        self.path_points: List[Point] = []
        self.redraw_count = 0
        self.perception_view = False
        self.clipping_distance = 0.0
        self.onboard_camera = False

    def update_vehicle(self, vehicle_id: str, transform: np.ndarray):
        self.transforms[vehicle_id] = transform

    def draw_path(self, points: Sequence[Point]):
        points = list(points)
        if points == self.path_points:
            return
        self.path_points = points
        self.redraw_count += 1

    def remove_path(self):
        self.path_points = []

    def set_view_mode(self, perception_view: bool, clipping_distance: float):
        self.perception_view = perception_view
        self.clipping_distance = clipping_distance

    def set_camera_mode(self, onboard: bool):
        self.onboard_camera = onboard
