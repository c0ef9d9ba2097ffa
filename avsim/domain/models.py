from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from avsim.domain import config

class SimulationMode(str, Enum):
    MANUAL_CONTROL = "MANUAL_CONTROL"
    LATERAL_CONTROL = "LATERAL_CONTROL"
    LONGITUDINAL_CONTROL = "LONGITUDINAL_CONTROL"
    OVERTAKE_MANEUVER = "OVERTAKE_MANEUVER"

class LaneChoice(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    AUTOMATIC = "AUTOMATIC"

class IntersectionHeuristic(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    MIDDLE = "MIDDLE"

class SimulationConfig(BaseModel):
    """Snapshot of everything the presentation layer can tune.

    Frozen: a new snapshot replaces the old one as a whole, so a tick never
    sees a half-written configuration.
    """
    model_config = ConfigDict(frozen=True)

    mode: SimulationMode = SimulationMode.MANUAL_CONTROL
    lane_choice: LaneChoice = LaneChoice.RIGHT
    heuristic: IntersectionHeuristic = IntersectionHeuristic.MIDDLE
    running: bool = False

    # manual control, duty cycles
    throttle: float = Field(0.0, ge=-1.0, le=1.0)
    steering: float = Field(0.0, ge=-1.0, le=1.0)

    # longitudinal control
    max_speed: float = Field(config.MAX_SPEED_DUTY, ge=0.0, le=1.0)
    p: float = config.PID_P
    i: float = config.PID_I
    d: float = config.PID_D
    goal_distance: float = Field(config.GOAL_DISTANCE, ge=0.0)
    overtake_distance: float = Field(config.OVERTAKE_DISTANCE, ge=0.0)

    # vehicle limits
    max_acceleration: float = Field(config.MAX_ACCELERATION, gt=0.0)
    max_deceleration: float = Field(config.MAX_DECELERATION, gt=0.0)
    max_steering_rate: float = Field(config.MAX_STEERING_RATE, gt=0.0)

    # lateral control
    stanley_gain: float = Field(config.STANLEY_GAIN, ge=0.0)

    # camera
    perception_view: bool = False
    onboard_camera: bool = False

class ConfigUpdate(BaseModel):
    mode: Optional[SimulationMode] = None
    lane_choice: Optional[LaneChoice] = None
    heuristic: Optional[IntersectionHeuristic] = None
    max_speed: Optional[float] = Field(None, ge=0.0, le=1.0)
    p: Optional[float] = None
    i: Optional[float] = None
    d: Optional[float] = None
    goal_distance: Optional[float] = Field(None, ge=0.0)
    overtake_distance: Optional[float] = Field(None, ge=0.0)
    max_acceleration: Optional[float] = Field(None, gt=0.0)
    max_deceleration: Optional[float] = Field(None, gt=0.0)
    max_steering_rate: Optional[float] = Field(None, gt=0.0)
    stanley_gain: Optional[float] = Field(None, ge=0.0)
    perception_view: Optional[bool] = None
    onboard_camera: Optional[bool] = None

class ManualControl(BaseModel):
    throttle: float = Field(..., ge=-1.0, le=1.0)
    steering: float = Field(..., ge=-1.0, le=1.0)

class ControlCommand(BaseModel):
    target_speed: float
    steering_angle: float

class TickReport(BaseModel):
    stepped: bool = False
    dt: float = 0.0
    path: List[int] = []
    laneChangeEngaged: bool = False
    gapDistance: Optional[float] = None
    command: Optional[ControlCommand] = None
    reset: bool = False

# API/Response Models

class VehiclePose(BaseModel):
    id: str
    x: float
    z: float
    headingX: float
    headingZ: float
    speed: float # km/h
    steeringAngle: float # deg
    currentNode: int

class PathPoint(BaseModel):
    x: float
    z: float

class SimulationSnapshot(BaseModel):
    tick: int
    time: float
    running: bool
    mode: SimulationMode
    laneChangeEngaged: bool
    ego: VehiclePose
    obstacles: List[VehiclePose]
    path: List[PathPoint]

class TelemetrySnapshot(BaseModel):
    speeds: List[float]
    steeringAngles: List[float]
    crossTrackErrors: List[float]
    headingErrors: List[float]
    distances: List[Optional[float]] # None when no obstacle was detected
    dashboardSpeed: int
    dashboardWheelAngle: int

class GraphNodeView(BaseModel):
    id: int
    x: float
    z: float

class GraphView(BaseModel):
    nodes: List[GraphNodeView]
    edges: List[List[int]]
