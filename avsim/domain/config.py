# Simulation Configuration
from pathlib import Path

# Road Graph
ROAD_GRAPH_PATH = Path(__file__).resolve().parent.parent / "assets" / "road_graph.obj"
EGO_START_NODE = 0
OBSTACLE_START_NODES = (12, 120)

# Vehicle Geometry (1:10 scale robocar)
WHEELBASE = 0.26         # m
TRACK_WIDTH = 0.16       # m
MAX_STEERING_ANGLE = 30.0  # deg
MAX_SPEED = 2.7          # m/s
KPH_SCALE = 36.0         # m/s -> km/h at 1:1 scale

# Vehicle Dynamics (defaults, tunable at runtime)
MAX_ACCELERATION = 1.0   # m/s^2
MAX_DECELERATION = 3.0   # m/s^2
MAX_STEERING_RATE = 90.0 # deg/s

# Path Planning
FORWARD_ANGLE = 1.57         # rad, cone for "in direction of travel"
EGO_LOOKAHEAD = 8            # nodes ahead of the current node
LANE_SEARCH_RADIUS = 2.0     # m, max distance to a node on the left lane
LANE_SEARCH_CONE = 0.75      # rad
LANE_FIRST_STEP_ANGLE = 0.6  # rad, rejects near-parallel false positives

# Perception
MAX_PERCEPTION_DISTANCE = 4.0  # m
PATH_CORRIDOR = 0.1            # m, max offset of an obstacle from the path line

# Obstacles
OBSTACLE_LOOKAHEAD = 4
OBSTACLE_STANLEY_GAIN = 1.5
OBSTACLE_SPEED = 0.4     # m/s

# Controller Defaults
STANLEY_GAIN = 1.0
PID_P = 1.0
PID_I = 0.0
PID_D = 0.0
GOAL_DISTANCE = 0.3       # m, gap the PID keeps to the lead vehicle
OVERTAKE_DISTANCE = 0.6   # m, gap that triggers a lane change
MAX_SPEED_DUTY = 0.5

# Telemetry
TELEMETRY_LENGTH = 60
TELEMETRY_DECIMATION = 10  # ticks between chart samples
DASHBOARD_DECIMATION = 2   # ticks between dashboard updates
WHEEL_ANGLE_SCALE = 18     # steering wheel turns per road wheel degree

# Camera
PERCEPTION_CLIPPING = MAX_PERCEPTION_DISTANCE
DEFAULT_CLIPPING = 30.0

# Service Loop
TARGET_FPS = 60
