import logging
import math
from typing import NamedTuple, Optional, Sequence

from avsim.domain import config
from avsim.domain.geometry import distance_to_line, in_direction
from avsim.domain.graph import Path
from avsim.domain.models import LaneChoice, SimulationConfig
from avsim.systems.planning_system import PathPlanner
from avsim.systems.vehicle_system import BicycleModel

logger = logging.getLogger(__name__)

class LaneDecision(NamedTuple):
    path: Path
    gap_distance: Optional[float]
    lane_change: bool

class LaneChangeArbitrator:
    """Decides which lane the ego vehicle drives on this tick.

    Only the closest obstacle on the path matters. In automatic mode the
    left lane is taken once the gap falls below the overtake distance and
    the left lane itself is clear for at least that distance.
    """

    def __init__(self, perception_distance: float = config.MAX_PERCEPTION_DISTANCE,
                 corridor: float = config.PATH_CORRIDOR):
        self.perception_distance = perception_distance
        self.corridor = corridor

    def scan_obstacle_gap(self, path: Path, ego: BicycleModel, obstacles: Sequence[BicycleModel]) -> Optional[float]:
        distances = []
        for obstacle in obstacles:
            vector = obstacle.vector_from(ego.position)
            if not in_direction(ego.heading, vector, config.FORWARD_ANGLE):
                continue

            distance = math.hypot(*vector) - ego.wheelbase
            if distance >= self.perception_distance:
                continue

            for p1, p2 in zip(path.nodes, path.nodes[1:]):
                offset = distance_to_line(obstacle.position, p1.position, p2.position)
                if offset is not None and abs(offset) < self.corridor:
                    distances.append(distance)
                    break

        return min(distances) if distances else None

    def arbitrate(self, path: Path, ego: BicycleModel, planner: PathPlanner,
                  obstacles: Sequence[BicycleModel], sim_config: SimulationConfig) -> LaneDecision:
        gap = self.scan_obstacle_gap(path, ego, obstacles)
        if gap is None:
            return LaneDecision(path, None, False)

        if sim_config.lane_choice == LaneChoice.AUTOMATIC and gap < sim_config.overtake_distance:
            left_path = planner.generate_local_path_on_left_lane(ego.position, ego.heading, sim_config.heuristic)
            if left_path is not None and len(left_path) > 3:
                left_gap = self.scan_obstacle_gap(left_path, ego, obstacles)
                if left_gap is None or left_gap > sim_config.overtake_distance:
                    logger.debug("Overtaking, gap %.2f m, left lane gap %s", gap, left_gap)
                    return LaneDecision(left_path, gap, True)

        return LaneDecision(path, gap, False)
