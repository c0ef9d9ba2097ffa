import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from avsim.arbitration.lane_change_arbitrator import LaneChangeArbitrator
from avsim.controllers.pid import PIDController
from avsim.controllers.stanley import StanleyController
from avsim.domain import config
from avsim.domain.graph import Path, RoadGraph
from avsim.domain.models import (
    ControlCommand, IntersectionHeuristic, LaneChoice, SimulationConfig, SimulationMode, TickReport
)
from avsim.domain.state import SimulationState
from avsim.kernel.renderer import SceneRecorder, SceneRenderer
from avsim.kernel.telemetry import Telemetry
from avsim.systems.planning_system import PathPlanner
from avsim.systems.vehicle_system import BicycleModel, pose_matrix

logger = logging.getLogger(__name__)

EGO_ID = "ego"

@dataclass
class Agent:
    vehicle_id: str
    model: BicycleModel
    planner: PathPlanner

class SimulationOrchestrator:
    """Runs one ego vehicle and its obstacles through a fixed per-tick pipeline.

    Everything the presentation layer controls arrives as a SimulationConfig
    snapshot with each tick; the orchestrator never reads shared state.
    """

    def __init__(self, ego: Agent, obstacles: Sequence[Agent],
                 renderer: Optional[SceneRenderer] = None,
                 arbitrator: Optional[LaneChangeArbitrator] = None):
        self.ego = ego
        self.obstacles: List[Agent] = list(obstacles)
        self.pid = PIDController()
        self.renderer = renderer if renderer is not None else SceneRecorder()
        self.arbitrator = arbitrator if arbitrator is not None else LaneChangeArbitrator()
        self.telemetry = Telemetry()
        self.state = SimulationState()
        self.path = Path()
        self._publish_poses()

    @classmethod
    def from_graph(cls, graph: RoadGraph, ego_start: int = config.EGO_START_NODE,
                   obstacle_starts: Sequence[int] = config.OBSTACLE_START_NODES,
                   renderer: Optional[SceneRenderer] = None) -> "SimulationOrchestrator":
        ego = cls._create_agent(graph, EGO_ID, ego_start)
        obstacles = [cls._create_agent(graph, f"obstacle-{i + 1}", node_id) for i, node_id in enumerate(obstacle_starts)]
        return cls(ego, obstacles, renderer=renderer)

    @staticmethod
    def _create_agent(graph: RoadGraph, vehicle_id: str, node_id: int) -> Agent:
        position, heading = graph.start_pose(node_id)
        model = BicycleModel(transform=pose_matrix(position, heading))
        return Agent(vehicle_id, model, PathPlanner(graph, graph.get_node(node_id)))

    def on_frame(self, timestamp: float, sim_config: SimulationConfig) -> TickReport:
        """Render loop hook, called once per frame with the frame timestamp."""
        clipping = config.PERCEPTION_CLIPPING if sim_config.perception_view else config.DEFAULT_CLIPPING
        self.renderer.set_view_mode(sim_config.perception_view, clipping)
        self.renderer.set_camera_mode(sim_config.onboard_camera)

        last_update = self.state.last_update
        dt = timestamp - last_update if last_update is not None else 0.0
        self.state.last_update = timestamp
        return self.tick(dt, sim_config)

    def tick(self, dt: float, sim_config: SimulationConfig) -> TickReport:
        report = TickReport(dt=dt)

        if sim_config.running and dt > 0:
            # 1. Vehicle Limits
            ego = self.ego.model
            ego.max_acceleration = sim_config.max_acceleration
            ego.max_deceleration = sim_config.max_deceleration
            ego.max_steering_rate = sim_config.max_steering_rate

            # 2. Ego Vehicle
            if sim_config.mode == SimulationMode.MANUAL_CONTROL:
                self._simulate_manual_control(dt, sim_config)
            else:
                self._run_av_pipeline(dt, sim_config, report)

            # 3. Obstacles
            for obstacle in self.obstacles:
                self._simulate_obstacle(obstacle, dt)
            self._publish_poses()

            # 4. Time Advance
            self.state.counter = (self.state.counter + 1) % config.TELEMETRY_DECIMATION
            self.state.tick_id += 1
            self.state.time += dt
            self.state.reset_armed = True
            report.stepped = True

        # 5. Reset once the simulation was stopped
        if not sim_config.running and self.state.reset_armed:
            self.reset()
            report.reset = True

        return report

    def reset(self):
        self.state.counter = 0
        self.state.lane_change_engaged = False
        self.state.gap_distance = None
        self.ego.model.reset()
        self.ego.planner.reset()
        self.pid.reset()
        for obstacle in self.obstacles:
            obstacle.model.reset()
            obstacle.planner.reset()
        self.path = Path()
        self.renderer.remove_path()
        self._publish_poses()
        self.telemetry.reset_dashboard()
        self.state.reset_armed = False
        logger.info("Simulation reset after %d ticks", self.state.tick_id)

    def scan_obstacle_gap(self, path: Path) -> Optional[float]:
        return self.arbitrator.scan_obstacle_gap(path, self.ego.model, [o.model for o in self.obstacles])

    def _sample(self) -> bool:
        return self.state.counter % config.TELEMETRY_DECIMATION == 0

    def _update_dashboard(self):
        if self.state.counter % config.DASHBOARD_DECIMATION == 0:
            self.telemetry.set_speed(self.ego.model.speed_kph)
            self.telemetry.set_wheel_angle(self.ego.model.steering_angle)

    def _simulate_manual_control(self, dt: float, sim_config: SimulationConfig):
        ego = self.ego.model
        ego.step_duty_cycle(sim_config.throttle, sim_config.steering, dt)

        if self._sample():
            self.telemetry.add_speed(ego.speed_kph)
            self.telemetry.add_steering_angle(ego.steering_angle)
        self._update_dashboard()

    def _run_av_pipeline(self, dt: float, sim_config: SimulationConfig, report: TickReport):
        ego = self.ego.model
        planner = self.ego.planner

        # a. local path on the chosen lane
        if sim_config.lane_choice == LaneChoice.LEFT:
            path = planner.generate_local_path_on_left_lane(ego.position, ego.heading, sim_config.heuristic)
        else:
            path = planner.generate_local_path(ego.position, ego.heading, sim_config.heuristic)

        # b. need the own node plus one segment ahead of it
        if path is None or len(path) <= 3:
            logger.debug("Local path too short, skipping control")
            return

        # c. speed and lane from obstacles ahead
        speed = sim_config.max_speed * config.MAX_SPEED
        decision = self.arbitrator.arbitrate(path, ego, planner, [o.model for o in self.obstacles], sim_config)
        if decision.gap_distance is not None:
            if not decision.lane_change:
                pid_speed = self.pid.calculate(target=decision.gap_distance - sim_config.goal_distance,
                                               previous=ego.speed,
                                               p=sim_config.p, i=sim_config.i, d=sim_config.d,
                                               dt=dt)
                speed = min(speed, max(pid_speed, 0.0))
                if self._sample():
                    self.telemetry.add_distance(decision.gap_distance)
        elif self._sample():
            self.telemetry.add_distance(math.nan)

        path = decision.path
        self.path = path
        self.state.lane_change_engaged = decision.lane_change
        self.state.gap_distance = decision.gap_distance
        self.renderer.draw_path(path.points)

        # d. lateral control on the first segment ahead of the own node
        result = StanleyController.get_steering_angle(path[1], path[2], ego.speed,
                                                      ego.front_axle_transform(), sim_config.stanley_gain)
        ego.step(speed, result.steering_angle, dt)

        if self._sample():
            self.telemetry.add_cross_track_error(abs(result.cross_track_error))
            self.telemetry.add_heading_error(abs(result.heading_error))
        self._update_dashboard()

        report.path = list(path.ids)
        report.laneChangeEngaged = decision.lane_change
        report.gapDistance = decision.gap_distance
        report.command = ControlCommand(target_speed=speed, steering_angle=result.steering_angle)

    def _simulate_obstacle(self, obstacle: Agent, dt: float):
        model = obstacle.model
        path = obstacle.planner.generate_local_path(model.position, model.heading,
                                                    IntersectionHeuristic.MIDDLE, config.OBSTACLE_LOOKAHEAD)
        if len(path) < 3:
            logger.debug("%s has no path ahead", obstacle.vehicle_id)
            return

        result = StanleyController.get_steering_angle(path[1], path[2], model.speed,
                                                      model.front_axle_transform(), config.OBSTACLE_STANLEY_GAIN)
        model.step(config.OBSTACLE_SPEED, result.steering_angle, dt)

    def _publish_poses(self):
        self.renderer.update_vehicle(self.ego.vehicle_id, self.ego.model.transform)
        for obstacle in self.obstacles:
            self.renderer.update_vehicle(obstacle.vehicle_id, obstacle.model.transform)
