import math
from typing import Iterable, List, Optional

from avsim.domain.graph import RoadGraph
from avsim.domain.models import (
    GraphNodeView, GraphView, PathPoint, SimulationConfig, SimulationSnapshot, TelemetrySnapshot, VehiclePose
)
from avsim.kernel.orchestrator import Agent, SimulationOrchestrator
from avsim.kernel.telemetry import Telemetry

def _nan_to_none(values: Iterable[float]) -> List[Optional[float]]:
    # JSON has no NaN
    return [None if math.isnan(v) else v for v in values]

class SnapshotBuilder:
    def build_vehicle(self, agent: Agent) -> VehiclePose:
        model = agent.model
        x, z = model.position
        heading_x, heading_z = model.heading
        return VehiclePose(
            id=agent.vehicle_id,
            x=x,
            z=z,
            headingX=heading_x,
            headingZ=heading_z,
            speed=model.speed_kph,
            steeringAngle=model.steering_angle,
            currentNode=agent.planner.current_node.id
        )

    def build(self, orchestrator: SimulationOrchestrator, sim_config: SimulationConfig) -> SimulationSnapshot:
        state = orchestrator.state
        return SimulationSnapshot(
            tick=state.tick_id,
            time=state.time,
            running=sim_config.running,
            mode=sim_config.mode,
            laneChangeEngaged=state.lane_change_engaged,
            ego=self.build_vehicle(orchestrator.ego),
            obstacles=[self.build_vehicle(o) for o in orchestrator.obstacles],
            path=[PathPoint(x=x, z=z) for x, z in orchestrator.path.points]
        )

    def build_telemetry(self, telemetry: Telemetry) -> TelemetrySnapshot:
        return TelemetrySnapshot(
            speeds=list(telemetry.speeds),
            steeringAngles=list(telemetry.steering_angles),
            crossTrackErrors=list(telemetry.cross_track_errors),
            headingErrors=list(telemetry.heading_errors),
            distances=_nan_to_none(telemetry.distances),
            dashboardSpeed=telemetry.dashboard_speed,
            dashboardWheelAngle=telemetry.dashboard_wheel_angle
        )

    def build_graph(self, graph: RoadGraph) -> GraphView:
        return GraphView(
            nodes=[GraphNodeView(id=n.id, x=n.x, z=n.z) for n in graph.nodes],
            edges=[[u, v] for u, v in graph.edges()]
        )
