import logging
import time
from pathlib import Path as FilePath
from typing import Optional, Sequence, Union

from avsim.domain import config
from avsim.domain.graph import RoadGraph, load_road_graph
from avsim.domain.models import (
    GraphView, SimulationConfig, SimulationSnapshot, TelemetrySnapshot, TickReport, VehiclePose
)
from avsim.kernel.command_queue import CommandQueue
from avsim.kernel.commands import Command
from avsim.kernel.orchestrator import SimulationOrchestrator
from avsim.kernel.renderer import SceneRecorder
from avsim.kernel.snapshot_builder import SnapshotBuilder

logger = logging.getLogger(__name__)

class SimulationKernel:
    """Service facade around the orchestrator.

    Writers only queue commands; the queue is drained at the start of the
    next tick, which then sees one consistent config snapshot.
    """

    def __init__(self):
        self.config = SimulationConfig()
        self.command_queue = CommandQueue()
        self.snapshot_builder = SnapshotBuilder()
        self.recorder = SceneRecorder()
        self.graph: Optional[RoadGraph] = None
        self.orchestrator: Optional[SimulationOrchestrator] = None
        self.initialized = False

    def initialize(self, graph_path: Union[str, FilePath, None] = None,
                   graph: Optional[RoadGraph] = None,
                   ego_start: int = config.EGO_START_NODE,
                   obstacle_starts: Sequence[int] = config.OBSTACLE_START_NODES):
        self.graph = graph if graph is not None else load_road_graph(graph_path)
        self.config = SimulationConfig()
        self.command_queue.clear()
        self.recorder = SceneRecorder()
        self.orchestrator = SimulationOrchestrator.from_graph(self.graph, ego_start, obstacle_starts,
                                                              renderer=self.recorder)
        self.initialized = True
        logger.info("Simulation kernel initialized with %d obstacles", len(obstacle_starts))

    def queue_command(self, command: Command):
        self.command_queue.add(command)

    def run_tick(self, timestamp: Optional[float] = None) -> TickReport:
        if not self.initialized:
            self.initialize()

        # 1. Consume Commands
        for cmd in self.command_queue.drain():
            cmd.execute(self)

        # 2. Simulate
        if timestamp is None:
            timestamp = time.monotonic()
        return self.orchestrator.on_frame(timestamp, self.config)

    def get_state(self) -> SimulationSnapshot:
        return self.snapshot_builder.build(self.orchestrator, self.config)

    def get_telemetry(self) -> TelemetrySnapshot:
        return self.snapshot_builder.build_telemetry(self.orchestrator.telemetry)

    def get_vehicle(self, vehicle_id: str) -> Optional[VehiclePose]:
        for agent in [self.orchestrator.ego, *self.orchestrator.obstacles]:
            if agent.vehicle_id == vehicle_id:
                return self.snapshot_builder.build_vehicle(agent)
        return None

    def get_graph(self) -> GraphView:
        return self.snapshot_builder.build_graph(self.graph)
