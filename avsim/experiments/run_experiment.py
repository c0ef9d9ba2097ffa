import json
import logging
import time

from avsim.domain import config
from avsim.domain.models import LaneChoice, SimulationConfig, SimulationMode
from avsim.kernel.simulation_kernel import SimulationKernel

logger = logging.getLogger(__name__)

def run_headless_experiment(duration_ticks: int, output_path: str, graph_path: str = None):
    kernel = SimulationKernel()
    kernel.initialize(graph_path=graph_path)
    kernel.config = SimulationConfig(
        mode=SimulationMode.OVERTAKE_MANEUVER,
        lane_choice=LaneChoice.AUTOMATIC,
        running=True
    )

    dt = 1.0 / config.TARGET_FPS
    results = []

    start_time = time.time()
    for i in range(duration_ticks + 1):
        # first frame only records the timestamp
        report = kernel.run_tick(timestamp=i * dt)
        if not report.stepped:
            continue
        state = kernel.get_state()
        results.append({
            "tick": state.tick,
            "time": round(state.time, 4),
            "ego": {"x": state.ego.x, "z": state.ego.z, "speed": state.ego.speed},
            "path": report.path,
            "lane_change": report.laneChangeEngaged,
            "gap": report.gapDistance
        })

    end_time = time.time()
    logger.info("Experiment finished in %.4fs", end_time - start_time)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)
    return results

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) > 2:
        run_headless_experiment(int(sys.argv[1]), sys.argv[2], *sys.argv[3:4])
    else:
        print("Usage: python -m avsim.experiments.run_experiment <ticks> <output> [graph.obj]")
