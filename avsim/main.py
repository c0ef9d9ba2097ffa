import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from avsim.domain import config
from avsim.domain.models import (
    ConfigUpdate, GraphView, ManualControl, PathPoint, SimulationConfig, SimulationSnapshot,
    TelemetrySnapshot, VehiclePose
)
from avsim.kernel.commands import (
    ManualControlCommand, StartSimulationCommand, StopSimulationCommand, UpdateConfigCommand
)
from avsim.kernel.simulation_kernel import SimulationKernel

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Initialize Kernel
kernel = SimulationKernel()

# Background task for simulation loop
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load the road graph and start the simulation loop
    kernel.initialize()
    loop_task = asyncio.create_task(run_simulation())
    yield
    # Shutdown
    loop_task.cancel()

app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

async def run_simulation():
    """Drives the orchestrator like a render loop at TARGET_FPS"""
    frame_time = 1.0 / config.TARGET_FPS

    while True:
        start_time = time.monotonic()

        # dt is measured from the frame timestamps
        kernel.run_tick(start_time)

        # Sleep to maintain frame rate
        elapsed = time.monotonic() - start_time
        await asyncio.sleep(max(0.0, frame_time - elapsed))

@app.get("/api/simulation/state", response_model=SimulationSnapshot)
async def get_simulation_state():
    """Returns vehicle poses and the current ego path"""
    return kernel.get_state()

@app.get("/api/vehicles/{vehicle_id}", response_model=VehiclePose)
async def get_vehicle(vehicle_id: str):
    vehicle = kernel.get_vehicle(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle

@app.get("/api/telemetry", response_model=TelemetrySnapshot)
async def get_telemetry():
    """Returns the rolling chart samples and dashboard readouts"""
    return kernel.get_telemetry()

@app.get("/api/config", response_model=SimulationConfig)
async def get_config():
    return kernel.config

@app.post("/api/config")
async def update_config(updates: ConfigUpdate):
    """Updates gains, limits and modes, applied on the next tick"""
    kernel.queue_command(UpdateConfigCommand(updates))
    return {"status": "Config update queued", "changes": updates.model_dump(exclude_none=True)}

@app.post("/api/simulation/start")
async def start_simulation():
    kernel.queue_command(StartSimulationCommand())
    return {"status": "Simulation Started"}

@app.post("/api/simulation/stop")
async def stop_simulation():
    """Stops the simulation, vehicles are reset on the next tick"""
    kernel.queue_command(StopSimulationCommand())
    return {"status": "Simulation Stopped"}

@app.post("/api/control/manual")
async def manual_control(control: ManualControl):
    kernel.queue_command(ManualControlCommand(control))
    return {"status": "Control queued", "throttle": control.throttle, "steering": control.steering}

@app.get("/api/graph", response_model=GraphView)
async def get_graph():
    return kernel.get_graph()

@app.get("/api/path", response_model=List[PathPoint])
async def get_path():
    """Returns the path overlay as last drawn"""
    return [PathPoint(x=x, z=z) for x, z in kernel.recorder.path_points]

@app.get("/")
def read_root():
    return {"status": "AV Simulation Backend Running", "initialized": kernel.initialized}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
