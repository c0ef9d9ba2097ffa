from typing import Optional
from pydantic import BaseModel

class SimulationState(BaseModel):
    tick_id: int = 0
    time: float = 0.0
    counter: int = 0 # tick counter modulo TELEMETRY_DECIMATION
    last_update: Optional[float] = None
    reset_armed: bool = False
    lane_change_engaged: bool = False
    gap_distance: Optional[float] = None
