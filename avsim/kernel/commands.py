from abc import ABC, abstractmethod
from typing import Any

from avsim.domain.models import ConfigUpdate, ManualControl

class Command(ABC):
    @abstractmethod
    def execute(self, kernel: Any):
        pass

class UpdateConfigCommand(Command):
    def __init__(self, updates: ConfigUpdate):
        self.updates = updates

    def execute(self, kernel: Any):
        changes = self.updates.model_dump(exclude_none=True)
        if changes:
            kernel.config = kernel.config.model_copy(update=changes)
        return kernel.config

class StartSimulationCommand(Command):
    def execute(self, kernel: Any):
        kernel.config = kernel.config.model_copy(update={"running": True})

class StopSimulationCommand(Command):
    def execute(self, kernel: Any):
        # the orchestrator resets on its next tick
        kernel.config = kernel.config.model_copy(update={"running": False})

class ManualControlCommand(Command):
    def __init__(self, control: ManualControl):
        self.control = control

    def execute(self, kernel: Any):
        kernel.config = kernel.config.model_copy(update={
            "throttle": self.control.throttle,
            "steering": self.control.steering,
        })
