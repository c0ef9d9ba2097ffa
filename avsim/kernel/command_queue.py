import threading
from collections import deque
from typing import Deque, List

from avsim.kernel.commands import Command

class CommandQueue:
    """Commands written by the API, drained once per tick by the kernel."""

    def __init__(self):
        self._pending: Deque[Command] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def add(self, command: Command):
        with self._lock:
            self._pending.append(command)

    def drain(self) -> List[Command]:
        with self._lock:
            commands = list(self._pending)
            self._pending.clear()
        return commands

    def clear(self):
        with self._lock:
            self._pending.clear()
