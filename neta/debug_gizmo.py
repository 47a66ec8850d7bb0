"""Timed debug drawing commands run once per frame."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

GIZMO_TIMEOUT = 30.0


class DebugGizmos:
    """Drawing commands that run each frame until their timeout elapses."""

    def __init__(self, timeout: float = GIZMO_TIMEOUT) -> None:
        self.timeout = timeout
        self._commands: list[list[Any]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._commands)

    def add(self, command: Callable[[Any], None]) -> None:
        with self._lock:
            self._commands.append([0.0, command])

    def run(self, gizmos: Any, delta: float) -> None:
        """Advance timers by ``delta`` seconds and run commands still alive."""
        with self._lock:
            kept = []
            for entry in self._commands:
                entry[0] += delta
                if entry[0] >= self.timeout:
                    continue
                entry[1](gizmos)
                kept.append(entry)
            self._commands = kept


_default = DebugGizmos()


def debug_gizmo(command: Callable[[Any], None]) -> None:
    """Queue a drawing command on the shared gizmo list."""
    _default.add(command)


def execute_gizmo_commands(gizmos: Any, delta: float) -> None:
    """Run the shared gizmo list for one frame."""
    _default.run(gizmos, delta)