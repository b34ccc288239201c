"""Saved emulator states queued for exploration, each pc visited once."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any


@dataclass
class ProgramState:
    """A snapshot of an emulation point: registers, stack and branch condition."""

    pc: int
    depth: int = 0
    condition: str = ""
    context: Any = None
    stack: bytes = b""
    stack_top_addr: int = 0
    stack_size: int = 0


class ProgramStateManager:
    """FIFO of program states that refuses a pc it has already seen."""

    def __init__(self) -> None:
        self._queue: deque[ProgramState] = deque()
        self._visited_pc: set[int] = set()

    def enqueue(self, state: ProgramState) -> bool:
        """Queue ``state`` unless its pc was queued before; report whether it was added."""
        if state.pc in self._visited_pc:
            return False
        self._visited_pc.add(state.pc)
        self._queue.append(state)
        return True

    def pop(self) -> ProgramState | None:
        """Take the oldest queued state, or None when the queue is empty."""
        return self._queue.popleft() if self._queue else None

    def is_empty(self) -> bool:
        """Return True if no states are waiting."""
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)