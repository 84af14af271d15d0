from collections import deque
from typing import Any, Deque
from autopath.kernel.commands import Command

class CommandQueue:
    """Requests from outside the loop, applied only between ticks."""

    def __init__(self):
        self.queue: Deque[Command] = deque()

    def submit(self, command: Command, kernel: Any):
        # Rejects bad ids synchronously, before anything is queued
        command.validate(kernel)
        self.queue.append(command)

    def drain(self) -> Deque[Command]:
        commands = self.queue
        self.queue = deque()
        return commands

    def clear(self):
        self.queue.clear()

    def __len__(self) -> int:
        return len(self.queue)
