"""
Tape machine: walk an instruction tree against a fresh tape.

| Command | C code          | Description                                      |
|---------|-----------------|--------------------------------------------------|
| >       | ++ptr           | move the head one cell right                     |
| <       | --ptr           | move the head one cell left                      |
| +       | ++*ptr          | increment the cell under the head (mod 256)      |
| -       | --*ptr          | decrement the cell under the head (mod 256)      |
| .       | putchar(*ptr)   | append the cell under the head to the output     |
| ,       | *ptr=getchar()  | overwrite the cell under the head with one byte  |
|         |                 | of input                                         |
| [ ... ] | while (*ptr) {} | run the body while the cell under the head is    |
|         |                 | non-zero, testing before every pass              |

The walk uses an explicit frame stack, so neither nesting depth nor loop trip
count consumes Python call stack.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Union

from .config import MachineConfig
from .errors import ExecutionError, InputExhausted, UndefinedCommand
from .program import Instruction, Loop, Tree, depth
from .tape import Tape

logger = logging.getLogger(__name__)

RIGHT = ord(">")
LEFT = ord("<")
INC = ord("+")
DEC = ord("-")
OUT = ord(".")
IN = ord(",")


@dataclass
class MachineState:
    """Everything one run mutates. Created per run and dropped afterwards."""
    tape: Tape
    input: Deque[int]
    output: bytearray = field(default_factory=bytearray)
    steps: int = 0


class TapeMachine:
    def __init__(self, config: Optional[MachineConfig] = None):
        self.config = config or MachineConfig()

    def run(self, tree: Tree, input: Union[bytes, str, None] = b"") -> bytes:
        """Execute tree and return everything it printed.

        Raises an ExecutionError subclass as soon as a command fails; the
        output collected up to that point is discarded.
        """
        state = MachineState(
            tape=Tape(self.config.chunk_size),
            input=deque(self.config.to_bytes(input)),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Running %d top-level instructions (depth %d) with %d input bytes",
                len(tree), depth(tree), len(state.input),
            )
        try:
            self._walk(tree, state)
        except ExecutionError as e:
            logger.debug("Run aborted after %d steps: %s", state.steps, e)
            raise
        logger.debug(
            "Run finished after %d steps: %d output bytes, %d cells allocated",
            state.steps, len(state.output), len(state.tape),
        )
        return bytes(state.output)

    def _walk(self, tree: Tree, state: MachineState):
        # each frame is [instructions, index of the next one to run]
        frames: List[list] = [[tree, 0]]
        while frames:
            frame = frames[-1]
            nodes, index = frame
            if index == len(nodes):
                frames.pop()
                continue

            node = nodes[index]
            state.steps += 1
            self._step(node, state)
            if isinstance(node, Loop):
                if state.tape.current != 0:
                    # index stays on the loop so the guard is tested again
                    # once the body frame is exhausted
                    frames.append([node.body, 0])
                    continue
            else:
                self._execute(node.command, node.position, state)
            frame[1] = index + 1

    def _execute(self, command: int, position: int, state: MachineState):
        tape = state.tape
        if command == RIGHT:
            tape.forward()
        elif command == LEFT:
            tape.backward()
        elif command == INC:
            tape.increment()
        elif command == DEC:
            tape.decrement()
        elif command == OUT:
            state.output.append(tape.current)
        elif command == IN:
            if not state.input:
                raise InputExhausted()
            tape.current = state.input.popleft()
        else:
            raise UndefinedCommand(command, position)

    def _step(self, node: Instruction, state: MachineState):
        """Called before every leaf and every loop guard test. No-op here."""
