"""
Evaluator for the eight-command tape language.

    >>> evaluate(",>,[<+>-]<.", bytes([7, 8]))
    b'\\x0f'

The parser (program.build) only checks bracket structure; the machine
(machine.TapeMachine) judges every other byte when it reaches it.
"""

from typing import Optional, Union

from .config import MachineConfig
from .errors import (
    BackwardBoundaryUnderflow,
    BrainfError,
    ExecutionError,
    InputExhausted,
    ParseError,
    UndefinedCommand,
    UnmatchedCloseBracket,
    UnterminatedLoop,
)
from .machine import TapeMachine
from .program import Leaf, Loop, build, render

__all__ = [
    "evaluate",
    "build",
    "render",
    "Leaf",
    "Loop",
    "TapeMachine",
    "MachineConfig",
    "BrainfError",
    "ParseError",
    "UnmatchedCloseBracket",
    "UnterminatedLoop",
    "ExecutionError",
    "UndefinedCommand",
    "InputExhausted",
    "BackwardBoundaryUnderflow",
]

Data = Union[bytes, bytearray, str]


def evaluate(program: Data, input: Optional[Data] = b"",
             config: Optional[MachineConfig] = None) -> bytes:
    """Run program on input and return its complete output.

    Either the whole output comes back or an error is raised; there is no
    partial result.
    """
    config = config or MachineConfig()
    tree = build(config.to_bytes(program))
    return TapeMachine(config).run(tree, input)
