"""
Step-by-step tracer.

Runs a program exactly like TapeMachine does, printing the state of the
tape, the input queue and the output after every command.
"""

import sys
from typing import Optional, TextIO

from .config import MachineConfig
from .errors import BrainfError
from .machine import MachineState, TapeMachine
from .program import Instruction, Loop, Tree, render


class TracingMachine(TapeMachine):
    """TapeMachine that narrates every step to a text stream."""

    def __init__(self, config: Optional[MachineConfig] = None,
                 stream: Optional[TextIO] = None, show_memory_range: int = 10):
        super().__init__(config)
        self.stream = stream
        self.show_memory_range = show_memory_range

    def _print(self, text: str = ""):
        print(text, file=self.stream or sys.stdout)

    def run(self, tree: Tree, input=b"") -> bytes:
        self._print("TRACE")
        self._print(f"Program: {_show_bytes(render(tree))}")
        self._print(f"Input:   {list(self.config.to_bytes(input))}")
        self._print("=" * 60)
        try:
            result = super().run(tree, input)
        except BrainfError as e:
            self._print(f"\nABORTED: {e}")
            self._print("Output discarded.")
            raise
        self._print("\nFINAL RESULT:")
        self._print(f"Output: {_show_bytes(result)} -> {list(result)}")
        return result

    def _step(self, node: Instruction, state: MachineState):
        if isinstance(node, Loop):
            cell = state.tape.current
            action = "enter loop" if cell else "skip loop"
            self._print(
                f"\nStep {state.steps}: Loop at offset {node.position}: "
                f"cell[{state.tape.head}] = {cell} -> {action}"
            )
        else:
            self._print(
                f"\nStep {state.steps}: Execute {_show_bytes(bytes([node.command]))} "
                f"at offset {node.position}"
            )

    def _execute(self, command: int, position: int, state: MachineState):
        super()._execute(command, position, state)
        self._show_state(state)

    def _show_state(self, state: MachineState):
        start, values = state.tape.window(self.show_memory_range)
        head = state.tape.head
        self._print("Memory:  [" + "|".join(f"{v:3d}" for v in values) + "]")
        self._print("Pointer:  " + " ".join(" ^ " if start + i == head else "   "
                                          for i in range(len(values))))
        self._print("Address:  " + " ".join(f"{start + i:3d}" for i in range(len(values))))
        self._print(f"Input:   {list(state.input)}")
        if state.output:
            self._print(f"Output:  {_show_bytes(bytes(state.output))} -> {list(state.output)}")
        else:
            self._print("Output:  (empty)")


def _show_bytes(data: bytes) -> str:
    return repr(data.decode("latin-1"))
