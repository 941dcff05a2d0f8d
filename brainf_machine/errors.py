"""
Errors raised while building or running a program.

Parse errors come from the bracket matcher and are reported before anything
runs. Execution errors are raised only when the instruction pointer reaches
the offending command, and they abort the whole run: no partial output is
ever returned alongside them.
"""

from typing import Optional

COMMANDS = ".,+-><[]"


class BrainfError(Exception):
    """Base class for everything evaluate() can raise."""


class ParseError(BrainfError, SyntaxError):
    """The bracket structure of the program is broken."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(message)

    def __reduce__(self):
        return type(self), (self.args[0], self.position)

    def __str__(self) -> str:
        return f"{self.args[0]} (at offset {self.position})"


class UnmatchedCloseBracket(ParseError):
    def __init__(self, position: int):
        super().__init__("Unexpected close loop command ']'", position)

    def __reduce__(self):
        return type(self), (self.position,)


class UnterminatedLoop(ParseError):
    def __init__(self, position: int):
        super().__init__("Unexpected end of the loop opened by '['", position)

    def __reduce__(self):
        return type(self), (self.position,)


class ExecutionError(BrainfError, RuntimeError):
    """The machine hit a command it cannot carry out."""


class UndefinedCommand(ExecutionError):
    def __init__(self, command: int, position: Optional[int] = None):
        self.command = command
        self.position = position
        where = "" if position is None else f" at offset {position}"
        super().__init__(
            f"Undefined command {_describe(command)}{where}. "
            f"Available commands are: {COMMANDS}"
        )

    def __reduce__(self):
        return type(self), (self.command, self.position)


class InputExhausted(ExecutionError):
    def __init__(self):
        super().__init__(
            "Can not read value from the input because input buffer is empty."
        )

    def __reduce__(self):
        return type(self), ()


class BackwardBoundaryUnderflow(ExecutionError):
    def __init__(self):
        super().__init__(
            "Can not move memory backward because there is no memory to move."
        )

    def __reduce__(self):
        return type(self), ()


def _describe(command: int) -> str:
    # printable ASCII shows as the character itself, everything else as hex
    if 0x20 < command < 0x7F:
        return f'"{chr(command)}"'
    return f"0x{command:02x}"
