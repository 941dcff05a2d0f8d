"""
Program builder: turn a flat command string into a nested instruction tree.

    ".[+[-]>]<[,]>"  ->  (Leaf '.', Loop(Leaf '+', Loop(Leaf '-'), Leaf '>'),
                          Leaf '<', Loop(Leaf ','), Leaf '>')

Only the bracket structure is validated here. Any other byte, recognized
command or not, becomes a Leaf and is judged by the machine if and when it is
reached.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from .errors import UnmatchedCloseBracket, UnterminatedLoop

OPEN = ord("[")
CLOSE = ord("]")


@dataclass(frozen=True)
class Leaf:
    """A single non-loop byte of the source."""
    command: int
    position: int = field(default=-1, compare=False)

    def __repr__(self):
        return f"Leaf({chr(self.command)!r})"


@dataclass(frozen=True)
class Loop:
    """Everything between a matched '[' and ']'."""
    body: Tuple["Instruction", ...]
    position: int = field(default=-1, compare=False)

    def __repr__(self):
        return f"Loop{self.body!r}"


Instruction = Union[Leaf, Loop]
Tree = Tuple[Instruction, ...]


def build(source: Union[bytes, bytearray, str], encoding: str = "utf-8") -> Tree:
    """Parse source into an instruction tree.

    Raises UnmatchedCloseBracket for a ']' with no open loop and
    UnterminatedLoop when the source ends inside a '['.
    """
    if isinstance(source, str):
        source = source.encode(encoding)

    # one accumulator per nesting level, with the offset of its '['
    levels: List[Tuple[int, List[Instruction]]] = [(-1, [])]
    for position, byte in enumerate(source):
        if byte == OPEN:
            levels.append((position, []))
        elif byte == CLOSE:
            if len(levels) == 1:
                raise UnmatchedCloseBracket(position)
            start, body = levels.pop()
            levels[-1][1].append(Loop(tuple(body), start))
        else:
            levels[-1][1].append(Leaf(byte, position))

    if len(levels) > 1:
        raise UnterminatedLoop(levels[-1][0])
    return tuple(levels[0][1])


def render(tree: Tree) -> bytes:
    """Source text of a tree; the inverse of build() for balanced programs."""
    out = bytearray()
    stack = [iter(tree)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            if stack:
                out.append(CLOSE)
        elif isinstance(node, Loop):
            out.append(OPEN)
            stack.append(iter(node.body))
        else:
            out.append(node.command)
    return bytes(out)


def depth(tree: Tree) -> int:
    """Maximum bracket nesting depth of a tree."""
    deepest = 0
    stack = [(tree, 0)]
    while stack:
        nodes, level = stack.pop()
        deepest = max(deepest, level)
        for node in nodes:
            if isinstance(node, Loop):
                stack.append((node.body, level + 1))
    return deepest
