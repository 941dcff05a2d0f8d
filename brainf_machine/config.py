import os
from dataclasses import dataclass

DEFAULT_CHUNK_SIZE = 100
DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class MachineConfig:
    """Knobs for a machine run.

    chunk_size only controls how many zero cells are appended when the tape
    grows; it never changes what a program outputs.
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """Defaults overridden by BRAINF_CHUNK_SIZE / BRAINF_ENCODING."""
        return cls(
            chunk_size=int(os.environ.get("BRAINF_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)),
            encoding=os.environ.get("BRAINF_ENCODING", DEFAULT_ENCODING),
        )

    def to_bytes(self, data) -> bytes:
        """Coerce a program or input argument to bytes."""
        if data is None:
            return b""
        if isinstance(data, str):
            return data.encode(self.encoding)
        if isinstance(data, int):
            # bytes(3) would mean three zero bytes
            raise TypeError(f"expected str, bytes or an iterable of ints, got {data!r}")
        return bytes(data)
