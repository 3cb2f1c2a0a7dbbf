"""Host facts about the C `int` type, used in the report's architecture block."""

import ctypes
import platform
from dataclasses import dataclass
from functools import lru_cache


THEORETICAL_INT_NOTE = "4 bytes (32-bit two's complement)"


@dataclass(frozen=True)
class HostIntInfo:
    """Native size and range of a signed C int on this host."""

    platform_tag: str
    size_bytes: int
    min_value: int
    max_value: int

    @property
    def size_bits(self) -> int:
        return self.size_bytes * 8


def platform_tag() -> str:
    """Return a short system-machine tag, e.g. 'linux-x86_64'."""
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower() or "unknown"
    return f"{system}-{machine}"


@lru_cache(maxsize=1)
def host_int_info() -> HostIntInfo:
    size_bytes = ctypes.sizeof(ctypes.c_int)
    bits = size_bytes * 8
    return HostIntInfo(
        platform_tag=platform_tag(),
        size_bytes=size_bytes,
        min_value=-(2 ** (bits - 1)),
        max_value=2 ** (bits - 1) - 1,
    )
