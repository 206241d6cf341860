"""Helpers outside the image work itself: CPU placement reports and wall-clock time."""

from __future__ import annotations

import enum
import os
import socket
import sys
import time
from typing import IO, Iterable

__all__ = [
    "Practical",
    "format_cpuset",
    "core_list",
    "location_message",
    "print_location",
    "wtime",
]

CPU_SETSIZE = 1024


class Practical(enum.Enum):
    """The flavour of parallel run a placement report describes."""

    SERIAL = "serial"
    OPENMP = "openmp"
    MPI = "mpi"
    HYBRID = "hybrid"
    OPENSHMEM = "openshmem"


def format_cpuset(cpus: Iterable[int]) -> str:
    """Render a set of CPU numbers in the compact ``taskset`` list form.

    Runs of three or more CPUs become ``a-b``; pairs and single CPUs are
    listed individually, all separated by commas. CPUs at or above the
    kernel set size are ignored.
    """
    wanted = set()
    for cpu in cpus:
        number = int(cpu)
        if number < 0:
            raise ValueError(f"CPU number must be non-negative, got {number}")
        if number < CPU_SETSIZE:
            wanted.add(number)

    parts: list[str] = []
    ordered = sorted(wanted)
    start = None
    previous = None
    for cpu in ordered + [None]:
        if cpu is not None and previous is not None and cpu == previous + 1:
            previous = cpu
            continue
        if start is not None:
            run = previous - start
            if run == 0:
                parts.append(str(start))
            elif run == 1:
                parts.append(f"{start},{previous}")
            else:
                parts.append(f"{start}-{previous}")
        start = previous = cpu
    return ",".join(parts)


def core_list() -> str:
    """Return the CPUs this process may run on, formatted by ``format_cpuset``."""
    getaffinity = getattr(os, "sched_getaffinity", None)
    if getaffinity is not None:
        try:
            return format_cpuset(getaffinity(0))
        except OSError:
            pass
    return format_cpuset(range(os.cpu_count() or 1))


def location_message(
    practical: Practical,
    rank: int = 0,
    thread: int = 0,
    node: str | None = None,
) -> str | None:
    """Return the placement line for this kind of run, or None if it reports nothing."""
    practical = Practical(practical)
    if practical in (Practical.MPI, Practical.OPENSHMEM):
        host = socket.gethostname() if node is None else node
        return f"Rank {rank} on core {core_list()} of node <{host}>"
    if practical is Practical.OPENMP:
        return f"Thread {thread} on core {core_list()}"
    return None


def print_location(
    practical: Practical,
    rank: int = 0,
    thread: int = 0,
    out: IO[str] | None = None,
) -> str | None:
    """Write the placement line, if any, to ``out`` (stdout by default) and return it."""
    message = location_message(practical, rank, thread)
    if message is not None:
        stream = sys.stdout if out is None else out
        stream.write(message + "\n")
        stream.flush()
    return message


def wtime() -> float:
    """Return wall-clock time in seconds since the epoch."""
    return time.time()