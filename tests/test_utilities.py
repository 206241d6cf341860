import io
import socket
import time

import pytest

from pgmsharpen.utilities import (
    Practical,
    core_list,
    format_cpuset,
    location_message,
    print_location,
    wtime,
)


def _parse(text):
    cpus = []
    for part in text.split(","):
        if "-" in part:
            low, high = part.split("-")
            assert int(high) - int(low) >= 2
            cpus.extend(range(int(low), int(high) + 1))
        else:
            cpus.append(int(part))
    return cpus


def test_single_cpu():
    assert format_cpuset([0]) == "0"


def test_pair_is_listed_not_ranged():
    assert format_cpuset([0, 1]) == "0,1"


def test_long_run_is_ranged():
    assert format_cpuset([0, 1, 2, 3]) == "0-3"


def test_empty_set_is_empty_string():
    assert format_cpuset([]) == ""


@pytest.mark.parametrize(
    "cpus",
    [
        [5],
        [0, 2, 3, 4, 7, 8],
        [1, 3, 5, 7],
        list(range(10, 40)),
        [0, 1, 3, 4, 5, 9, 10, 11, 12, 20],
    ],
)
def test_round_trip(cpus):
    assert _parse(format_cpuset(cpus)) == sorted(cpus)


def test_unordered_and_duplicate_input():
    assert format_cpuset([4, 2, 3, 2, 4]) == format_cpuset([2, 3, 4])


def test_cpus_beyond_set_size_ignored():
    assert format_cpuset([1, 5000]) == format_cpuset([1])


def test_negative_cpu_rejected():
    with pytest.raises(ValueError):
        format_cpuset([-1])


def test_core_list_parses_to_cpus():
    cpus = _parse(core_list())
    assert len(cpus) >= 1
    assert all(cpu >= 0 for cpu in cpus)
    assert cpus == sorted(set(cpus))


def test_mpi_message():
    message = location_message(Practical.MPI, 3, 0, "node1")
    assert message == f"Rank 3 on core {core_list()} of node <node1>"


def test_mpi_message_defaults_to_hostname():
    message = location_message(Practical.MPI, 0, 0, None)
    assert message.endswith(f"of node <{socket.gethostname()}>")


def test_openshmem_matches_mpi():
    assert location_message(Practical.OPENSHMEM, 2, 0, "n") == location_message(
        Practical.MPI, 2, 0, "n"
    )


def test_openmp_message():
    assert location_message(Practical.OPENMP, 0, 4) == f"Thread 4 on core {core_list()}"


@pytest.mark.parametrize("practical", [Practical.SERIAL, Practical.HYBRID])
def test_silent_practicals(practical):
    assert location_message(practical, 1, 1, "n") is None


def test_print_location_writes_line():
    out = io.StringIO()
    returned = print_location(Practical.OPENMP, 0, 2, out)
    assert out.getvalue() == returned + "\n"
    assert returned.startswith("Thread 2 on core ")


def test_print_location_serial_writes_nothing():
    out = io.StringIO()
    assert print_location(Practical.SERIAL, 0, 0, out) is None
    assert out.getvalue() == ""


def test_wtime_tracks_wall_clock():
    first = wtime()
    second = wtime()
    assert second >= first
    assert abs(first - time.time()) < 5.0