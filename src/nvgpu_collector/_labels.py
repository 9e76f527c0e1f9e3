"""Static code → label tables for NVML enumerations."""

from __future__ import annotations

from collections.abc import Mapping

UNKNOWN = "UNKNOWN"

BUS_TYPES: dict[int, str] = {
    0: "UNKNOWN",
    1: "PCI",
    2: "PCIE",
    3: "FPCI",
    4: "AGP",
}

TEMPERATURE_SENSORS: dict[int, str] = {
    0: "GPU",
}

CLOCK_TYPES: dict[int, str] = {
    0: "GRAPHICS",
    1: "SM",
    2: "MEM",
    3: "VIDEO",
}

CLOCK_IDS: dict[int, str] = {
    0: "CURRENT",
    1: "APP_CLOCK_TARGET",
    2: "APP_CLOCK_DEFAULT",
    3: "CUSTOMER_BOOST_MAX",
}

COMPUTE_MODES: dict[int, str] = {
    0: "DEFAULT",
    1: "EXCLUSIVE_THREAD",
    2: "PROHIBITED",
    3: "EXCLUSIVE_PROCESS",
}

PERF_STATES: dict[int, str] = {i: f"P{i}" for i in range(16)}
PERF_STATES[32] = "UNKNOWN"

PERSISTENCE_MODES: dict[int, str] = {
    0: "DISABLED",
    1: "ENABLED",
}

UTIL_GPU = "GPU"
UTIL_MEMORY = "MEMORY"


def lookup(table: Mapping[int, str], code: object) -> str:
    """Return the label for ``code``, or ``UNKNOWN`` for anything not in ``table``."""
    # bool is an int subclass; True must not alias code 1.
    if isinstance(code, bool) or not isinstance(code, int):
        return UNKNOWN
    return table.get(code, UNKNOWN)


def bus_type(code: object) -> str:
    return lookup(BUS_TYPES, code)


def temperature_sensor(code: object) -> str:
    return lookup(TEMPERATURE_SENSORS, code)


def clock_type(code: object) -> str:
    return lookup(CLOCK_TYPES, code)


def clock_id(code: object) -> str:
    return lookup(CLOCK_IDS, code)


def compute_mode(code: object) -> str:
    return lookup(COMPUTE_MODES, code)


def perf_state(code: object) -> str:
    return lookup(PERF_STATES, code)


def persistence_mode(code: object) -> str:
    return lookup(PERSISTENCE_MODES, code)
