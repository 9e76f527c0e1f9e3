"""Core types: devices, query results and metric observations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Device:
    """A device handle bound to its ordinal position in one poll."""

    index: int
    handle: Any

    @property
    def label(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class SystemInfo:
    """Driver-wide version information."""

    driver_version: str
    nvml_version: str
    cuda_version_raw: int

    @property
    def cuda_version(self) -> str:
        return format_cuda_version(self.cuda_version_raw)


@dataclass(frozen=True)
class MemoryInfo:
    """Frame-buffer sizes in bytes."""

    total: int
    used: int
    free: int


@dataclass(frozen=True)
class Utilization:
    """Percent of the last sample period the engine was busy."""

    gpu: int
    memory: int


@dataclass(frozen=True)
class MetricDesc:
    """Immutable metric descriptor: fully qualified name, help and label names."""

    name: str
    help: str
    labels: tuple[str, ...]


@dataclass(frozen=True)
class Observation:
    """One gauge sample for a descriptor."""

    desc: MetricDesc
    value: float
    label_values: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.label_values) != len(self.desc.labels):
            raise ValueError(
                f"{self.desc.name}: expected {len(self.desc.labels)} label values, "
                f"got {len(self.label_values)}"
            )

    @property
    def labels(self) -> dict[str, str]:
        return dict(zip(self.desc.labels, self.label_values))


def format_cuda_version(raw: int) -> str:
    """Unpack a CUDA driver version encoded as ``1000 * major + 10 * minor``.

    >>> format_cuda_version(11070)
    '11.7'
    """
    return f"{raw // 1000}.{raw % 1000 // 10}"
