"""Collector configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CollectorConfig:
    """Immutable collector configuration, resolved once at startup.

    Families without a flag are always collected.
    """

    namespace: str = "node"
    subsystem: str = "gpu"
    enable_sysinfo: bool = False
    enable_gpuinfo: bool = False
    enable_fan: bool = False
