"""Host-owned registry of collector factories."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from nvgpu_collector._collector import create_collector
from nvgpu_collector._config import CollectorConfig
from nvgpu_collector._types import MetricDesc, Observation


@runtime_checkable
class Collector(Protocol):
    """Anything that can describe its families and run one poll."""

    def describe(self) -> list[MetricDesc]: ...

    def update(self) -> list[Observation]: ...


CollectorFactory = Callable[[CollectorConfig], Collector]


@dataclass(frozen=True)
class Registration:
    """A named collector factory and its default enable policy."""

    name: str
    factory: CollectorFactory
    default_enabled: bool = False


class CollectorRegistry:
    """Explicit registry; nothing is registered until the host asks."""

    def __init__(self) -> None:
        self._entries: dict[str, Registration] = {}

    def register(
        self,
        name: str,
        factory: CollectorFactory,
        *,
        default_enabled: bool = False,
    ) -> None:
        if name in self._entries:
            raise ValueError(f"collector {name!r} is already registered")
        self._entries[name] = Registration(name, factory, default_enabled)

    def add(self, registration: Registration) -> None:
        self.register(
            registration.name,
            registration.factory,
            default_enabled=registration.default_enabled,
        )

    def names(self) -> list[str]:
        return list(self._entries)

    def enabled(self, overrides: Mapping[str, bool] | None = None) -> list[str]:
        """Names that are enabled after applying per-name overrides."""
        overrides = overrides or {}
        unknown = set(overrides) - set(self._entries)
        if unknown:
            raise KeyError(f"unknown collectors: {', '.join(sorted(unknown))}")
        return [
            name
            for name, entry in self._entries.items()
            if overrides.get(name, entry.default_enabled)
        ]

    def create(self, name: str, config: CollectorConfig) -> Collector:
        try:
            entry = self._entries[name]
        except KeyError:
            raise KeyError(f"unknown collector {name!r}") from None
        return entry.factory(config)

    def create_enabled(
        self,
        config: CollectorConfig,
        overrides: Mapping[str, bool] | None = None,
    ) -> dict[str, Collector]:
        return {name: self.create(name, config) for name in self.enabled(overrides)}


def nvgpu_registration() -> Registration:
    """The NVIDIA GPU collector entry, disabled by default."""
    return Registration("nvgpu", create_collector, default_enabled=False)
