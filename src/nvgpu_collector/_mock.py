"""Device library that simulates NVML without a GPU, for tests and demos."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from nvgpu_collector._errors import LibraryError, Status
from nvgpu_collector._types import MemoryInfo, Utilization


@dataclass
class MockGPU:
    """Simulated device state. All power values in milliwatts."""

    uuid: str = "GPU-0000"
    name: str = "NVIDIA H100 80GB HBM3"
    bus_type: int = 2
    fan_speeds: list[int] = field(default_factory=list)
    min_fan_speed: int = 30
    max_fan_speed: int = 100
    applications_clocks: dict[int, int] = field(
        default_factory=lambda: {0: 1755, 1: 1755, 2: 2619, 3: 1620}
    )
    clocks: dict[tuple[int, int], int] = field(default_factory=dict)
    compute_mode: int = 0
    performance_state: int = 0
    persistence_mode: int = 1
    utilization: Utilization = field(default_factory=lambda: Utilization(gpu=85, memory=40))
    temperatures: dict[int, int] = field(default_factory=lambda: {0: 72})
    power_usage: int = 350_000
    enforced_power_limit: int = 700_000
    memory: MemoryInfo = field(
        default_factory=lambda: MemoryInfo(total=80 * 1024**3, used=42 * 1024**3, free=38 * 1024**3)
    )


class MockDeviceLibrary:
    """Records every call and fails on demand.

    ``failures`` maps a method name to the status it should raise with,
    e.g. ``{"enforced_power_limit": Status.NOT_SUPPORTED}``.
    """

    vendor = "NVIDIA"

    def __init__(
        self,
        gpus: list[MockGPU] | None = None,
        *,
        failures: dict[str, int] | None = None,
        driver_version: str = "535.104.05",
        nvml_version: str = "12.535.104.05",
        cuda_driver_version: int = 12020,
    ) -> None:
        self.gpus = gpus if gpus is not None else [MockGPU()]
        self.failures = dict(failures or {})
        self.calls: Counter[str] = Counter()
        self._driver_version = driver_version
        self._nvml_version = nvml_version
        self._cuda_driver_version = cuda_driver_version
        self.initialized = False

    def _record(self, method: str) -> None:
        self.calls[method] += 1
        status = self.failures.get(method)
        if status is not None:
            raise LibraryError(status)

    def _gpu(self, handle: Any) -> MockGPU:
        if not self.initialized:
            raise LibraryError(Status.UNINITIALIZED)
        return self.gpus[handle]

    def init(self) -> None:
        self._record("init")
        self.initialized = True

    def shutdown(self) -> None:
        self._record("shutdown")
        self.initialized = False

    def device_count(self) -> int:
        self._record("device_count")
        return len(self.gpus)

    def device_handle(self, index: int) -> Any:
        self._record("device_handle")
        if not 0 <= index < len(self.gpus):
            raise LibraryError(Status.INVALID_ARGUMENT)
        return index

    def driver_version(self) -> str:
        self._record("driver_version")
        return self._driver_version

    def nvml_version(self) -> str:
        self._record("nvml_version")
        return self._nvml_version

    def cuda_driver_version(self) -> int:
        self._record("cuda_driver_version")
        return self._cuda_driver_version

    def uuid(self, handle: Any) -> str:
        self._record("uuid")
        return self._gpu(handle).uuid

    def name(self, handle: Any) -> str:
        self._record("name")
        return self._gpu(handle).name

    def bus_type(self, handle: Any) -> int:
        self._record("bus_type")
        return self._gpu(handle).bus_type

    def num_fans(self, handle: Any) -> int:
        self._record("num_fans")
        return len(self._gpu(handle).fan_speeds)

    def min_max_fan_speed(self, handle: Any) -> tuple[int, int]:
        self._record("min_max_fan_speed")
        gpu = self._gpu(handle)
        return gpu.min_fan_speed, gpu.max_fan_speed

    def fan_speed(self, handle: Any, fan: int) -> int:
        self._record("fan_speed")
        return self._gpu(handle).fan_speeds[fan]

    def applications_clock(self, handle: Any, clock_type: int) -> int:
        self._record("applications_clock")
        clocks = self._gpu(handle).applications_clocks
        if clock_type not in clocks:
            raise LibraryError(Status.NOT_SUPPORTED)
        return clocks[clock_type]

    def clock(self, handle: Any, clock_type: int, clock_id: int) -> int:
        self._record("clock")
        clocks = self._gpu(handle).clocks
        if (clock_type, clock_id) not in clocks:
            raise LibraryError(Status.NOT_SUPPORTED)
        return clocks[(clock_type, clock_id)]

    def compute_mode(self, handle: Any) -> int:
        self._record("compute_mode")
        return self._gpu(handle).compute_mode

    def performance_state(self, handle: Any) -> int:
        self._record("performance_state")
        return self._gpu(handle).performance_state

    def persistence_mode(self, handle: Any) -> int:
        self._record("persistence_mode")
        return self._gpu(handle).persistence_mode

    def utilization(self, handle: Any) -> Utilization:
        self._record("utilization")
        return self._gpu(handle).utilization

    def temperature(self, handle: Any, sensor: int) -> int:
        self._record("temperature")
        return self._gpu(handle).temperatures[sensor]

    def power_usage(self, handle: Any) -> int:
        self._record("power_usage")
        return self._gpu(handle).power_usage

    def enforced_power_limit(self, handle: Any) -> int:
        self._record("enforced_power_limit")
        return self._gpu(handle).enforced_power_limit

    def memory_info(self, handle: Any) -> MemoryInfo:
        self._record("memory_info")
        return self._gpu(handle).memory
