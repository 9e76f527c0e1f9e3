"""Device library protocol consumed by the session and collector."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from nvgpu_collector._types import MemoryInfo, Utilization


@runtime_checkable
class DeviceLibrary(Protocol):
    """Structural protocol for the device-access library.

    Every method returns its value or raises ``LibraryError`` carrying
    the library status code. Handles are opaque to the caller.
    """

    vendor: str

    def init(self) -> None: ...

    def shutdown(self) -> None: ...

    def device_count(self) -> int: ...

    def device_handle(self, index: int) -> Any: ...

    def driver_version(self) -> str: ...

    def nvml_version(self) -> str: ...

    def cuda_driver_version(self) -> int: ...

    def uuid(self, handle: Any) -> str: ...

    def name(self, handle: Any) -> str: ...

    def bus_type(self, handle: Any) -> int: ...

    def num_fans(self, handle: Any) -> int: ...

    def min_max_fan_speed(self, handle: Any) -> tuple[int, int]: ...

    def fan_speed(self, handle: Any, fan: int) -> int: ...

    def applications_clock(self, handle: Any, clock_type: int) -> int: ...

    def clock(self, handle: Any, clock_type: int, clock_id: int) -> int: ...

    def compute_mode(self, handle: Any) -> int: ...

    def performance_state(self, handle: Any) -> int: ...

    def persistence_mode(self, handle: Any) -> int: ...

    def utilization(self, handle: Any) -> Utilization: ...

    def temperature(self, handle: Any, sensor: int) -> int: ...

    def power_usage(self, handle: Any) -> int: ...

    def enforced_power_limit(self, handle: Any) -> int: ...

    def memory_info(self, handle: Any) -> MemoryInfo: ...
