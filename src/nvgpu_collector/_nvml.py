"""NVIDIA device library backed by pynvml."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable
from typing import Any, TypeVar

from nvgpu_collector._errors import LibraryError, Status
from nvgpu_collector._types import MemoryInfo, Utilization

logger = logging.getLogger("nvgpu_collector.nvml")

# pynvml is optional at import time; a missing module surfaces as a
# LIBRARY_NOT_FOUND status from init().
warnings.filterwarnings("ignore", category=FutureWarning, message=".*pynvml.*deprecated.*")
try:
    import pynvml

    _HAS_PYNVML = True
except ImportError:
    pynvml = None  # type: ignore[assignment,unused-ignore]
    _HAS_PYNVML = False

_T = TypeVar("_T")


def _text(value: str | bytes) -> str:
    # Releases before 11.5 return bytes.
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class NvmlLibrary:
    """NVIDIA device library using pynvml.

    Translates ``pynvml.NVMLError`` into ``LibraryError`` with the same
    return code.
    """

    vendor = "NVIDIA"

    def _call(self, fn: Callable[..., _T], *args: Any) -> _T:
        assert pynvml is not None
        try:
            return fn(*args)
        except pynvml.NVMLError as exc:
            status = getattr(exc, "value", Status.UNKNOWN)
            raise LibraryError(status, str(exc)) from exc

    def init(self) -> None:
        if not _HAS_PYNVML:
            raise LibraryError(Status.LIBRARY_NOT_FOUND, "pynvml is not installed")
        assert pynvml is not None
        self._call(pynvml.nvmlInit)
        logger.debug("NVML initialized")

    def shutdown(self) -> None:
        if not _HAS_PYNVML:
            raise LibraryError(Status.LIBRARY_NOT_FOUND, "pynvml is not installed")
        assert pynvml is not None
        self._call(pynvml.nvmlShutdown)

    def device_count(self) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetCount))

    def device_handle(self, index: int) -> Any:
        assert pynvml is not None
        return self._call(pynvml.nvmlDeviceGetHandleByIndex, index)

    def driver_version(self) -> str:
        assert pynvml is not None
        return _text(self._call(pynvml.nvmlSystemGetDriverVersion))

    def nvml_version(self) -> str:
        assert pynvml is not None
        return _text(self._call(pynvml.nvmlSystemGetNVMLVersion))

    def cuda_driver_version(self) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlSystemGetCudaDriverVersion_v2))

    def uuid(self, handle: Any) -> str:
        assert pynvml is not None
        return _text(self._call(pynvml.nvmlDeviceGetUUID, handle))

    def name(self, handle: Any) -> str:
        assert pynvml is not None
        return _text(self._call(pynvml.nvmlDeviceGetName, handle))

    def bus_type(self, handle: Any) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetBusType, handle))

    def num_fans(self, handle: Any) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetNumFans, handle))

    def min_max_fan_speed(self, handle: Any) -> tuple[int, int]:
        assert pynvml is not None
        min_speed, max_speed = self._call(pynvml.nvmlDeviceGetMinMaxFanSpeed, handle)
        return int(min_speed), int(max_speed)

    def fan_speed(self, handle: Any, fan: int) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetFanSpeed_v2, handle, fan))

    def applications_clock(self, handle: Any, clock_type: int) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetApplicationsClock, handle, clock_type))

    def clock(self, handle: Any, clock_type: int, clock_id: int) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetClock, handle, clock_type, clock_id))

    def compute_mode(self, handle: Any) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetComputeMode, handle))

    def performance_state(self, handle: Any) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetPerformanceState, handle))

    def persistence_mode(self, handle: Any) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetPersistenceMode, handle))

    def utilization(self, handle: Any) -> Utilization:
        assert pynvml is not None
        util = self._call(pynvml.nvmlDeviceGetUtilizationRates, handle)
        return Utilization(gpu=int(util.gpu), memory=int(util.memory))

    def temperature(self, handle: Any, sensor: int) -> int:
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetTemperature, handle, sensor))

    def power_usage(self, handle: Any) -> int:
        """Current draw in milliwatts."""
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetPowerUsage, handle))

    def enforced_power_limit(self, handle: Any) -> int:
        """Enforced power ceiling in milliwatts."""
        assert pynvml is not None
        return int(self._call(pynvml.nvmlDeviceGetEnforcedPowerLimit, handle))

    def memory_info(self, handle: Any) -> MemoryInfo:
        assert pynvml is not None
        mem = self._call(pynvml.nvmlDeviceGetMemoryInfo, handle)
        return MemoryInfo(total=int(mem.total), used=int(mem.used), free=int(mem.free))
