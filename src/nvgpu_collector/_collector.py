"""NVIDIA GPU metric collector: one poll of NVML mapped to labeled gauges.

Power gauges are reported in watts; NVML returns milliwatts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from nvgpu_collector import _labels
from nvgpu_collector._backend import DeviceLibrary
from nvgpu_collector._config import CollectorConfig
from nvgpu_collector._errors import LibraryError, QueryError, UnsupportedCapability
from nvgpu_collector._metrics import build_descriptors
from nvgpu_collector._nvml import NvmlLibrary
from nvgpu_collector._session import open_session
from nvgpu_collector._types import Device, MetricDesc, Observation, SystemInfo

logger = logging.getLogger("nvgpu_collector.collector")

_T = TypeVar("_T")

_MW_PER_W = 1000.0


class NVGPUCollector:
    """Collects NVML telemetry for every device on each call to ``update``.

    A poll either returns the full observation list or raises; the
    session is released in both cases.
    """

    def __init__(self, config: CollectorConfig, library: DeviceLibrary) -> None:
        self.config = config
        self._library = library
        self._descs = build_descriptors(config.namespace, config.subsystem)

    def describe(self) -> list[MetricDesc]:
        return list(self._descs.values())

    def update(self) -> list[Observation]:
        """Run one poll.

        Raises ``InitError``, ``EnumerationError`` or ``QueryError``; an
        unsupported capability only drops the affected value.
        """
        out: list[Observation] = []
        with open_session(self._library) as session:
            devices = session.enumerate()

            if self.config.enable_sysinfo:
                self._collect_sysinfo(out)

            for device in devices:
                self._collect_device(device, out)

        return out

    # --- query helpers ---

    def _query(self, what: str, fn: Callable[..., _T], *args: Any) -> _T:
        """Call into the library; every failure is hard."""
        try:
            return fn(*args)
        except LibraryError as exc:
            raise QueryError(f"unable to get {what}: {exc.message}", status=exc.status) from exc

    def _optional_query(self, what: str, fn: Callable[..., _T], *args: Any) -> _T:
        """Like ``_query`` but an unsupported capability raises ``UnsupportedCapability``."""
        try:
            return fn(*args)
        except LibraryError as exc:
            if exc.unsupported:
                raise UnsupportedCapability(
                    f"{what} not supported: {exc.message}", status=exc.status
                ) from exc
            raise QueryError(f"unable to get {what}: {exc.message}", status=exc.status) from exc

    def _emit(self, out: list[Observation], family: str, value: float, *labels: str) -> None:
        out.append(Observation(self._descs[family], float(value), labels))

    # --- families ---

    def _collect_sysinfo(self, out: list[Observation]) -> None:
        lib = self._library
        info = SystemInfo(
            driver_version=self._query("NVIDIA System Driver Version", lib.driver_version),
            cuda_version_raw=self._query("NVIDIA CUDA Driver Version", lib.cuda_driver_version),
            nvml_version=self._query("NVIDIA NVML Version", lib.nvml_version),
        )
        self._emit(out, "sysinfo", 1, info.driver_version, info.cuda_version, info.nvml_version)

    def _collect_device(self, device: Device, out: list[Observation]) -> None:
        index = device.label
        if self.config.enable_gpuinfo:
            self._collect_gpuinfo(device, out)
        if self.config.enable_fan:
            self._collect_fans(device, out)
        self._collect_clocks(device, out)
        self._collect_modes(device, out)

        lib = self._library
        util = self._query(f"GPU {index} Utilization Rates", lib.utilization, device.handle)
        self._emit(out, "util", util.gpu, index, _labels.UTIL_GPU)
        self._emit(out, "util", util.memory, index, _labels.UTIL_MEMORY)

        for sensor in _labels.TEMPERATURE_SENSORS:
            temp = self._query(
                f"GPU {index} Temperature Sensor {sensor} Value",
                lib.temperature, device.handle, sensor,
            )
            self._emit(out, "temp", temp, index, _labels.temperature_sensor(sensor))

        self._collect_power(device, out)

        mem = self._query(f"GPU {index} Memory Info", lib.memory_info, device.handle)
        self._emit(out, "mem_total", mem.total, index)
        self._emit(out, "mem_used", mem.used, index)
        self._emit(out, "mem_free", mem.free, index)

    def _collect_gpuinfo(self, device: Device, out: list[Observation]) -> None:
        lib = self._library
        index = device.label
        uuid = self._query(f"GPU {index} UUID", lib.uuid, device.handle)
        name = self._query(f"GPU {index} NAME", lib.name, device.handle)
        bus = self._query(f"GPU {index} BUS Type", lib.bus_type, device.handle)
        self._emit(out, "gpuinfo", 1, index, uuid, name, _labels.bus_type(bus))

    def _collect_fans(self, device: Device, out: list[Observation]) -> None:
        lib = self._library
        index = device.label
        fans = self._query(f"GPU {index} Fan info", lib.num_fans, device.handle)
        if fans <= 0:
            logger.debug("GPU %s has no fan", index)
            return

        min_speed, max_speed = self._query(
            f"GPU {index} Fan Min/Max Speed", lib.min_max_fan_speed, device.handle
        )
        self._emit(out, "min_fan_speed", min_speed, index)
        self._emit(out, "max_fan_speed", max_speed, index)
        for fan in range(fans):
            speed = self._query(f"GPU {index} Fan {fan} Speed", lib.fan_speed, device.handle, fan)
            self._emit(out, "fan_speed", speed, index, str(fan))

    def _collect_clocks(self, device: Device, out: list[Observation]) -> None:
        lib = self._library
        index = device.label
        for clock_type, type_label in _labels.CLOCK_TYPES.items():
            try:
                value = self._optional_query(
                    f"GPU {index} {type_label} Applications Clock",
                    lib.applications_clock, device.handle, clock_type,
                )
            except UnsupportedCapability as exc:
                logger.debug("%s", exc)
                continue
            self._emit(out, "appclk", value, index, type_label)

        for clock_type, type_label in _labels.CLOCK_TYPES.items():
            for clock_id, id_label in _labels.CLOCK_IDS.items():
                try:
                    value = self._optional_query(
                        f"GPU {index} {type_label} {id_label} Clock",
                        lib.clock, device.handle, clock_type, clock_id,
                    )
                except UnsupportedCapability as exc:
                    logger.debug("%s", exc)
                    continue
                self._emit(out, "clk", value, index, type_label, id_label)

    def _collect_modes(self, device: Device, out: list[Observation]) -> None:
        lib = self._library
        index = device.label
        mode = self._query(f"GPU {index} Compute Mode", lib.compute_mode, device.handle)
        self._emit(out, "compute_mode", 1, index, _labels.compute_mode(mode))

        pstate = self._query(f"GPU {index} Performance State", lib.performance_state, device.handle)
        self._emit(out, "perf", 1, index, _labels.perf_state(pstate))

        persistence = self._query(
            f"GPU {index} Persistence Mode", lib.persistence_mode, device.handle
        )
        self._emit(out, "persis_mode", 1, index, _labels.persistence_mode(persistence))

    def _collect_power(self, device: Device, out: list[Observation]) -> None:
        lib = self._library
        index = device.label
        power = self._query(f"GPU {index} Power Usage Value", lib.power_usage, device.handle)
        self._emit(out, "power_usage", power / _MW_PER_W, index)

        try:
            limit = self._optional_query(
                f"GPU {index} Enforced Power Limit", lib.enforced_power_limit, device.handle
            )
        except UnsupportedCapability as exc:
            logger.debug("%s", exc)
            return
        self._emit(out, "power_enforce_limit", limit / _MW_PER_W, index)


def create_collector(
    config: CollectorConfig | None = None,
    *,
    library: DeviceLibrary | None = None,
) -> NVGPUCollector:
    """Factory: an ``NVGPUCollector`` over NVML unless another library is given."""
    if library is None:
        library = NvmlLibrary()
    return NVGPUCollector(config or CollectorConfig(), library)
