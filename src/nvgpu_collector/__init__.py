"""nvgpu_collector: NVIDIA GPU telemetry as labeled gauges."""

from __future__ import annotations

from nvgpu_collector._backend import DeviceLibrary
from nvgpu_collector._collector import NVGPUCollector, create_collector
from nvgpu_collector._config import CollectorConfig
from nvgpu_collector._errors import (
    EnumerationError,
    InitError,
    LibraryError,
    NVGPUError,
    QueryError,
    ReleaseError,
    Status,
    UnsupportedCapability,
)
from nvgpu_collector._exporter import OTLPMetricExporter
from nvgpu_collector._mock import MockDeviceLibrary, MockGPU
from nvgpu_collector._nvml import NvmlLibrary
from nvgpu_collector._processor import PollingProcessor
from nvgpu_collector._prometheus import PrometheusBridge
from nvgpu_collector._registry import (
    Collector,
    CollectorRegistry,
    Registration,
    nvgpu_registration,
)
from nvgpu_collector._session import DeviceSession, open_session
from nvgpu_collector._types import (
    Device,
    MemoryInfo,
    MetricDesc,
    Observation,
    SystemInfo,
    Utilization,
    format_cuda_version,
)
from nvgpu_collector._version import __version__

__all__ = [
    "Collector",
    "CollectorConfig",
    "CollectorRegistry",
    "Device",
    "DeviceLibrary",
    "DeviceSession",
    "EnumerationError",
    "InitError",
    "LibraryError",
    "MemoryInfo",
    "MetricDesc",
    "MockDeviceLibrary",
    "MockGPU",
    "NVGPUCollector",
    "NVGPUError",
    "NvmlLibrary",
    "OTLPMetricExporter",
    "Observation",
    "PollingProcessor",
    "PrometheusBridge",
    "QueryError",
    "Registration",
    "ReleaseError",
    "Status",
    "SystemInfo",
    "UnsupportedCapability",
    "Utilization",
    "__version__",
    "create_collector",
    "format_cuda_version",
    "nvgpu_registration",
    "open_session",
]
