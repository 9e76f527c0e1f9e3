"""Metric family table and descriptor construction."""

from __future__ import annotations

from nvgpu_collector._types import MetricDesc

# family -> (help, label names)
FAMILIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "sysinfo": (
        "System information from nvml.",
        ("driver_v", "cuda_v", "nvml_v"),
    ),
    "gpuinfo": (
        "GPU information from nvml.",
        ("index", "uuid", "name", "bus_type"),
    ),
    "appclk": (
        "GPU applications clock from nvml (MHz).",
        ("index", "type"),
    ),
    "clk": (
        "GPU clock information from nvml (MHz).",
        ("index", "type", "id"),
    ),
    "compute_mode": (
        "GPU compute mode from nvml.",
        ("index", "mode"),
    ),
    "perf": (
        "GPU performance state from nvml.",
        ("index", "state"),
    ),
    "persis_mode": (
        "GPU persistence mode from nvml.",
        ("index", "mode"),
    ),
    "util": (
        "GPU utilization rates from nvml (percent).",
        ("index", "type"),
    ),
    "min_fan_speed": (
        "GPU Min Fan Speed from nvml.",
        ("index",),
    ),
    "max_fan_speed": (
        "GPU Max Fan Speed from nvml.",
        ("index",),
    ),
    "fan_speed": (
        "GPU Fan Speed from nvml. It's the percentage of the maximum fan speed, "
        "which may exceed 100%",
        ("index", "fan"),
    ),
    "temp": (
        "GPU Temperature information from nvml in Celsius format.",
        ("index", "type"),
    ),
    "power_usage": (
        "GPU Power Usage information from nvml (Watts).",
        ("index",),
    ),
    "power_enforce_limit": (
        "GPU enforced power limit from nvml (Watts).",
        ("index",),
    ),
    "mem_total": (
        "GPU Memory Total from nvml (bytes).",
        ("index",),
    ),
    "mem_used": (
        "GPU Memory Used from nvml (bytes).",
        ("index",),
    ),
    "mem_free": (
        "GPU Memory Free from nvml (bytes).",
        ("index",),
    ),
}


def build_fq_name(*parts: str) -> str:
    """Join non-empty name parts with underscores."""
    return "_".join(p for p in parts if p)


def build_descriptors(namespace: str, subsystem: str) -> dict[str, MetricDesc]:
    """Create one descriptor per family, keyed by family name."""
    prefix = "nv" + subsystem
    return {
        family: MetricDesc(
            name=build_fq_name(namespace, prefix, family),
            help=help_text,
            labels=labels,
        )
        for family, (help_text, labels) in FAMILIES.items()
    }
