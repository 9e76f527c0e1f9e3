"""Tests for core types."""

from __future__ import annotations

import pytest

from nvgpu_collector._types import (
    Device,
    MetricDesc,
    Observation,
    SystemInfo,
    format_cuda_version,
)

_DESC = MetricDesc(name="node_nvgpu_temp", help="temp", labels=("index", "type"))


class TestCudaVersion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(11070, "11.7"), (12020, "12.2"), (12000, "12.0"), (10010, "10.1")],
    )
    def test_format(self, raw: int, expected: str) -> None:
        assert format_cuda_version(raw) == expected

    def test_system_info_property(self) -> None:
        info = SystemInfo(driver_version="535", nvml_version="12.535", cuda_version_raw=12020)
        assert info.cuda_version == "12.2"


class TestObservation:
    def test_labels_mapping(self) -> None:
        obs = Observation(_DESC, 66.0, ("0", "GPU"))
        assert obs.labels == {"index": "0", "type": "GPU"}

    def test_label_count_mismatch(self) -> None:
        with pytest.raises(ValueError, match="expected 2 label values, got 1"):
            Observation(_DESC, 66.0, ("0",))

    def test_is_frozen(self) -> None:
        obs = Observation(_DESC, 1.0, ("0", "GPU"))
        with pytest.raises(AttributeError):
            obs.value = 2.0  # type: ignore[misc]


def test_device_label() -> None:
    assert Device(index=3, handle=object()).label == "3"
