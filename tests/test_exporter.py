"""Tests for the OTLP gRPC metric exporter."""

from __future__ import annotations

import threading
from concurrent import futures

import grpc
import pytest
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import (
    ExportMetricsServiceRequest,
    ExportMetricsServiceResponse,
)
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2_grpc import (
    MetricsServiceServicer,
    add_MetricsServiceServicer_to_server,
)

import nvgpu_collector
from nvgpu_collector._exporter import (
    OTLPMetricExporter,
    _build_export_request,
    _make_attribute,
    _observation_to_point,
)
from nvgpu_collector._types import MetricDesc, Observation
from nvgpu_collector._version import __version__

_TEMP = MetricDesc(name="node_nvgpu_temp", help="GPU temperature.", labels=("index", "type"))
_POWER = MetricDesc(name="node_nvgpu_power_usage", help="GPU power.", labels=("index",))


def _make_batch() -> list[Observation]:
    return [
        Observation(_TEMP, 61.0, ("0", "GPU")),
        Observation(_POWER, 72.5, ("0",)),
        Observation(_TEMP, 64.0, ("1", "GPU")),
    ]


class TestMakeAttribute:
    def test_string(self) -> None:
        kv = _make_attribute("key", "value")
        assert kv.key == "key"
        assert kv.value.string_value == "value"


class TestObservationToPoint:
    def test_labels_become_attributes(self) -> None:
        point = _observation_to_point(Observation(_TEMP, 61.0, ("0", "GPU")), 123)
        attrs = {a.key: a.value.string_value for a in point.attributes}
        assert attrs == {"index": "0", "type": "GPU"}
        assert point.time_unix_nano == 123

    def test_integral_value_as_int(self) -> None:
        point = _observation_to_point(Observation(_TEMP, 61.0, ("0", "GPU")), 0)
        assert point.WhichOneof("value") == "as_int"
        assert point.as_int == 61

    def test_fractional_value_as_double(self) -> None:
        point = _observation_to_point(Observation(_POWER, 72.5, ("0",)), 0)
        assert point.WhichOneof("value") == "as_double"
        assert point.as_double == pytest.approx(72.5)


class TestBuildExportRequest:
    def test_one_metric_per_family(self) -> None:
        req = _build_export_request(_make_batch(), "gpu-host", time_ns=1)
        metrics = req.resource_metrics[0].scope_metrics[0].metrics
        assert [m.name for m in metrics] == ["node_nvgpu_temp", "node_nvgpu_power_usage"]
        assert len(metrics[0].gauge.data_points) == 2
        assert metrics[0].description == "GPU temperature."

    def test_resource_attributes(self) -> None:
        req = _build_export_request(_make_batch(), "gpu-host")
        resource = req.resource_metrics[0].resource
        attr_dict = {a.key: a.value.string_value for a in resource.attributes}
        assert attr_dict["service.name"] == "gpu-host"
        assert attr_dict["telemetry.sdk.name"] == "nvgpu_collector"
        assert "host.name" in attr_dict

    def test_scope_info(self) -> None:
        req = _build_export_request(_make_batch(), "svc")
        scope = req.resource_metrics[0].scope_metrics[0].scope
        assert scope.name == "nvgpu_collector"
        assert scope.version == __version__

    def test_sdk_version_matches_package(self) -> None:
        req = _build_export_request(_make_batch(), "svc")
        resource = req.resource_metrics[0].resource
        attr_dict = {a.key: a.value.string_value for a in resource.attributes}
        assert attr_dict["telemetry.sdk.version"] == nvgpu_collector.__version__


class TestOTLPMetricExporter:
    def test_export_empty_batch(self) -> None:
        exporter = OTLPMetricExporter("localhost:4317", "svc")
        exporter.export([])
        exporter.shutdown()

    def test_graceful_failure_bad_endpoint(self) -> None:
        exporter = OTLPMetricExporter("localhost:1", "svc", timeout_s=0.1)
        exporter.export(_make_batch())  # Must not raise
        exporter.shutdown()


class _CollectorServicer(MetricsServiceServicer):
    """In-process gRPC servicer that collects ExportMetricsServiceRequests."""

    def __init__(self) -> None:
        self.requests: list[ExportMetricsServiceRequest] = []
        self._lock = threading.Lock()

    def Export(  # noqa: N802
        self,
        request: ExportMetricsServiceRequest,
        context: grpc.ServicerContext,
    ) -> ExportMetricsServiceResponse:
        with self._lock:
            self.requests.append(request)
        return ExportMetricsServiceResponse()


class TestWithMockGrpcServer:
    """Integration test with an in-process gRPC server."""

    def test_export_received_by_server(self) -> None:
        servicer = _CollectorServicer()
        server = grpc.server(futures.ThreadPoolExecutor(max_workers=2))
        add_MetricsServiceServicer_to_server(servicer, server)
        port = server.add_insecure_port("localhost:0")
        server.start()

        try:
            exporter = OTLPMetricExporter(f"localhost:{port}", "gpu-host", timeout_s=5.0)
            exporter.export(_make_batch())
            exporter.shutdown()

            assert len(servicer.requests) == 1
            req = servicer.requests[0]
            resource = req.resource_metrics[0].resource
            attr_dict = {a.key: a.value.string_value for a in resource.attributes}
            assert attr_dict["service.name"] == "gpu-host"

            metrics = req.resource_metrics[0].scope_metrics[0].metrics
            assert {m.name for m in metrics} == {"node_nvgpu_temp", "node_nvgpu_power_usage"}
        finally:
            server.stop(grace=1)
