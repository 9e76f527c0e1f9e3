"""OTLP gRPC exporter: converts observation batches to protobuf and ships them."""

from __future__ import annotations

import logging
import platform
import time
from typing import TYPE_CHECKING

import grpc
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import (
    ExportMetricsServiceRequest,
)
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2_grpc import (
    MetricsServiceStub,
)
from opentelemetry.proto.common.v1.common_pb2 import (
    AnyValue,
    InstrumentationScope,
    KeyValue,
)
from opentelemetry.proto.metrics.v1.metrics_pb2 import (
    Gauge,
    Metric,
    NumberDataPoint,
    ResourceMetrics,
    ScopeMetrics,
)
from opentelemetry.proto.resource.v1.resource_pb2 import Resource

from nvgpu_collector._version import __version__

if TYPE_CHECKING:
    from nvgpu_collector._types import Observation

logger = logging.getLogger("nvgpu_collector.exporter")

_SCOPE_NAME = "nvgpu_collector"
_SCOPE_VERSION = __version__


def _make_attribute(key: str, value: str) -> KeyValue:
    """Convert a label or resource attribute to an OTLP KeyValue protobuf."""
    return KeyValue(key=key, value=AnyValue(string_value=value))


def _observation_to_point(obs: Observation, time_ns: int) -> NumberDataPoint:
    """Convert a single observation to an OTLP NumberDataPoint."""
    attrs = [_make_attribute(k, v) for k, v in zip(obs.desc.labels, obs.label_values)]
    value = float(obs.value)
    if value.is_integer():
        return NumberDataPoint(attributes=attrs, time_unix_nano=time_ns, as_int=int(value))
    return NumberDataPoint(attributes=attrs, time_unix_nano=time_ns, as_double=value)


def _build_export_request(
    observations: list[Observation],
    service_name: str,
    *,
    time_ns: int | None = None,
) -> ExportMetricsServiceRequest:
    """Build an ExportMetricsServiceRequest with one gauge per family."""
    if time_ns is None:
        time_ns = time.time_ns()

    resource = Resource(attributes=[
        _make_attribute("service.name", service_name),
        _make_attribute("host.name", platform.node()),
        _make_attribute("telemetry.sdk.name", _SCOPE_NAME),
        _make_attribute("telemetry.sdk.version", _SCOPE_VERSION),
    ])
    scope = InstrumentationScope(name=_SCOPE_NAME, version=_SCOPE_VERSION)

    points: dict[str, tuple[str, list[NumberDataPoint]]] = {}
    for obs in observations:
        entry = points.setdefault(obs.desc.name, (obs.desc.help, []))
        entry[1].append(_observation_to_point(obs, time_ns))

    metrics = [
        Metric(name=name, description=help_text, gauge=Gauge(data_points=data_points))
        for name, (help_text, data_points) in points.items()
    ]
    scope_metrics = ScopeMetrics(scope=scope, metrics=metrics)
    resource_metrics = ResourceMetrics(resource=resource, scope_metrics=[scope_metrics])

    return ExportMetricsServiceRequest(resource_metrics=[resource_metrics])


class OTLPMetricExporter:
    """Exports observation batches over gRPC using the OTLP metrics protocol.

    Designed as a handler for PollingProcessor. Failures are logged but
    never raised.
    """

    def __init__(
        self,
        endpoint: str,
        service_name: str,
        *,
        insecure: bool = True,
        timeout_s: float = 10.0,
        api_key: str | None = None,
    ) -> None:
        self._service_name = service_name
        self._timeout_s = timeout_s
        self._metadata: list[tuple[str, str]] | None = None
        if api_key is not None:
            self._metadata = [("authorization", f"Bearer {api_key}")]

        if insecure:
            self._channel = grpc.insecure_channel(endpoint)
        else:
            self._channel = grpc.secure_channel(endpoint, grpc.ssl_channel_credentials())

        self._stub = MetricsServiceStub(self._channel)  # type: ignore[no-untyped-call]

    def export(self, observations: list[Observation]) -> None:
        """Export a batch of observations. Logs and swallows all errors."""
        if not observations:
            return
        try:
            request = _build_export_request(observations, self._service_name)
            self._stub.Export(request, timeout=self._timeout_s, metadata=self._metadata)
        except Exception:  # noqa: BLE001
            logger.debug("Failed to export %d observations", len(observations), exc_info=True)

    def shutdown(self) -> None:
        """Close the gRPC channel."""
        self._channel.close()
