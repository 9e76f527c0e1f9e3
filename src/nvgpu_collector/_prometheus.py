"""prometheus_client bridge exposing collectors as a custom collector."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator, Mapping

from prometheus_client.core import GaugeMetricFamily, Metric

from nvgpu_collector._errors import NVGPUError
from nvgpu_collector._metrics import build_fq_name
from nvgpu_collector._registry import Collector
from nvgpu_collector._types import Observation

logger = logging.getLogger("nvgpu_collector.prometheus")


def observations_to_families(observations: Iterable[Observation]) -> list[GaugeMetricFamily]:
    """Group observations into gauge families, in first-seen order."""
    families: dict[str, GaugeMetricFamily] = {}
    for obs in observations:
        family = families.get(obs.desc.name)
        if family is None:
            family = GaugeMetricFamily(obs.desc.name, obs.desc.help, labels=list(obs.desc.labels))
            families[obs.desc.name] = family
        family.add_metric(list(obs.label_values), obs.value)
    return list(families.values())


class PrometheusBridge:
    """Custom collector for ``prometheus_client.REGISTRY`` or any registry.

    Each scrape runs one poll per collector. A failed poll contributes no
    samples; its ``scrape_collector_success`` gauge reads 0.
    """

    def __init__(self, collectors: Mapping[str, Collector], *, namespace: str = "node") -> None:
        self._collectors = dict(collectors)
        self._namespace = namespace

    def describe(self) -> Iterator[Metric]:
        for collector in self._collectors.values():
            for desc in collector.describe():
                yield GaugeMetricFamily(desc.name, desc.help, labels=list(desc.labels))
        yield from self._scrape_families()

    def collect(self) -> Iterator[Metric]:
        duration, success = self._scrape_families()
        for name, collector in self._collectors.items():
            start = time.perf_counter()
            try:
                batch = collector.update()
                ok = True
            except NVGPUError as exc:
                logger.error("collector %s failed: %s", name, exc)
                batch = []
                ok = False
            except Exception:  # noqa: BLE001
                logger.error("collector %s failed unexpectedly", name, exc_info=True)
                batch = []
                ok = False
            elapsed = time.perf_counter() - start
            yield from observations_to_families(batch)
            duration.add_metric([name], elapsed)
            success.add_metric([name], 1.0 if ok else 0.0)
        yield duration
        yield success

    def _scrape_families(self) -> tuple[GaugeMetricFamily, GaugeMetricFamily]:
        duration = GaugeMetricFamily(
            build_fq_name(self._namespace, "scrape", "collector_duration_seconds"),
            "Duration of a collector scrape.",
            labels=["collector"],
        )
        success = GaugeMetricFamily(
            build_fq_name(self._namespace, "scrape", "collector_success"),
            "Whether a collector succeeded.",
            labels=["collector"],
        )
        return duration, success
