"""Serve NVIDIA GPU metrics on :9835 for Prometheus to scrape."""

import logging
import time

from prometheus_client import REGISTRY, start_http_server

from nvgpu_collector import CollectorConfig, CollectorRegistry, PrometheusBridge, nvgpu_registration

logging.basicConfig(level=logging.INFO)

# 1. The host owns the registry and decides what is enabled
registry = CollectorRegistry()
registry.add(nvgpu_registration())

config = CollectorConfig(enable_sysinfo=True, enable_gpuinfo=True, enable_fan=True)
collectors = registry.create_enabled(config, overrides={"nvgpu": True})

# 2. Every scrape runs one poll
REGISTRY.register(PrometheusBridge(collectors))
start_http_server(9835)

while True:
    time.sleep(60)
