"""Push NVIDIA GPU metrics to an OTLP collector every 15 seconds."""

import logging
import time

from nvgpu_collector import OTLPMetricExporter, PollingProcessor, create_collector

logging.basicConfig(level=logging.INFO)

collector = create_collector()
exporter = OTLPMetricExporter("localhost:4317", service_name="gpu-node-01")
processor = PollingProcessor(collector, interval_ms=15000, handler=exporter.export)
processor.start()

try:
    while True:
        time.sleep(60)
except KeyboardInterrupt:
    processor.stop()
    exporter.shutdown()
