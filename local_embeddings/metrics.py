import time
from threading import Lock
from typing import Dict

class _Metrics:
    def __init__(self):
        self._lock = Lock()
        self._reset()

    def _reset(self):
        self.embed_requests = 0
        self.embed_latency_ms = 0.0

        self.batch_requests = 0
        self.batch_latency_ms = 0.0
        self.batch_texts = 0

        self.pipeline_loads = 0
        self.pipeline_load_ms = 0.0

    def record_embed(self, latency_ms: float):
        with self._lock:
            self.embed_requests += 1
            self.embed_latency_ms += latency_ms

    def record_batch(self, latency_ms: float, texts: int):
        with self._lock:
            self.batch_requests += 1
            self.batch_latency_ms += latency_ms
            self.batch_texts += texts

    def record_load(self, latency_ms: float):
        with self._lock:
            self.pipeline_loads += 1
            self.pipeline_load_ms += latency_ms

    def reset(self):
        with self._lock:
            self._reset()

    def snapshot(self) -> Dict:
        with self._lock:
            embed_avg_latency = (self.embed_latency_ms / self.embed_requests) if self.embed_requests else 0.0

            batch_avg_latency = (self.batch_latency_ms / self.batch_requests) if self.batch_requests else 0.0
            batch_avg_size = (self.batch_texts / self.batch_requests) if self.batch_requests else 0.0
            per_text_latency = (self.batch_latency_ms / self.batch_texts) if self.batch_texts else 0.0

            load_avg = (self.pipeline_load_ms / self.pipeline_loads) if self.pipeline_loads else 0.0

            return {
                "timestamp": time.time(),
                "embed": {
                    "requests": self.embed_requests,
                    "avg_latency_ms": round(embed_avg_latency, 2),
                },
                "batch": {
                    "requests": self.batch_requests,
                    "texts": self.batch_texts,
                    "avg_latency_ms": round(batch_avg_latency, 2),
                    "avg_batch_size": round(batch_avg_size, 2),
                    "avg_latency_per_text_ms": round(per_text_latency, 2),
                },
                "pipeline": {
                    "loads": self.pipeline_loads,
                    "avg_load_ms": round(load_avg, 2),
                },
            }

_metrics = _Metrics()


def record_embed(latency_ms: float):
    _metrics.record_embed(latency_ms)


def record_batch(latency_ms: float, texts: int):
    _metrics.record_batch(latency_ms, texts)


def record_load(latency_ms: float):
    _metrics.record_load(latency_ms)


def reset():
    _metrics.reset()


def snapshot() -> Dict:
    return _metrics.snapshot()
