import threading
import time

import numpy as np

from local_embeddings.engine import FeatureOutput


class FakePipeline:
    """Deterministic stand-in for a feature-extraction pipeline"""

    def __init__(self, dimension=384):
        self.dimension = dimension
        self.calls = []

    def _vector(self, text):
        vec = np.zeros(self.dimension, dtype=np.float32)
        vec[len(text) % self.dimension] = 1.0
        return vec

    def __call__(self, texts, pooling="mean", normalize=True, batch_size=None):
        self.calls.append({"texts": texts, "pooling": pooling, "normalize": normalize, "batch_size": batch_size})
        batch = [texts] if isinstance(texts, str) else list(texts)
        rows = np.stack([self._vector(t) for t in batch])
        return FeatureOutput(rows.reshape(-1), [len(batch), self.dimension])


class PipelineFactory:
    """Counts create_pipeline calls; optional delay widens the init race window"""

    def __init__(self, dimension=384, delay=0.0, error=None):
        self.dimension = dimension
        self.delay = delay
        self.error = error
        self.created = []
        self.kwargs = []
        self._lock = threading.Lock()

    def __call__(self, task, model_id, **kwargs):
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        pipe = FakePipeline(self.dimension)
        with self._lock:
            self.created.append((task, model_id))
            self.kwargs.append(kwargs)
        return pipe
