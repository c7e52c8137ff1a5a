"""
CPU-based sentence embeddings with the all-MiniLM family.

The model runs locally through sentence-transformers; the first run downloads
the weights into the Hugging Face cache.
"""

import time
import warnings
from threading import Lock
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence

from . import config
from . import metrics
from .base import Embedding
from .engine import create_pipeline
from .schema import EmbeddingConfig, EmbeddingVector, ModelInfo, ProgressEvent

PROVIDER_NAME = "MiniLM"

_SUPPORTED_MODELS = MappingProxyType({
    "sentence-transformers/all-MiniLM-L6-v2": ModelInfo(
        dimension=384,
        description="Fast and efficient CPU-based embedding model (recommended)",
    ),
    "sentence-transformers/all-MiniLM-L12-v2": ModelInfo(
        dimension=384,
        description="More accurate but slower variant with 12 layers",
    ),
    "sentence-transformers/all-mpnet-base-v2": ModelInfo(
        dimension=768,
        description="Higher quality but larger and slower (768 dimensions)",
    ),
})


class UnsupportedModelError(ValueError):
    pass


def default_progress_callback(event: ProgressEvent) -> None:
    if not config.EMBED_PROGRESS_LOG:
        return
    if event.status == "downloading":
        print(f"[MiniLM] Downloading {event.file}: {round(event.progress)}%", flush=True)
    elif event.status == "loading":
        print(f"[MiniLM] Loading {event.file}...", flush=True)


class MiniLMEmbedding(Embedding):
    _instance: Optional["MiniLMEmbedding"] = None
    _instance_lock = Lock()

    def __init__(self, embedding_config: Optional[EmbeddingConfig] = None):
        self.config = embedding_config or EmbeddingConfig()
        self.model_id = self.config.model or config.EMBED_MODEL
        info = _SUPPORTED_MODELS.get(self.model_id)
        if info is None:
            raise UnsupportedModelError(
                f"unknown model {self.model_id}; supported: {', '.join(_SUPPORTED_MODELS)}"
            )
        self.dimension = info.dimension
        self.max_tokens = config.EMBED_MAX_TOKENS
        self._pipeline = None
        self._pipeline_lock = Lock()
        self._dimension_warned = False

    def _init_pipeline(self):
        """Build the feature-extraction pipeline on first use; later calls reuse it."""
        pipe = self._pipeline
        if pipe is not None:
            return pipe
        with self._pipeline_lock:
            if self._pipeline is not None:
                return self._pipeline

            print(f"[MiniLM] Loading model {self.model_id}...", flush=True)
            print("[MiniLM] First run will download the model. Subsequent runs will use cached model.", flush=True)
            start = time.perf_counter()
            self._pipeline = create_pipeline(
                "feature-extraction",
                self.model_id,
                progress_callback=self.config.progress_callback or default_progress_callback,
                device=config.EMBED_DEVICE,
                cache_dir=config.EMBED_CACHE_DIR,
                max_seq_length=self.max_tokens,
            )
            metrics.record_load((time.perf_counter() - start) * 1000)
            print("[MiniLM] Model loaded successfully", flush=True)
            return self._pipeline

    def _check_dimension(self, measured: int) -> None:
        # measured output wins over the registry value
        if measured == self.dimension:
            return
        if not self._dimension_warned:
            warnings.warn(
                f"{self.model_id} produced {measured}-dimensional vectors, expected {self.dimension}",
                RuntimeWarning,
                stacklevel=3,
            )
            self._dimension_warned = True
        self.dimension = measured

    def detect_dimension(self, test_text: str = "test") -> int:
        return self.dimension

    def embed(self, text: str) -> EmbeddingVector:
        start = time.perf_counter()
        processed = self.preprocess_text(text)
        pipe = self._init_pipeline()

        output = pipe(processed, pooling="mean", normalize=True)
        result = EmbeddingVector.from_values(output.data)
        self._check_dimension(result.dimension)

        metrics.record_embed((time.perf_counter() - start) * 1000)
        return result

    def embed_batch(self, texts: Sequence[str]) -> List[EmbeddingVector]:
        if not texts:
            return []
        start = time.perf_counter()
        processed = self.preprocess_texts(texts)
        pipe = self._init_pipeline()

        output = pipe(processed, pooling="mean", normalize=True, batch_size=config.EMBED_BATCH_SIZE)
        results = [EmbeddingVector.from_values(row) for row in output.tolist()]
        if results:
            self._check_dimension(results[0].dimension)

        metrics.record_batch((time.perf_counter() - start) * 1000, len(results))
        return results

    def get_dimension(self) -> int:
        return self.dimension

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def get_model_id(self) -> str:
        return self.model_id

    def is_loaded(self) -> bool:
        return self._pipeline is not None

    def dispose(self) -> None:
        with self._pipeline_lock:
            self._pipeline = None

    @classmethod
    def get_instance(cls, embedding_config: Optional[EmbeddingConfig] = None) -> "MiniLMEmbedding":
        """
        Shared instance for the whole process.

        The first call decides the configuration; a later call with a different
        config gets the existing instance and a RuntimeWarning.
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(embedding_config)
            elif embedding_config is not None and embedding_config != cls._instance.config:
                warnings.warn(
                    f"MiniLMEmbedding already initialised with {cls._instance.model_id}; "
                    "call reset_instance() before reconfiguring",
                    RuntimeWarning,
                    stacklevel=2,
                )
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Dispose the shared instance and clear the slot."""
        with cls._instance_lock:
            previous = cls._instance
            cls._instance = None
        if previous is not None:
            previous.dispose()

    @staticmethod
    def get_supported_models() -> Dict[str, ModelInfo]:
        return dict(_SUPPORTED_MODELS)
