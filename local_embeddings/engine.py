"""
Local inference engine: feature-extraction pipelines on top of sentence-transformers.

Model files come from the Hugging Face hub cache; the first run downloads them.
"""

import os
from typing import List, Optional, Sequence, Union

import numpy as np
from huggingface_hub import snapshot_download
from huggingface_hub.utils import tqdm as hf_tqdm
from sentence_transformers import SentenceTransformer, models

from . import config
from .schema import ProgressCallback, ProgressEvent

SUPPORTED_TASKS = {"feature-extraction"}
SUPPORTED_POOLING = {"mean", "cls", "max"}


class FeatureOutput:
    """Flat float32 buffer plus its logical [rows, dimension] shape"""

    def __init__(self, data: np.ndarray, dims: List[int]):
        self.data = data
        self.dims = dims

    def tolist(self) -> List[List[float]]:
        return self.data.reshape(self.dims).tolist()


class FeatureExtractionPipeline:
    def __init__(self, model: SentenceTransformer, model_id: str, pooling: str = "mean"):
        self.model = model
        self.model_id = model_id
        self.pooling = pooling

    def __call__(
        self,
        texts: Union[str, Sequence[str]],
        pooling: str = "mean",
        normalize: bool = True,
        batch_size: Optional[int] = None,
    ) -> FeatureOutput:
        if pooling != self.pooling:
            raise ValueError(f"pipeline for {self.model_id} was built with {self.pooling} pooling, got {pooling}")
        batch = [texts] if isinstance(texts, str) else list(texts)
        if not batch:
            return FeatureOutput(np.zeros(0, dtype=np.float32), [0, 0])
        vectors = self.model.encode(
            batch,
            batch_size=batch_size or config.EMBED_BATCH_SIZE,
            show_progress_bar=False,
            convert_to_numpy=True,
            normalize_embeddings=normalize,
        )
        vectors = np.asarray(vectors, dtype=np.float32)
        if vectors.ndim == 1:
            vectors = vectors.reshape(len(batch), -1)
        rows, dimension = vectors.shape
        return FeatureOutput(vectors.reshape(-1), [rows, dimension])


def _report(callback: Optional[ProgressCallback], file: str, progress: float, status: str) -> None:
    if callback is not None:
        callback(ProgressEvent(file=file, progress=progress, status=status))


def _progress_bar_class(model_id: str, callback: Optional[ProgressCallback]):
    """tqdm class for snapshot_download that forwards finished files to the callback"""

    class _FileProgress(hf_tqdm):
        def __init__(self, *args, **kwargs):
            kwargs["disable"] = True
            super().__init__(*args, **kwargs)
            self._done = 0

        def __iter__(self):
            for path in super().__iter__():
                self._done += 1
                if self.total:
                    name = os.path.basename(str(path)) if path else model_id
                    _report(callback, name, 100.0 * self._done / self.total, "downloading")
                yield path

    return _FileProgress


def _fetch_model(model_id: str, cache_dir: Optional[str], callback: Optional[ProgressCallback]) -> str:
    # snapshot_download skips files already cached and fetches the missing ones
    _report(callback, model_id, 0.0, "initiate")
    return snapshot_download(
        model_id,
        cache_dir=cache_dir,
        ignore_patterns=config.EMBED_IGNORE_PATTERNS,
        tqdm_class=_progress_bar_class(model_id, callback),
    )


def create_pipeline(
    task: str,
    model_id: str,
    progress_callback: Optional[ProgressCallback] = None,
    device: Optional[str] = None,
    cache_dir: Optional[str] = None,
    pooling: str = "mean",
    max_seq_length: Optional[int] = None,
) -> FeatureExtractionPipeline:
    if task not in SUPPORTED_TASKS:
        raise ValueError(f"unsupported task: {task}")
    if pooling not in SUPPORTED_POOLING:
        raise ValueError(f"unsupported pooling: {pooling}")

    path = _fetch_model(model_id, cache_dir or config.EMBED_CACHE_DIR, progress_callback)

    _report(progress_callback, model_id, 0.0, "loading")
    # Modules are assembled here instead of read from modules.json so pooling is explicit.
    # max_seq_length overrides the model's trained 256 with the 512-token truncation budget.
    word = models.Transformer(path, max_seq_length=max_seq_length)
    pool = models.Pooling(word.get_word_embedding_dimension(), pooling_mode=pooling)
    model = SentenceTransformer(modules=[word, pool], device=device or config.EMBED_DEVICE)
    _report(progress_callback, model_id, 100.0, "ready")
    return FeatureExtractionPipeline(model, model_id, pooling=pooling)
