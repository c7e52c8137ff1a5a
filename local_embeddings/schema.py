"""
Data types shared by the embedding providers and the inference engine
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional


@dataclass
class EmbeddingVector:
    """A single embedding; dimension always equals len(vector)"""

    vector: List[float] = field(default_factory=list)
    dimension: int = 0

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "EmbeddingVector":
        vector = [float(v) for v in values]
        return cls(vector=vector, dimension=len(vector))


@dataclass
class ProgressEvent:
    """Model acquisition progress reported by the inference engine"""

    file: str
    progress: float  # 0-100
    status: str  # initiate, downloading, loading, ready


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class EmbeddingConfig:
    model: Optional[str] = None
    progress_callback: Optional[ProgressCallback] = None


@dataclass(frozen=True)
class ModelInfo:
    dimension: int
    description: str = ""
