from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from . import config
from .schema import EmbeddingVector
from .text_cleaning import preprocess_text, preprocess_texts


class Embedding(ABC):
    """Common interface for embedding providers"""

    max_tokens: int = config.EMBED_MAX_TOKENS

    def preprocess_text(self, text: Optional[str]) -> str:
        return preprocess_text(text, self.max_tokens)

    def preprocess_texts(self, texts: Sequence[Optional[str]]) -> List[str]:
        return preprocess_texts(texts, self.max_tokens)

    @abstractmethod
    def detect_dimension(self, test_text: str = "test") -> int:
        ...

    @abstractmethod
    def embed(self, text: str) -> EmbeddingVector:
        ...

    @abstractmethod
    def embed_batch(self, texts: Sequence[str]) -> List[EmbeddingVector]:
        ...

    @abstractmethod
    def get_dimension(self) -> int:
        ...

    @abstractmethod
    def get_provider(self) -> str:
        ...
