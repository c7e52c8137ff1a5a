import re
from typing import Iterable, List, Optional

from . import config

_WHITESPACE = re.compile(r"\s+")


def preprocess_text(text: Optional[str], max_tokens: int) -> str:
    if not text:
        return " "
    cleaned = _WHITESPACE.sub(" ", text).strip()
    if not cleaned:
        return " "
    max_chars = max_tokens * config.EMBED_CHARS_PER_TOKEN
    if len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars]
    return cleaned


def preprocess_texts(texts: Iterable[Optional[str]], max_tokens: int) -> List[str]:
    return [preprocess_text(text, max_tokens) for text in texts]
