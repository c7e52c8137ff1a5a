
import os
from pathlib import Path

EMBED_MODEL = os.getenv("EMBED_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
EMBED_MAX_TOKENS = int(os.getenv("EMBED_MAX_TOKENS", "512"))
EMBED_CHARS_PER_TOKEN = int(os.getenv("EMBED_CHARS_PER_TOKEN", "4"))  # rough chars-per-token estimate for truncation
EMBED_BATCH_SIZE = int(os.getenv("EMBED_BATCH_SIZE", "32"))
EMBED_DEVICE = os.getenv("EMBED_DEVICE", "cpu")

_EMBED_CACHE_DIR_ENV = os.getenv("EMBED_CACHE_DIR")
EMBED_CACHE_DIR = (
    str(Path(_EMBED_CACHE_DIR_ENV).expanduser().resolve())
    if _EMBED_CACHE_DIR_ENV
    else None
)

EMBED_PROGRESS_LOG = os.getenv("EMBED_PROGRESS_LOG", "true").lower() == "true"

# Weights not needed by the PyTorch backend; model.safetensors is used instead of pytorch_model.bin
EMBED_IGNORE_PATTERNS = ["pytorch_model.bin", "*.onnx", "onnx/*", "openvino/*", "*.h5", "*.msgpack", "*.ot", "rust_model.ot"]
