#!/usr/bin/env python3
import argparse
import json
import time
from typing import List

from local_embeddings import metrics
from local_embeddings.minilm import MiniLMEmbedding
from local_embeddings.schema import EmbeddingConfig


def measure(embedder: MiniLMEmbedding, text: str) -> dict:
    start = time.perf_counter()
    result = embedder.embed(text)
    latency = time.perf_counter() - start
    return {
        "text": text,
        "latency_ms": round(latency * 1000, 1),
        "dimension": result.dimension,
    }


def main():
    parser = argparse.ArgumentParser(description="Measure single and batch embedding latency.")
    parser.add_argument("texts", nargs="+", help="Texts to embed")
    parser.add_argument("--model", help="Optional model id")
    parser.add_argument("--repeat", type=int, default=1)
    args = parser.parse_args()

    embedder = MiniLMEmbedding(EmbeddingConfig(model=args.model))

    rows: List[dict] = []
    for _ in range(max(1, args.repeat)):
        for t in args.texts:
            rows.append(measure(embedder, t))
        embedder.embed_batch(args.texts)

    print(json.dumps({"rows": rows, "metrics": metrics.snapshot()}, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
