
import json
import pathlib
from argparse import ArgumentParser

from local_embeddings.minilm import MiniLMEmbedding
from local_embeddings.schema import EmbeddingConfig

def read_texts(path: str) -> list:
    p = pathlib.Path(path)
    lines = p.read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line.strip()]

def main():
    ap = ArgumentParser(description="Embed texts with a local MiniLM model and print JSON")
    ap.add_argument("texts", nargs="*")
    ap.add_argument("--file", action="append", default=[], help="File with one text per line (repeatable)")
    ap.add_argument("--model", help="Model id, see --info")
    ap.add_argument("--preview", type=int, default=0, help="Only print the first N vector components")
    ap.add_argument("--info", action="store_true", help="List supported models and exit")
    args = ap.parse_args()

    if args.info:
        models = {
            model_id: {"dimension": info.dimension, "description": info.description}
            for model_id, info in MiniLMEmbedding.get_supported_models().items()
        }
        print(json.dumps(models, ensure_ascii=False, indent=2))
        return

    texts = list(args.texts)
    for path in args.file:
        try:
            texts.extend(read_texts(path))
        except Exception as e:
            print(f"[skip] {path}: {e}")
    if not texts:
        ap.error("nothing to embed")

    embedder = MiniLMEmbedding(EmbeddingConfig(model=args.model))
    rows = []
    for text, emb in zip(texts, embedder.embed_batch(texts)):
        vector = emb.vector[: args.preview] if args.preview > 0 else emb.vector
        rows.append({"text": text, "dimension": emb.dimension, "vector": vector})
    embedder.dispose()

    print(json.dumps(rows, ensure_ascii=False, indent=2))

if __name__ == "__main__":
    main()
