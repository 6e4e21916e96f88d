import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from wordmap_server.config import Settings
from wordmap_server.core.errors import WordMapError
from wordmap_server.resources.loader import ResourceLoader


async def main() -> int:
    config = Settings()
    print(f"Checking assets under {config.asset_base} (dim={config.embedding_dim})...")

    # The tokenizer is not an asset; only the three data files are checked
    loader = ResourceLoader(config)

    try:
        coordinates = await loader.ensure_coordinates()
        print(
            f"coordinates: {len(coordinates)} words "
            f"({coordinates.dropped_rows} malformed rows dropped)"
        )

        vocabulary = await loader.ensure_vocabulary()
        print(f"vocabulary:  {len(vocabulary)} words")

        engine = await loader.ensure_embeddings()
        print(f"embeddings:  {len(engine.table)} x {engine.table.dim}")
    except WordMapError as e:
        print(f"FAILED ({e.code}): {e.message}")
        return 1

    both = sum(1 for word in coordinates if word in vocabulary)
    print(f"plottable:   {both} words have both a point and a vector")

    zero = engine.zero_vector_count
    if zero:
        print(f"warning:     {zero} all-zero vectors (similarity 0 to everything)")

    print("Done! Assets are consistent.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
