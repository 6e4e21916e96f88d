import json
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import pytest

from wordmap_server.config import Settings
from wordmap_server.resources.loader import ResourceLoader
from wordmap_server.text.analyzer import AnalyzedToken


COORDS_CSV = "word,x,y\n猫,1.0,2.0\n犬,3.0,4.0\n"
VOCAB = ["猫", "犬"]
VECTORS = [1.0, 0.0, 0.0, 1.0]


class FakeAnalyzer:
    """
    Whitespace analyzer: every token is a noun whose base form is itself.

    Tokens written as `surface/base/pos` override the defaults, e.g.
    `走った/走る/動詞` or `は/*/助詞`.
    """

    def tokenize(self, text: str) -> List[AnalyzedToken]:
        tokens = []
        for raw in text.split():
            parts = raw.split("/")
            surface = parts[0]
            base = parts[1] if len(parts) > 1 else surface
            pos = parts[2] if len(parts) > 2 else "名詞"
            tokens.append(AnalyzedToken(pos=pos, surface_form=surface, base_form=base))
        return tokens


def vector_bytes(values: Sequence[float]) -> bytes:
    return np.asarray(values, dtype="<f4").tobytes()


def write_assets(
    root: Path,
    coords: str = COORDS_CSV,
    vocab: Optional[list] = None,
    vectors: Optional[Sequence[float]] = None,
) -> None:
    (root / "coords.csv").write_text(coords, encoding="utf-8")
    (root / "vocab.json").write_text(
        json.dumps(VOCAB if vocab is None else vocab, ensure_ascii=False),
        encoding="utf-8",
    )
    (root / "vec.bin").write_bytes(vector_bytes(VECTORS if vectors is None else vectors))


@pytest.fixture
def asset_dir(tmp_path):
    write_assets(tmp_path)
    return tmp_path


@pytest.fixture
def test_settings(asset_dir):
    return Settings(
        asset_base=str(asset_dir),
        coords_file="coords.csv",
        vocab_file="vocab.json",
        vectors_file="vec.bin",
        embedding_dim=2,
        tokenizer_timeout=5.0,
    )


@pytest.fixture
def loader(test_settings):
    return ResourceLoader(test_settings, analyzer_factory=FakeAnalyzer)
