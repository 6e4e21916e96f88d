"""
Vocabulary and Embedding Table

This module holds the two read-only structures behind similarity lookup:

- `Vocabulary`: ordered unique words plus the derived word -> index map
- `EmbeddingTable`: one fixed-width float32 vector per vocabulary entry

Both are built once per load and never mutated afterwards. The table is
validated against the vocabulary before it is handed out: a buffer whose
element count differs from `len(vocabulary) * dim` is rejected outright,
never truncated or padded.

Asset Formats
-------------
- Vocabulary: a JSON array of strings; array order defines index assignment.
- Vectors: a flat little-endian float32 buffer, vector i at [i*D, (i+1)*D).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.errors import DataIntegrityError, ResourceLoadError


FLOAT32_LE = np.dtype("<f4")


# ---------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------

class Vocabulary:
    """
    Immutable ordered word list with its index map.

    The list and the map are always built together, so they cannot drift.
    """

    def __init__(self, words: Sequence[str]) -> None:
        index: Dict[str, int] = {}
        for position, word in enumerate(words):
            if word in index:
                raise DataIntegrityError(
                    f"Duplicate vocabulary entry {word!r} at positions "
                    f"{index[word]} and {position}."
                )
            index[word] = position

        self._words: Tuple[str, ...] = tuple(words)
        self._index = index

    def index_of(self, word: str) -> Optional[int]:
        return self._index.get(word)

    def word_at(self, index: int) -> str:
        return self._words[index]

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)})"


def parse_vocabulary(raw: Union[str, bytes, List[Any]]) -> Vocabulary:
    """
    Build a Vocabulary from a JSON array of strings.

    Parameters
    ----------
    raw : str | bytes | list
        Either the undecoded JSON source or an already decoded list.

    Raises
    ------
    ResourceLoadError
        If the source is not valid JSON or not an array of strings.

    DataIntegrityError
        If a word occurs more than once.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ResourceLoadError(f"Vocabulary is not valid JSON: {exc}") from exc
    else:
        data = raw

    if not isinstance(data, list):
        raise ResourceLoadError("Vocabulary must be a JSON array of strings.")

    for position, word in enumerate(data):
        if not isinstance(word, str):
            raise ResourceLoadError(
                f"Vocabulary entry at position {position} is not a string."
            )

    return Vocabulary(data)


# ---------------------------------------------------------------------
# Embedding Table
# ---------------------------------------------------------------------

class EmbeddingTable:
    """
    Read-only (len(vocabulary), dim) float32 matrix.
    """

    def __init__(self, matrix: np.ndarray) -> None:
        if matrix.ndim != 2:
            raise DataIntegrityError("Embedding matrix must be two-dimensional.")

        matrix = matrix.view()
        matrix.flags.writeable = False
        self._matrix = matrix

    @property
    def dim(self) -> int:
        return int(self._matrix.shape[1])

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    def vector(self, index: int) -> np.ndarray:
        """Return the vector stored at `index`."""
        if not 0 <= index < len(self):
            raise IndexError(f"Embedding index {index} out of range.")
        return self._matrix[index]

    def __len__(self) -> int:
        return int(self._matrix.shape[0])

    def __repr__(self) -> str:
        return f"EmbeddingTable(rows={len(self)}, dim={self.dim})"


def build_embedding_table(
    vocabulary: Vocabulary,
    buffer: bytes,
    dim: int,
) -> EmbeddingTable:
    """
    Validate a raw vector buffer against the vocabulary and wrap it.

    Raises
    ------
    DataIntegrityError
        If the buffer is not a whole number of float32 values, or its element
        count is not exactly `len(vocabulary) * dim`.
    """
    if dim <= 0:
        raise DataIntegrityError(f"Embedding dimension must be positive, got {dim}.")

    if len(buffer) % FLOAT32_LE.itemsize:
        raise DataIntegrityError(
            f"Vector buffer size {len(buffer)} bytes is not a multiple of "
            f"{FLOAT32_LE.itemsize}."
        )

    flat = np.frombuffer(buffer, dtype=FLOAT32_LE)
    expected = len(vocabulary) * dim

    if flat.size != expected:
        raise DataIntegrityError(
            f"Vector buffer size mismatch: got {flat.size} values, "
            f"expected {expected} ({len(vocabulary)} words x {dim})."
        )

    return EmbeddingTable(flat.reshape(len(vocabulary), dim))


def load_embeddings(
    vocab_source: Union[str, bytes, List[Any]],
    buffer: bytes,
    dim: int,
) -> Tuple[Vocabulary, EmbeddingTable]:
    """
    Parse the vocabulary and its vector buffer in one step.

    Succeeds iff the buffer holds exactly `len(vocabulary) * dim` float32
    values; on failure nothing is returned, so no partial state survives.
    """
    vocabulary = parse_vocabulary(vocab_source)
    table = build_embedding_table(vocabulary, buffer, dim)
    return vocabulary, table
