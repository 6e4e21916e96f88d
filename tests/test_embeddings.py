"""
Embedding Table and Similarity Tests

Covers the load-time size gate and the cosine/ranking contract.
"""

import json

import numpy as np
import pytest

from wordmap_server.core.errors import DataIntegrityError, ResourceLoadError
from wordmap_server.embeddings import (
    SimilarityEngine,
    Vocabulary,
    build_embedding_table,
    load_embeddings,
    parse_vocabulary,
)

from conftest import vector_bytes


def make_engine(words, vectors, dim=2):
    vocabulary, table = load_embeddings(words, vector_bytes(vectors), dim)
    return SimilarityEngine(vocabulary, table)


class TestLoadEmbeddings:

    def test_exact_size_loads(self):
        vocabulary, table = load_embeddings(
            json.dumps(["猫", "犬"]), vector_bytes([1, 0, 0, 1]), 2
        )
        assert len(vocabulary) == 2
        assert len(table) == 2
        assert table.dim == 2
        assert vocabulary.index_of("犬") == 1
        np.testing.assert_array_equal(table.vector(1), [0.0, 1.0])

    @pytest.mark.parametrize("count", [0, 1, 3, 5, 8])
    def test_wrong_element_count_rejected(self, count):
        with pytest.raises(DataIntegrityError):
            load_embeddings(["猫", "犬"], vector_bytes([0.5] * count), 2)

    def test_length_three_for_two_words_rejected(self):
        with pytest.raises(DataIntegrityError) as exc_info:
            load_embeddings(["猫", "犬"], vector_bytes([1, 0, 0]), 2)
        assert "expected 4" in exc_info.value.message

    def test_partial_float_rejected(self):
        with pytest.raises(DataIntegrityError):
            load_embeddings(["猫"], vector_bytes([1, 0]) + b"\x00", 2)

    def test_empty_vocabulary_with_empty_buffer(self):
        vocabulary, table = load_embeddings("[]", b"", 50)
        assert len(vocabulary) == 0
        assert len(table) == 0

    def test_little_endian_layout(self):
        buffer = np.asarray([1.5, -2.0], dtype="<f4").tobytes()
        _, table = load_embeddings(["a"], buffer, 2)
        assert table.vector(0).tolist() == [1.5, -2.0]

    def test_table_is_read_only(self):
        _, table = load_embeddings(["a"], vector_bytes([1, 2]), 2)
        with pytest.raises(ValueError):
            table.matrix[0, 0] = 5.0

    def test_vector_out_of_range(self):
        _, table = load_embeddings(["a"], vector_bytes([1, 2]), 2)
        with pytest.raises(IndexError):
            table.vector(1)

    def test_non_positive_dim_rejected(self):
        with pytest.raises(DataIntegrityError):
            build_embedding_table(Vocabulary([]), b"", 0)


class TestParseVocabulary:

    def test_order_defines_index(self):
        vocabulary = parse_vocabulary('["b", "a", "c"]')
        assert [vocabulary.index_of(w) for w in "abc"] == [1, 0, 2]
        assert list(vocabulary) == ["b", "a", "c"]
        assert "a" in vocabulary
        assert "z" not in vocabulary
        assert vocabulary.index_of("z") is None

    def test_invalid_json(self):
        with pytest.raises(ResourceLoadError):
            parse_vocabulary("[not json")

    def test_not_an_array(self):
        with pytest.raises(ResourceLoadError):
            parse_vocabulary('{"a": 0}')

    def test_non_string_entry(self):
        with pytest.raises(ResourceLoadError):
            parse_vocabulary('["a", 1]')

    def test_duplicate_entry(self):
        with pytest.raises(DataIntegrityError):
            parse_vocabulary('["a", "b", "a"]')


class TestSimilarity:

    def test_orthogonal_scenario(self):
        engine = make_engine(["猫", "犬"], [1, 0, 0, 1])
        assert engine.similarity(0, 1) == 0.0
        assert engine.similarity_of("猫", "犬") == 0.0

    def test_self_similarity_is_one(self):
        engine = make_engine(["a", "b"], [0.3, -4.0, 2.0, 7.5])
        assert engine.similarity(0, 0) == pytest.approx(1.0)
        assert engine.similarity(1, 1) == pytest.approx(1.0)

    def test_zero_vector_scores_zero(self):
        engine = make_engine(["a", "z"], [1, 2, 0, 0])
        assert engine.similarity(0, 1) == 0.0
        assert engine.similarity(1, 0) == 0.0
        assert engine.similarity(1, 1) == 0.0
        assert engine.zero_vector_count == 1

    def test_symmetric_and_bounded(self):
        rng = np.random.default_rng(7)
        words = [f"w{i}" for i in range(6)]
        engine = make_engine(words, rng.normal(size=6 * 5).tolist(), dim=5)
        for i in range(6):
            for j in range(6):
                s = engine.similarity(i, j)
                assert s == engine.similarity(j, i)
                assert -1.0 <= s <= 1.0

    def test_opposite_vectors(self):
        engine = make_engine(["a", "b"], [1, 1, -2, -2])
        assert engine.similarity(0, 1) == pytest.approx(-1.0)

    def test_unknown_word(self):
        engine = make_engine(["a"], [1, 0])
        assert engine.similarity_of("a", "missing") is None


class TestTopSimilar:

    @pytest.fixture
    def engine(self):
        # a=[1,0] b=[1,0] c=[0,1] d=[-1,0] z=[0,0]
        return make_engine(
            ["a", "b", "c", "d", "z"],
            [1, 0, 1, 0, 0, 1, -1, 0, 0, 0],
        )

    def test_excludes_query_and_unknown(self, engine):
        ranked = engine.top_similar("a", ["a", "x", "b", "a", "y"], k=10)
        assert ranked == [("b", pytest.approx(1.0))]
        assert engine.skipped_candidates == 2

    def test_sorted_descending_with_stable_ties(self, engine):
        ranked = engine.top_similar("a", ["d", "z", "c", "b"], k=10)
        assert [w for w, _ in ranked] == ["b", "z", "c", "d"]
        scores = [s for _, s in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_truncates_to_k(self, engine):
        ranked = engine.top_similar("a", ["b", "c", "d", "z"], k=2)
        assert [w for w, _ in ranked] == ["b", "c"]

    def test_length_bounded_by_eligible(self, engine):
        assert len(engine.top_similar("a", ["b", "missing"], k=10)) == 1

    def test_unknown_query_is_empty(self, engine):
        assert engine.top_similar("missing", ["a", "b"], k=10) == []

    def test_repeated_candidates_kept(self, engine):
        ranked = engine.top_similar("c", ["b", "b"], k=10)
        assert [w for w, _ in ranked] == ["b", "b"]
