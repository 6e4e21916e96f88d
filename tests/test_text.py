"""
Tokenization and Filtering Tests
"""

import time
from types import SimpleNamespace

import pytest

from wordmap_server.core.errors import ResourceLoadError, ToolingTimeoutError
from wordmap_server.text import (
    AnalyzedToken,
    AnalyzerBuilder,
    JanomeAnalyzer,
    TokenizeOptions,
    build_analyzer,
    select_words,
    tokenize,
)

from conftest import FakeAnalyzer


TOKENS = [
    AnalyzedToken(pos="名詞", surface_form="猫", base_form="猫"),
    AnalyzedToken(pos="助詞", surface_form="が", base_form="が"),
    AnalyzedToken(pos="動詞", surface_form="走っ", base_form="走る"),
    AnalyzedToken(pos="助動詞", surface_form="た", base_form="た"),
    AnalyzedToken(pos="名詞", surface_form="猫", base_form="猫"),
    AnalyzedToken(pos="形容詞", surface_form="早く", base_form="早い"),
    AnalyzedToken(pos="名詞", surface_form="ポチ", base_form=None),
    AnalyzedToken(pos="名詞", surface_form="タマ", base_form="*"),
    AnalyzedToken(pos="記号", surface_form="　", base_form="　"),
    AnalyzedToken(pos="名詞", surface_form=" ", base_form=None),
    AnalyzedToken(pos="名詞", surface_form="走る", base_form="走る"),
]


def test_pos_filter_keeps_content_words():
    words = select_words(TOKENS, TokenizeOptions(pos_filter=True, unique_only=False))
    assert words == ["猫", "走る", "猫", "早い", "ポチ", "タマ", "走る"]


def test_no_pos_filter_keeps_everything_non_blank():
    words = select_words(TOKENS, TokenizeOptions(pos_filter=False, unique_only=False))
    assert words == ["猫", "が", "走る", "た", "猫", "早い", "ポチ", "タマ", "走る"]


def test_base_form_fallback_to_surface():
    words = select_words(TOKENS[6:8], TokenizeOptions(pos_filter=True, unique_only=False))
    assert words == ["ポチ", "タマ"]


@pytest.mark.parametrize("pos_filter", [True, False])
def test_unique_only_is_first_occurrence_subsequence(pos_filter):
    all_words = select_words(TOKENS, TokenizeOptions(pos_filter=pos_filter, unique_only=False))
    unique = select_words(TOKENS, TokenizeOptions(pos_filter=pos_filter, unique_only=True))

    assert len(unique) == len(set(unique))
    assert unique == list(dict.fromkeys(all_words))

    it = iter(all_words)
    assert all(word in it for word in unique)


def test_tokenize_uses_analyzer():
    words = tokenize(FakeAnalyzer(), "猫 は/*/助詞 犬 猫", TokenizeOptions())
    assert words == ["猫", "犬"]


def test_options_default_on():
    options = TokenizeOptions()
    assert options.pos_filter is True
    assert options.unique_only is True


# ---------------------------------------------------------------------
# Janome adapter
# ---------------------------------------------------------------------

class StubJanome:
    def tokenize(self, text):
        return [
            SimpleNamespace(surface="猫", part_of_speech="名詞,一般,*,*", base_form="猫"),
            SimpleNamespace(surface="ニャンコ", part_of_speech="名詞,固有名詞,*,*", base_form="*"),
            SimpleNamespace(surface="走っ", part_of_speech="動詞,自立,*,*", base_form="走る"),
        ]


def test_janome_adapter_maps_tokens():
    tokens = JanomeAnalyzer(tokenizer=StubJanome()).tokenize("ignored")
    assert tokens == [
        AnalyzedToken(pos="名詞", surface_form="猫", base_form="猫"),
        AnalyzedToken(pos="名詞", surface_form="ニャンコ", base_form=None),
        AnalyzedToken(pos="動詞", surface_form="走っ", base_form="走る"),
    ]


# ---------------------------------------------------------------------
# Analyzer construction deadline
# ---------------------------------------------------------------------

@pytest.mark.asyncio
async def test_build_analyzer_success():
    analyzer = await build_analyzer(FakeAnalyzer, timeout=5.0)
    assert isinstance(analyzer, FakeAnalyzer)


@pytest.mark.asyncio
async def test_build_analyzer_timeout():
    def slow_factory():
        time.sleep(0.5)
        return FakeAnalyzer()

    with pytest.raises(ToolingTimeoutError):
        await build_analyzer(slow_factory, timeout=0.05)


@pytest.mark.asyncio
async def test_build_analyzer_failure():
    def broken_factory():
        raise RuntimeError("dictionary missing")

    with pytest.raises(ResourceLoadError):
        await build_analyzer(broken_factory, timeout=5.0)


@pytest.mark.asyncio
async def test_builder_waits_on_construction_that_missed_its_deadline():
    calls = []

    def slow_factory():
        calls.append(1)
        time.sleep(0.3)
        return FakeAnalyzer()

    builder = AnalyzerBuilder(slow_factory)

    with pytest.raises(ToolingTimeoutError):
        await builder.build(timeout=0.05)
    assert builder.is_pending

    analyzer = await builder.build(timeout=5.0)

    assert isinstance(analyzer, FakeAnalyzer)
    assert len(calls) == 1
    assert not builder.is_pending


@pytest.mark.asyncio
async def test_builder_discards_failed_construction():
    outcomes = [RuntimeError("dictionary missing"), None]

    def flaky_factory():
        outcome = outcomes.pop(0)
        if outcome is not None:
            raise outcome
        return FakeAnalyzer()

    builder = AnalyzerBuilder(flaky_factory)

    with pytest.raises(ResourceLoadError):
        await builder.build(timeout=5.0)
    assert not builder.is_pending

    assert isinstance(await builder.build(timeout=5.0), FakeAnalyzer)
    assert outcomes == []
