from wordmap_server.coords import parse_coordinates
from wordmap_server.core.errors import InsufficientInputError
from wordmap_server.embeddings import Vocabulary
from wordmap_server.plotting import PlotPoint, select_plottable


COORDS = parse_coordinates(
    "word,x,y\n猫,1,2\n犬,3,4\n鳥,5,6\n魚,7,8\n"
)
# 魚 has a point but no vector; 馬 has a vector but no point
VOCAB = Vocabulary(["猫", "犬", "鳥", "馬"])


def test_keeps_words_in_both_tables_in_order():
    selection = select_plottable(["鳥", "魚", "猫", "馬", "犬"], COORDS, VOCAB)

    assert selection.ok
    assert selection.words == ["鳥", "猫", "犬"]
    assert selection.points == [
        PlotPoint("鳥", 5.0, 6.0),
        PlotPoint("猫", 1.0, 2.0),
        PlotPoint("犬", 3.0, 4.0),
    ]


def test_never_returns_word_missing_from_either_table():
    selection = select_plottable(["猫", "魚", "馬", "犬", "謎"], COORDS, VOCAB)
    for word in selection.words:
        assert word in COORDS
        assert word in VOCAB


def test_repeats_are_kept():
    selection = select_plottable(["猫", "犬", "猫"], COORDS, VOCAB)
    assert selection.words == ["猫", "犬", "猫"]
    assert len(selection.points) == 3


def test_fewer_than_two_is_reported():
    selection = select_plottable(["猫", "魚", "馬"], COORDS, VOCAB)

    assert not selection.ok
    assert isinstance(selection.error, InsufficientInputError)
    assert selection.error.found == 1
    assert selection.error.required == 2
    assert selection.words == []
    assert selection.points == []


def test_empty_input_is_reported():
    selection = select_plottable([], COORDS, VOCAB)
    assert not selection.ok
    assert selection.error.found == 0


def test_custom_minimum():
    selection = select_plottable(["猫", "犬"], COORDS, VOCAB, min_words=3)
    assert not selection.ok
    assert selection.error.required == 3
