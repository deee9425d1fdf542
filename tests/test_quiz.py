import json
import logging
import random

import pytest

from vocabmix.errors import InsufficientDataError, ParseError
from vocabmix.models import Mode, QuestionItem, WordPair
from vocabmix.quiz import (
    DirectQuizGenerator,
    InverseQuizGenerator,
    MixedQuizGenerator,
    QuizFactory,
    generate_options,
    parse_word_pairs,
    percent,
    shuffle,
)


def make_pairs(n):
    return [WordPair(word=f"w{i}", translation=f"t{i}") for i in range(n)]


# --- Shuffle ---
def test_shuffle_returns_permutation_without_mutating_input():
    items = list(range(20))
    result = shuffle(items, random.Random(7))
    assert items == list(range(20))
    assert sorted(result) == items
    assert result is not items


# --- Parsing ---
def test_parse_valid_input(abcd_text):
    pairs = parse_word_pairs(abcd_text)
    assert [p.word for p in pairs] == ["A", "B", "C", "D"]
    assert pairs[0].translation == "1"


def test_parse_ignores_extra_keys():
    text = json.dumps([{"word": w, "translation": w.lower(), "note": "x"} for w in "ABCD"])
    assert len(parse_word_pairs(text)) == 4


@pytest.mark.parametrize(
    "text",
    [
        '[{"word": "A", "translation": "1"},]',
        "",
        '{"word": "A", "translation": "1"}',
        '[{"word": "A"}, {"word": "B", "translation": "2"}]',
        '[{"word": "", "translation": "1"}]',
        '[{"word": 5, "translation": "1"}]',
        '["A", "B", "C", "D"]',
    ],
)
def test_parse_rejects_malformed_input(text):
    with pytest.raises(ParseError):
        parse_word_pairs(text)


def test_parse_rejects_duplicate_words():
    text = json.dumps(
        [{"word": "A", "translation": str(i)} for i in range(3)]
        + [{"word": "B", "translation": "x"}]
    )
    with pytest.raises(ParseError, match="Duplicate word"):
        parse_word_pairs(text)


def test_parse_requires_four_words():
    text = json.dumps([{"word": w, "translation": w} for w in "ABC"])
    with pytest.raises(InsufficientDataError) as excinfo:
        parse_word_pairs(text)
    assert excinfo.value.count == 3
    assert excinfo.value.minimum == 4


# --- Queue building ---
def test_mixed_queue_is_permutation_with_modes():
    pairs = make_pairs(50)
    queue = MixedQuizGenerator(random.Random(3)).build_queue(pairs)

    assert len(queue) == 50
    assert sorted(q.word for q in queue) == sorted(p.word for p in pairs)
    assert {q.mode for q in queue} == {Mode.DIRECT, Mode.INVERSE}
    for q in queue:
        assert q.translation == "t" + q.word[1:]


def test_mixed_queue_does_not_keep_input_order():
    pairs = make_pairs(30)
    queue = MixedQuizGenerator(random.Random(11)).build_queue(pairs)
    assert [q.word for q in queue] != [p.word for p in pairs]


def test_fixed_direction_generators():
    pairs = make_pairs(6)
    assert {q.mode for q in DirectQuizGenerator().build_queue(pairs)} == {Mode.DIRECT}
    assert {q.mode for q in InverseQuizGenerator().build_queue(pairs)} == {Mode.INVERSE}


def test_build_queue_requires_four_words():
    with pytest.raises(InsufficientDataError):
        MixedQuizGenerator().build_queue(make_pairs(3))


def test_factory_falls_back_to_mixed():
    assert QuizFactory.resolve("inverse") == "inverse"
    assert QuizFactory.resolve("nonsense") == "mixed"
    assert isinstance(QuizFactory.create("direct"), DirectQuizGenerator)
    assert isinstance(QuizFactory.create("nonsense"), MixedQuizGenerator)
    assert QuizFactory.modes() == ["mixed", "direct", "inverse"]


def test_question_items_are_frozen():
    item = QuestionItem(word="A", translation="1", mode=Mode.DIRECT)
    with pytest.raises(Exception):
        item.mode = Mode.INVERSE


# --- Options ---
@pytest.mark.parametrize("mode", [Mode.DIRECT, Mode.INVERSE])
def test_options_hold_one_correct_answer_from_same_field(mode):
    pool = make_pairs(10)
    rng = random.Random(5)
    field = "translation" if mode == Mode.DIRECT else "word"
    for pair in pool:
        item = QuestionItem(word=pair.word, translation=pair.translation, mode=mode)
        options = generate_options(item, pool, rng)

        assert len(options) == 4
        assert len(set(options)) == 4
        assert options.count(item.answer) == 1
        assert set(options) <= {getattr(p, field) for p in pool}


def test_options_do_not_mutate_pool():
    pool = make_pairs(5)
    before = [p.model_dump() for p in pool]
    item = QuestionItem(word="w0", translation="t0", mode=Mode.INVERSE)
    generate_options(item, pool, random.Random(1))
    assert [p.model_dump() for p in pool] == before


def test_shared_translation_collides_and_is_logged(caplog):
    pool = [
        WordPair(word="big", translation="grand"),
        WordPair(word="large", translation="grand"),
        WordPair(word="cat", translation="chat"),
        WordPair(word="dog", translation="chien"),
    ]
    item = QuestionItem(word="big", translation="grand", mode=Mode.DIRECT)
    with caplog.at_level(logging.WARNING, logger="vocabmix.quiz"):
        options = generate_options(item, pool, random.Random(2))

    assert len(options) == 4
    assert options.count("grand") == 2
    assert "Duplicate option values" in caplog.text


# --- Percent ---
@pytest.mark.parametrize(
    "score,total,expected",
    [(4, 4, 100), (0, 4, 0), (1, 8, 13), (1, 3, 33), (2, 3, 67), (1, 200, 1), (3, 5, 60)],
)
def test_percent_rounds_half_up(score, total, expected):
    assert percent(score, total) == expected


def test_percent_requires_positive_total():
    with pytest.raises(ValueError):
        percent(0, 0)
