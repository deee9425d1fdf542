import json
import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, TypeVar

from pydantic import TypeAdapter, ValidationError

from .config import settings
from .errors import InsufficientDataError, ParseError
from .models import AnswerRecord, Mode, QuestionItem, ResultSummary, WordPair

logger = logging.getLogger(__name__)

T = TypeVar("T")

_word_list_adapter = TypeAdapter(List[WordPair])


def shuffle(items: Sequence[T], rng=random) -> List[T]:
    """Returns a uniformly shuffled copy; the input is left untouched."""
    shuffled = list(items)
    rng.shuffle(shuffled)
    return shuffled


# --- Input Parsing ---
def parse_word_pairs(raw_input: str, minimum: int = settings.MIN_WORDS) -> List[WordPair]:
    """
    Parses the editor text into word pairs.

    Raises ParseError when the text is not a JSON array of
    {word, translation} objects with unique, non-empty words, and
    InsufficientDataError when fewer than `minimum` pairs are given.
    """
    try:
        data = json.loads(raw_input)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError("Expected a JSON array of {word, translation} objects.")

    try:
        pairs = _word_list_adapter.validate_python(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ParseError(f"Invalid entry at {location}: {first['msg']}") from e

    seen = set()
    for pair in pairs:
        if pair.word in seen:
            raise ParseError(f"Duplicate word: {pair.word!r}")
        seen.add(pair.word)

    if len(pairs) < minimum:
        raise InsufficientDataError(len(pairs), minimum)
    return pairs


# --- Option Generation ---
def generate_options(
    item: QuestionItem,
    pool: Sequence[WordPair],
    rng=random,
    num_options: int = settings.NUM_OPTIONS,
) -> List[str]:
    """One correct answer plus distractors from the same field, shuffled."""
    correct = item.answer
    target_field = "translation" if item.mode == Mode.DIRECT else "word"

    # Identity exclusion is by word, even when the target field is translation.
    candidates = [getattr(w, target_field) for w in pool if w.word != item.word]
    distractors = rng.sample(candidates, min(num_options - 1, len(candidates)))

    options = shuffle([correct] + distractors, rng)
    if len(set(options)) < len(options):
        logger.warning(f"Duplicate option values for {item.question!r}: {options}")
    return options


# --- Strategy Pattern: Queue Builders ---
class QuizGenerator(ABC):
    """Abstract Base Class for the ways a question queue can be built."""

    def __init__(self, rng=random):
        self.rng = rng

    @abstractmethod
    def pick_mode(self) -> Mode:
        pass

    def build_queue(self, pairs: Sequence[WordPair]) -> List[QuestionItem]:
        if len(pairs) < settings.MIN_WORDS:
            raise InsufficientDataError(len(pairs), settings.MIN_WORDS)
        return [
            QuestionItem(word=p.word, translation=p.translation, mode=self.pick_mode())
            for p in shuffle(pairs, self.rng)
        ]


class MixedQuizGenerator(QuizGenerator):
    """Default mode: each question independently asks one direction or the other."""

    def pick_mode(self) -> Mode:
        return Mode.DIRECT if self.rng.random() < 0.5 else Mode.INVERSE


class DirectQuizGenerator(QuizGenerator):
    def pick_mode(self) -> Mode:
        return Mode.DIRECT


class InverseQuizGenerator(QuizGenerator):
    def pick_mode(self) -> Mode:
        return Mode.INVERSE


class QuizFactory:
    """Factory to select the appropriate generator."""

    generators: Dict[str, type] = {
        "mixed": MixedQuizGenerator,
        "direct": DirectQuizGenerator,
        "inverse": InverseQuizGenerator,
    }

    @classmethod
    def resolve(cls, mode: str) -> str:
        """Returns the mode name that will actually be used."""
        if mode not in cls.generators:
            logger.warning(f"Unknown quiz mode {mode!r}, falling back to mixed.")
            return "mixed"
        return mode

    @classmethod
    def create(cls, mode: str, rng=random) -> QuizGenerator:
        return cls.generators[cls.resolve(mode)](rng)

    @classmethod
    def modes(cls) -> List[str]:
        return list(cls.generators)


# --- Result Summary ---
def percent(score: int, total: int) -> int:
    """Rounds 100 * score / total half-up, on integers to avoid float ties."""
    if total <= 0:
        raise ValueError("total must be positive")
    return (200 * score + total) // (2 * total)


def summarize(score: int, total: int, answers: List[AnswerRecord]) -> ResultSummary:
    return ResultSummary(
        score=score, total=total, percent=percent(score, total), answers=list(answers)
    )


def dump_pairs(pairs: List[Dict[str, Any]]) -> str:
    """Pretty-prints word pairs the way the editor shows them."""
    return json.dumps(pairs, indent=2, ensure_ascii=False)
