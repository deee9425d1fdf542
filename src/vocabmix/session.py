import logging
import random
from functools import partial
from typing import List, Optional

from .config import settings
from .errors import QuizStateError
from .models import (
    AnswerRecord,
    Mode,
    QuestionItem,
    ResultSummary,
    SessionState,
    Status,
    WordPair,
)
from .quiz import QuizFactory, generate_options, parse_word_pairs, summarize
from .scheduler import AsyncioScheduler, Scheduler
from .speech import NullSpeaker, Speaker

logger = logging.getLogger(__name__)


class QuizSession:
    """
    State machine for one quiz at a time: setup -> active -> finished.

    Every start or return to setup bumps `generation`. The delayed advance
    scheduled after an answer carries the generation and question index it
    was created for and does nothing if either has changed since.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        speaker: Optional[Speaker] = None,
        rng=random,
        advance_delay: float = settings.ADVANCE_DELAY_MS / 1000,
    ):
        self.scheduler = scheduler or AsyncioScheduler()
        self.speaker = speaker or NullSpeaker()
        self.rng = rng
        self.advance_delay = advance_delay
        self.generation = 0
        self.mode = settings.DEFAULT_MODE
        self._pending = None
        self._clear()

    def _clear(self):
        self.status = Status.SETUP
        self.pool: List[WordPair] = []
        self.queue: List[QuestionItem] = []
        self.current_index = 0
        self.score = 0
        self.options: List[str] = []
        self.selected_option: Optional[str] = None
        self.is_answered = False
        self.is_correct = False
        self.answers: List[AnswerRecord] = []

    @property
    def current_item(self) -> Optional[QuestionItem]:
        if self.status != Status.ACTIVE:
            return None
        return self.queue[self.current_index]

    def start(self, raw_input: str, mode: Optional[str] = None) -> SessionState:
        """Parses input and begins a fresh quiz; on error nothing changes."""
        mode = QuizFactory.resolve(mode or self.mode)
        pairs = parse_word_pairs(raw_input)
        queue = QuizFactory.create(mode, self.rng).build_queue(pairs)

        self._cancel_pending()
        self.generation += 1
        self._clear()
        self.mode = mode
        self.pool = pairs
        self.queue = queue
        self.status = Status.ACTIVE
        self._load_question(0)
        logger.info(
            f"Quiz started [generation {self.generation}, {len(queue)} questions, mode {mode}]"
        )
        return self.snapshot()

    def return_to_setup(self) -> SessionState:
        self._cancel_pending()
        self.generation += 1
        self._clear()
        return self.snapshot()

    def check_answer(self, option: str, index: Optional[int] = None) -> Optional[AnswerRecord]:
        """
        Records the answer to the current question and schedules the advance.

        Returns None without touching state if the question was already
        answered. When `index` is given it must be the current question's
        index, otherwise QuizStateError is raised.
        """
        if self.status != Status.ACTIVE:
            raise QuizStateError(f"Cannot answer while {self.status.value}.")
        if index is not None and index != self.current_index:
            raise QuizStateError(
                f"Question {index} is not the current one ({self.current_index})."
            )
        if self.is_answered:
            return None

        item = self.current_item
        correct = option == item.answer
        self.selected_option = option
        self.is_answered = True
        self.is_correct = correct
        if correct:
            self.score += 1

        record = AnswerRecord(
            question=item.question,
            mode=item.mode,
            user_answer=option,
            correct_answer=item.answer,
            is_correct=correct,
        )
        self.answers.append(record)

        self._pending = self.scheduler.schedule(
            self.advance_delay, partial(self._advance, self.generation, self.current_index)
        )
        return record

    def _advance(self, generation: int, index: int):
        if (
            generation != self.generation
            or index != self.current_index
            or self.status != Status.ACTIVE
            or not self.is_answered
        ):
            logger.debug(f"Dropping stale advance [generation {generation}, index {index}]")
            return

        self._pending = None
        if index < len(self.queue) - 1:
            self._load_question(index + 1)
        else:
            self.status = Status.FINISHED
            logger.info(f"Quiz finished: {self.score}/{len(self.queue)}")

    def _load_question(self, index: int):
        self.current_index = index
        item = self.queue[index]
        self.options = generate_options(item, self.pool, self.rng)
        self.selected_option = None
        self.is_answered = False
        self.is_correct = False
        if item.mode == Mode.DIRECT:
            self.speaker.speak(item.word)

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def speak_current(self) -> bool:
        """Speaks the current word if it is already on screen."""
        item = self.current_item
        if item is None:
            return False
        if item.mode == Mode.INVERSE and not self.is_answered:
            return False
        self.speaker.speak(item.word)
        return True

    def result(self) -> ResultSummary:
        if self.status != Status.FINISHED:
            raise QuizStateError("The quiz is not finished yet.")
        return summarize(self.score, len(self.queue), self.answers)

    def snapshot(self) -> SessionState:
        total = len(self.queue)
        state = SessionState(
            status=self.status,
            current_index=self.current_index,
            total=total,
            score=self.score,
        )
        item = self.current_item
        if item is not None:
            state.question = item.question
            if item.mode == Mode.DIRECT:
                state.question_lang = settings.SOURCE_LANG_NAME
            else:
                state.question_lang = settings.TARGET_LANG_NAME
            state.mode = item.mode
            state.options = list(self.options)
            state.selected_option = self.selected_option
            state.is_answered = self.is_answered
            state.is_correct = self.is_correct
            state.correct_answer = item.answer if self.is_answered else None
            state.progress = self.current_index * 100 // total
        elif self.status == Status.FINISHED:
            state.progress = 100
        return state
