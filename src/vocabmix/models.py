from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Mode(str, Enum):
    DIRECT = "direct"
    INVERSE = "inverse"


class Status(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    FINISHED = "finished"


class WordPair(BaseModel):
    word: str = Field(min_length=1)
    translation: str


class QuestionItem(WordPair):
    model_config = ConfigDict(frozen=True)

    mode: Mode

    @property
    def question(self) -> str:
        return self.word if self.mode == Mode.DIRECT else self.translation

    @property
    def answer(self) -> str:
        return self.translation if self.mode == Mode.DIRECT else self.word


class AnswerRecord(BaseModel):
    question: str
    mode: Mode
    user_answer: str
    correct_answer: str
    is_correct: bool


class SessionState(BaseModel):
    status: Status
    current_index: int
    total: int
    score: int
    question: Optional[str] = None
    question_lang: Optional[str] = None
    mode: Optional[Mode] = None
    options: List[str] = []
    selected_option: Optional[str] = None
    is_answered: bool = False
    is_correct: bool = False
    correct_answer: Optional[str] = None
    progress: int = 0


class ResultSummary(BaseModel):
    score: int
    total: int
    percent: int
    answers: List[AnswerRecord]


class StartRequest(BaseModel):
    raw_input: Optional[str] = None
    mode: str = "mixed"


class AnswerRequest(BaseModel):
    option_index: int
    current_index: int
