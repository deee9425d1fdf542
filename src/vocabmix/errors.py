class QuizError(Exception):
    """Base class for errors raised by the quiz core."""


class ParseError(QuizError):
    """Raw input is not a valid list of word pairs."""


class InsufficientDataError(QuizError):
    """Parsed input holds fewer word pairs than a quiz needs."""

    def __init__(self, count: int, minimum: int):
        self.count = count
        self.minimum = minimum
        super().__init__(f"At least {minimum} words are needed, got {count}.")


class QuizStateError(QuizError):
    """Operation is not valid in the session's current status."""


class MissingCapability(QuizError):
    """An optional capability (speech) is not available on this machine."""
