from __future__ import annotations


class InterviewError(Exception):
    """Base class for every error raised by the interview core."""


class InvalidCursorError(InterviewError):
    def __init__(self, cursor: object):
        super().__init__(f"Cursor {cursor!r} does not reference a step")
        self.cursor = cursor


OutOfRangeError = InvalidCursorError


class UnmappedOptionError(InterviewError):
    def __init__(self, step_id: str, answer: object):
        super().__init__(f"Answer {answer!r} matches no option of step {step_id!r}")
        self.step_id = step_id
        self.answer = answer


class MalformedInputError(InterviewError):
    def __init__(self, step_id: str | None, answer: object, expected: str):
        super().__init__(f"Expected {expected}, got {answer!r}")
        self.step_id = step_id
        self.answer = answer
        self.expected = expected


class ScriptConfigurationError(InterviewError):
    def __init__(self, problems: list[str]):
        super().__init__("Invalid interview script: " + "; ".join(problems))
        self.problems = problems


class SessionStateError(InterviewError):
    """Raised when a session operation is called from the wrong scene."""
