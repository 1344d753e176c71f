"""Item-scoped conversion errors.

Every exception here stays inside the worker that raised it: the pipeline
turns it into a single error ProgressEvent and moves on to the next file.
"""

from typing import Iterable


class ConversionError(Exception):
    """Base class for failures that end the conversion of one file."""

    pass


class StageError(ConversionError):
    """An external tool could not be started or exited non-zero."""

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage


class TagValidationError(ConversionError):
    """Required tags are missing, so the encoder is never started."""

    def __init__(self, missing: Iterable[str], source: object):
        self.missing = list(missing)
        names = ", ".join(self.missing)
        super().__init__(f"Required tag(s) {names} missing on {source}")
