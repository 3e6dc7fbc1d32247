# -*- coding: utf-8 -*-
"""The error raised by a strict stage when the piped value does not match."""

__all__ = ["MismatchError", "PipedValueMismatch"]

class MismatchError(ValueError):
    """Raised when a piped value fails to match, and no fallback applies.

    Attributes:

        `message`: str, the human-readable message (also ``str(err)``).

        `pattern`: str, the pattern as written (or as rendered), with its guard.

        `spec`: the `StageSpec` of the stage that failed.

        `value`: the offending piped value. A handler at the end of a chain
                 can catch the error and resume from this value.

        `reason`: ``"pattern"`` if the structural match failed, ``"guard"`` if
                  the structure matched but the guard rejected it, and ``None``
                  when a negated stage saw its pattern match.
    """
    def __init__(self, message, *, pattern=None, spec=None, value=None, reason=None):
        super().__init__(message)
        self.message = message
        self.pattern = pattern
        self.spec = spec
        self.value = value
        self.reason = reason

PipedValueMismatch = MismatchError
