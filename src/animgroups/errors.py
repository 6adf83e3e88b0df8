"""Error types raised while encoding, decoding and importing animation groups."""

from __future__ import annotations


class AnimationGroupError(ValueError):
    """Base class for animation group data errors."""


class FormatError(AnimationGroupError):
    """Raised when encoded data has the wrong shape or contains illegal characters."""


class ParseError(AnimationGroupError):
    """Raised when a field cannot be converted to its typed form.

    ``count`` holds the number of failed values when several were parsed at once.
    """

    def __init__(self, message: str, *, count: int = 1) -> None:
        super().__init__(message)
        self.count = count
