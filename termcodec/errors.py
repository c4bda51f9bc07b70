"""Exceptions raised by termcodec."""

from typing import Optional


class CodecError(Exception):
    """Base class for all codec errors.

    Attributes:
        code: Platform error number, or 0 when the error did not come from
              the operating system.
    """

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.code = code


class InvalidCodepoint(CodecError, ValueError):
    """A codepoint outside [0, 0x10FFFF] was given to the encoder."""


class InvalidByteSequence(CodecError, ValueError):
    """The decoder met malformed UTF-8.

    Attributes:
        offset: Index of the leading byte of the malformed code unit, or None.
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class SizeOverflow(CodecError, OverflowError):
    """Input is too large for the platform conversion API."""


class PlatformConversionFailure(CodecError):
    """The operating system failed to convert between UTF-8 and UTF-16."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"Windows conversion failed with error {code}", code)
