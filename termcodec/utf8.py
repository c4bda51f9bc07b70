"""UTF-8 <-> UTF-32 conversion and UTF-8 validation.

This module is the core of termcodec. It works on plain Python values:
byte sequences are ``bytes`` (or any bytes-like object indexable to ints)
and codepoints are ``int``.

Components:
    classify_leading_byte: Expected code unit length for a leading byte
    is_valid_range / is_valid_unit: Structural UTF-8 validation
    decode_byte / decode_string: UTF-8 to codepoints
    encode_codepoint / encode_string: Codepoints to UTF-8

Every encode/decode function takes a ``fail_on_error`` flag. When it is
False, malformed input is replaced with U+FFFD (or its UTF-8 form
``EF BF BD``) and processing continues. When it is True, the first error
raises an exception from ``termcodec.errors``.

Example:
    >>> encode_codepoint(0x20AC)
    b'\\xe2\\x82\\xac'
    >>> decode_string(b'\\xc3\\xb1a')
    [241, 97]
    >>> decode_string(b'\\xc3(')
    [65533]
"""

import logging
from typing import Iterable, List, Optional, Union

from .errors import InvalidByteSequence, InvalidCodepoint

logger = logging.getLogger(__name__)

MAX_CODEPOINT = 0x10FFFF
REPLACEMENT_CHARACTER = 0xFFFD
REPLACEMENT_BYTES = b"\xef\xbf\xbd"

# Indexed by code unit length - 1.
_LEAD_MASKS = (0x80, 0xE0, 0xF0, 0xF8)
_LEAD_PATTERNS = (0x00, 0xC0, 0xE0, 0xF0)
_LEAD_PAYLOAD_MASKS = (0x7F, 0x1F, 0x0F, 0x07)
_RANGE_LIMITS = (0x7F, 0x07FF, 0xFFFF, MAX_CODEPOINT)
_SHIFTS = (0, 6, 12, 18)

_CONTINUATION_MASK = 0xC0
_CONTINUATION_PATTERN = 0x80
_CONTINUATION_PAYLOAD_MASK = 0x3F
_CONTINUATION_BITS = 6

_BAD_SEQUENCE_MESSAGE = "Bad UTF-8 sequence."
_BAD_CHAR_MESSAGE = "the char is not in UTF-8 range."
_BAD_CODEPOINT_MESSAGE = "Invalid UTF32 codepoint."


def classify_leading_byte(byte: int) -> int:
    """Return the length of the code unit introduced by a leading byte.

    Args:
        byte: The first byte of a UTF-8 code unit. Only the low 8 bits are
              considered.

    Returns:
        1, 2, 3 or 4 for a legal leading byte, 0 for a continuation byte
        (``10xxxxxx``) or a 5/6-byte legacy leader.
    """
    byte &= 0xFF
    for size, (mask, pattern) in enumerate(zip(_LEAD_MASKS, _LEAD_PATTERNS), start=1):
        if byte & mask == pattern:
            return size
    return 0


def _is_continuation(byte: int) -> bool:
    return byte & _CONTINUATION_MASK == _CONTINUATION_PATTERN


def is_valid_range(data: bytes, begin: int = 0, end: Optional[int] = None) -> bool:
    """Check that ``data[begin:end]`` is made only of well-formed code units.

    The check is structural: each leading byte must classify, the code unit
    must fit in the range, and every continuation byte must match
    ``10xxxxxx``. Overlong forms and surrogate codepoints are not singled out.

    Args:
        data: Bytes to inspect
        begin: Index of the first byte of the range
        end: Index one past the last byte of the range. Defaults to, and is
             clamped to, ``len(data)``.

    Returns:
        True if the range is valid UTF-8 (an empty range is valid), False if
        it is malformed or ``begin`` lies after ``end``.
    """
    if end is None or end > len(data):
        end = len(data)
    if begin < 0 or begin > end:
        return False

    position = begin
    while position < end:
        size = classify_leading_byte(data[position])
        if size == 0 or position + size > end:
            return False
        for offset in range(1, size):
            if not _is_continuation(data[position + offset]):
                return False
        position += size
    return True


def is_valid_unit(data: bytes) -> bool:
    """Check that ``data`` is exactly one well-formed code unit."""
    if not data:
        return False
    return classify_leading_byte(data[0]) == len(data) and is_valid_range(data)


def _unpack(data: bytes, position: int, size: int) -> int:
    codepoint = data[position] & _LEAD_PAYLOAD_MASKS[size - 1]
    for offset in range(1, size):
        codepoint = (codepoint << _CONTINUATION_BITS) | (
            data[position + offset] & _CONTINUATION_PAYLOAD_MASK
        )
    return codepoint


def decode_byte(byte: int, fail_on_error: bool = False) -> List[int]:
    """Decode a single ASCII byte.

    Args:
        byte: Byte value to decode
        fail_on_error: Raise instead of substituting U+FFFD for bytes above 0x7F

    Returns:
        An empty list for NUL, otherwise a one-element list holding the
        codepoint (or U+FFFD).

    Raises:
        InvalidByteSequence: If ``byte`` is not ASCII and ``fail_on_error`` is set.
    """
    if byte == 0:
        return []
    if 0 < byte <= _RANGE_LIMITS[0]:
        return [byte]
    if fail_on_error:
        raise InvalidByteSequence(_BAD_CHAR_MESSAGE, offset=0)
    return [REPLACEMENT_CHARACTER]


def decode_string(data: bytes, fail_on_error: bool = False) -> List[int]:
    """Decode UTF-8 bytes into a list of codepoints.

    The scan always advances by the length announced by the leading byte,
    even when the code unit turns out to be malformed; a byte that does not
    classify at all is consumed on its own. So ``C3 28`` decodes to a single
    U+FFFD and the ``28`` is not decoded separately.

    Args:
        data: UTF-8 encoded bytes
        fail_on_error: Raise on the first malformed code unit instead of
                       substituting U+FFFD

    Returns:
        The decoded codepoints, one per code unit.

    Raises:
        InvalidByteSequence: On malformed input when ``fail_on_error`` is set.
    """
    codepoints: List[int] = []
    position = 0
    length = len(data)
    while position < length:
        size = classify_leading_byte(data[position])
        if size and is_valid_range(data, position, position + size):
            codepoints.append(_unpack(data, position, size))
        else:
            if fail_on_error:
                raise InvalidByteSequence(_BAD_SEQUENCE_MESSAGE, offset=position)
            logger.debug("Malformed UTF-8 at offset %d, substituting U+FFFD", position)
            codepoints.append(REPLACEMENT_CHARACTER)
        position += size or 1
    return codepoints


def encode_codepoint(codepoint: int, fail_on_error: bool = False) -> bytes:
    """Encode one codepoint as its minimal UTF-8 code unit.

    Args:
        codepoint: Value in [0, 0x10FFFF]
        fail_on_error: Raise for out-of-range values instead of returning
                       the replacement character ``EF BF BD``

    Returns:
        1 to 4 bytes of UTF-8.

    Raises:
        InvalidCodepoint: If ``codepoint`` is out of range and ``fail_on_error`` is set.
    """
    if codepoint < 0 or codepoint > MAX_CODEPOINT:
        if fail_on_error:
            raise InvalidCodepoint(_BAD_CODEPOINT_MESSAGE)
        logger.debug("Codepoint %#x out of range, substituting U+FFFD", codepoint)
        return REPLACEMENT_BYTES
    if codepoint <= _RANGE_LIMITS[0]:
        return bytes((codepoint,))

    size = 2
    while codepoint > _RANGE_LIMITS[size - 1]:
        size += 1
    lead = _LEAD_PATTERNS[size - 1] | (
        (codepoint >> _SHIFTS[size - 1]) & _LEAD_PAYLOAD_MASKS[size - 1]
    )
    tail = [
        _CONTINUATION_PATTERN | ((codepoint >> shift) & _CONTINUATION_PAYLOAD_MASK)
        for shift in reversed(_SHIFTS[:size - 1])
    ]
    return bytes([lead] + tail)


def encode_string(codepoints: Union[str, Iterable[int]], fail_on_error: bool = False) -> bytes:
    """Encode a sequence of codepoints as UTF-8.

    Args:
        codepoints: Codepoints to encode, in order. A ``str`` is treated as
                    the sequence of its characters' codepoints.
        fail_on_error: Applies to every codepoint of the call

    Returns:
        The concatenated UTF-8 bytes.
    """
    if isinstance(codepoints, str):
        codepoints = (ord(char) for char in codepoints)
    return b"".join(encode_codepoint(codepoint, fail_on_error) for codepoint in codepoints)
