"""termcodec - UTF-8 / UTF-32 transcoding and UTF-8 validation for terminal I/O."""

__version__ = "0.1.0"

from .codec import Codec
from .config import CodecConfig
from .errors import (
    CodecError,
    InvalidByteSequence,
    InvalidCodepoint,
    PlatformConversionFailure,
    SizeOverflow,
)
from .utf8 import (
    MAX_CODEPOINT,
    REPLACEMENT_BYTES,
    REPLACEMENT_CHARACTER,
    classify_leading_byte,
    decode_byte,
    decode_string,
    encode_codepoint,
    encode_string,
    is_valid_range,
    is_valid_unit,
)
from .utf8_codec import Utf8Codec
from .winbridge import AVAILABLE as HAS_WIDE_BRIDGE

__all__ = [
    "Codec",
    "Utf8Codec",
    "CodecConfig",
    "CodecError",
    "InvalidByteSequence",
    "InvalidCodepoint",
    "PlatformConversionFailure",
    "SizeOverflow",
    "MAX_CODEPOINT",
    "REPLACEMENT_BYTES",
    "REPLACEMENT_CHARACTER",
    "classify_leading_byte",
    "decode_byte",
    "decode_string",
    "encode_codepoint",
    "encode_string",
    "is_valid_range",
    "is_valid_unit",
    "HAS_WIDE_BRIDGE",
]

if HAS_WIDE_BRIDGE:
    from .winbridge import to_narrow, to_wide

    __all__ += ["to_narrow", "to_wide"]
