"""UTF-8 codec bound to a failure policy."""

from typing import Iterable, List, Optional, Union

from .codec import Codec
from .config import CodecConfig
from .utf8 import decode_string, encode_string, is_valid_range


class Utf8Codec(Codec):
    """A codec converting between codepoints and UTF-8 bytes.

    Whether malformed input raises or is replaced with U+FFFD is taken from
    ``config.fail_on_error`` for every call made through this codec.
    """

    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        """Initialize the codec.

        Args:
            config: Failure policy. Defaults to ``CodecConfig()`` (substitute
                    and continue).
        """
        self.config = config if config is not None else CodecConfig()

    @property
    def fail_on_error(self) -> bool:
        return self.config.fail_on_error

    def encode(self, codepoints: Union[str, Iterable[int]]) -> bytes:
        """Encode codepoints as UTF-8.

        Args:
            codepoints: Codepoints, or a ``str`` whose characters are encoded

        Returns:
            UTF-8 bytes

        Raises:
            InvalidCodepoint: For out-of-range codepoints when failing on error.
        """
        return encode_string(codepoints, self.fail_on_error)

    def decode(self, data: bytes) -> List[int]:
        """Decode UTF-8 into codepoints.

        Args:
            data: UTF-8 bytes

        Returns:
            Codepoints, with U+FFFD for malformed code units unless failing on error

        Raises:
            InvalidByteSequence: For malformed input when failing on error.
        """
        return decode_string(data, self.fail_on_error)

    def is_valid(self, data: bytes) -> bool:
        """Return True if ``data`` is well-formed UTF-8."""
        return is_valid_range(data)
