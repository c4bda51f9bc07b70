"""Abstract base class for codecs."""

from abc import ABC, abstractmethod
from typing import Iterable, List


class Codec(ABC):
    """Base codec interface for converting between codepoints and bytes."""

    @abstractmethod
    def encode(self, codepoints: Iterable[int]) -> bytes:
        """Encode a sequence of codepoints.

        Args:
            codepoints: The codepoints to encode

        Returns:
            The encoded bytes
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> List[int]:
        """Decode bytes into codepoints.

        Args:
            data: The bytes to decode

        Returns:
            The decoded codepoints
        """
        pass
