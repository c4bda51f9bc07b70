"""UTF-8 <-> UTF-16 conversion through the Windows codepage API.

``to_narrow`` and ``to_wide`` only exist when running on Windows, where they
call ``WideCharToMultiByte`` / ``MultiByteToWideChar`` from kernel32 with
strict rejection of invalid characters. Check ``AVAILABLE`` (re-exported as
``termcodec.HAS_WIDE_BRIDGE``) before using them.

There is no substitution mode: size overflow and OS failures always raise.
"""

import logging
import os
from typing import AnyStr, Callable, Union

from .errors import PlatformConversionFailure, SizeOverflow

logger = logging.getLogger(__name__)

AVAILABLE = os.name == "nt"

# Largest length the Win32 conversion functions accept (they take an int).
INT_MAX = 2**31 - 1

CP_UTF8 = 65001
WC_ERR_INVALID_CHARS = 0x00000080
MB_ERR_INVALID_CHARS = 0x00000008


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed for ``text``."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


def check_size(size: int) -> int:
    """Raise SizeOverflow if ``size`` cannot be passed to the Win32 API."""
    if size > INT_MAX:
        raise SizeOverflow(f"String size is to big {size}/{INT_MAX}")
    return size


def guarded_convert(
    source: AnyStr,
    measure: Callable[[AnyStr], int],
    empty: Union[bytes, str],
    convert: Callable[[AnyStr, int], Union[bytes, str]],
) -> Union[bytes, str]:
    """Run ``convert(source, size)`` once the input checks pass.

    Empty input returns ``empty`` and an oversized input raises SizeOverflow,
    both without calling ``convert``.

    Args:
        source: Text or bytes to convert
        measure: Returns the length the Win32 API will see for ``source``
        empty: Result for empty input
        convert: Performs the OS conversion given the checked size
    """
    if not source:
        return empty
    return convert(source, check_size(measure(source)))


if AVAILABLE:
    import ctypes
    from ctypes import wintypes

    _kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)

    _WideCharToMultiByte = _kernel32.WideCharToMultiByte
    _WideCharToMultiByte.argtypes = (
        wintypes.UINT,
        wintypes.DWORD,
        wintypes.LPCWSTR,
        ctypes.c_int,
        wintypes.LPSTR,
        ctypes.c_int,
        wintypes.LPCSTR,
        ctypes.POINTER(wintypes.BOOL),
    )
    _WideCharToMultiByte.restype = ctypes.c_int

    _MultiByteToWideChar = _kernel32.MultiByteToWideChar
    _MultiByteToWideChar.argtypes = (
        wintypes.UINT,
        wintypes.DWORD,
        wintypes.LPCSTR,
        ctypes.c_int,
        wintypes.LPWSTR,
        ctypes.c_int,
    )
    _MultiByteToWideChar.restype = ctypes.c_int

    def _conversion_failure(function_name: str) -> PlatformConversionFailure:
        code = ctypes.get_last_error()
        logger.warning("%s failed with Windows error %d", function_name, code)
        return PlatformConversionFailure(
            code, f"{function_name} failed: {ctypes.FormatError(code)} ({code})"
        )

    def to_narrow(text: str) -> bytes:
        """Convert a wide (UTF-16) string to UTF-8.

        Args:
            text: String to convert. Lone surrogates are rejected by the OS.

        Returns:
            UTF-8 encoded bytes

        Raises:
            SizeOverflow: If ``text`` needs more than INT_MAX UTF-16 units.
            PlatformConversionFailure: If Windows rejects the conversion.
        """
        return guarded_convert(text, utf16_length, b"", _narrow)

    def _narrow(text: str, size: int) -> bytes:
        source = ctypes.create_unicode_buffer(text, size + 1)
        needed = _WideCharToMultiByte(CP_UTF8, WC_ERR_INVALID_CHARS, source, size, None, 0, None, None)
        if needed == 0:
            raise _conversion_failure("WideCharToMultiByte")
        buffer = ctypes.create_string_buffer(needed)
        written = _WideCharToMultiByte(CP_UTF8, WC_ERR_INVALID_CHARS, source, size, buffer, needed, None, None)
        if written == 0:
            raise _conversion_failure("WideCharToMultiByte")
        return buffer.raw[:written]

    def to_wide(data: bytes) -> str:
        """Convert UTF-8 bytes to a wide (UTF-16) string.

        Args:
            data: UTF-8 encoded bytes. Malformed UTF-8 is rejected by the OS.

        Returns:
            The decoded string

        Raises:
            SizeOverflow: If ``data`` is longer than INT_MAX bytes.
            PlatformConversionFailure: If Windows rejects the conversion.
        """
        return guarded_convert(bytes(data), len, "", _widen)

    def _widen(data: bytes, size: int) -> str:
        needed = _MultiByteToWideChar(CP_UTF8, MB_ERR_INVALID_CHARS, data, size, None, 0)
        if needed == 0:
            raise _conversion_failure("MultiByteToWideChar")
        buffer = ctypes.create_unicode_buffer(needed)
        written = _MultiByteToWideChar(CP_UTF8, MB_ERR_INVALID_CHARS, data, size, buffer, needed)
        if written == 0:
            raise _conversion_failure("MultiByteToWideChar")
        return buffer[:written]
