"""Command line interface for termcodec.

Usage:
    termcodec validate FILE
    termcodec decode C3 B1 61 [--text]
    termcodec encode U+20AC U+1F9FE
    termcodec classify F0 90 8C BC

Global options:
    --strict           Fail on the first error instead of substituting U+FFFD
    --config PATH      Read a YAML CodecConfig
    --log-level LEVEL  Override the configured log level

Exit status is 0 on success, 1 when ``validate`` finds malformed input and
2 on usage or codec errors.
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .config import CodecConfig
from .errors import CodecError, InvalidByteSequence
from .utf8 import (
    MAX_CODEPOINT,
    REPLACEMENT_CHARACTER,
    classify_leading_byte,
    decode_string,
    encode_string,
    is_valid_range,
)

logger = logging.getLogger(__name__)


def parse_codepoint(text: str) -> int:
    """Parse ``U+20AC``, ``0x20AC`` or a decimal number."""
    value = text.strip()
    if value[:2].upper() in ("U+", "0X"):
        return int(value[2:], 16)
    return int(value, 10)


def format_codepoint(codepoint: int) -> str:
    return f"U+{codepoint:04X}"


def format_text(codepoints: List[int]) -> str:
    """Join codepoints into text, showing values past U+10FFFF as U+FFFD.

    The decoder accepts 4-byte units led by F5-F7, which unpack to values
    that ``chr`` cannot represent.
    """
    return "".join(
        chr(codepoint if codepoint <= MAX_CODEPOINT else REPLACEMENT_CHARACTER)
        for codepoint in codepoints
    )


def format_bytes(data: bytes) -> str:
    return " ".join(f"{byte:02X}" for byte in data)


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as handle:
        return handle.read()


def _load_config(args: argparse.Namespace) -> CodecConfig:
    config = CodecConfig.from_yaml(args.config) if args.config else CodecConfig.from_env()
    if args.strict:
        config = dataclasses.replace(config, fail_on_error=True)
    if args.log_level:
        config = dataclasses.replace(config, log_level=args.log_level)
    return config


def cmd_validate(args: argparse.Namespace, config: CodecConfig) -> int:
    data = _read_input(args.file)
    if is_valid_range(data):
        print(f"{args.file}: valid UTF-8 ({len(data)} bytes)")
        return 0
    try:
        decode_string(data, fail_on_error=True)
    except InvalidByteSequence as e:
        print(f"{args.file}: invalid UTF-8 at byte {e.offset}")
    return 1


def cmd_decode(args: argparse.Namespace, config: CodecConfig) -> int:
    data = bytes.fromhex(" ".join(args.hex))
    codepoints = decode_string(data, config.fail_on_error)
    if args.text:
        print(format_text(codepoints))
    else:
        print(" ".join(format_codepoint(codepoint) for codepoint in codepoints))
    return 0


def cmd_encode(args: argparse.Namespace, config: CodecConfig) -> int:
    codepoints = [parse_codepoint(value) for value in args.codepoints]
    print(format_bytes(encode_string(codepoints, config.fail_on_error)))
    return 0


def cmd_classify(args: argparse.Namespace, config: CodecConfig) -> int:
    for byte in bytes.fromhex(" ".join(args.hex)):
        print(f"{byte:02X} -> {classify_leading_byte(byte)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    argparser = argparse.ArgumentParser(
        prog="termcodec", description="Validate, decode and encode UTF-8"
    )
    argparser.add_argument("--strict", action="store_true",
                           help="Fail on the first error instead of substituting U+FFFD")
    argparser.add_argument("--config", help="YAML configuration file")
    argparser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    subparsers = argparser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check that a file is well-formed UTF-8")
    validate.add_argument("file", help="File to check, or - for stdin")
    validate.set_defaults(handler=cmd_validate)

    decode = subparsers.add_parser("decode", help="Decode hex UTF-8 bytes to codepoints")
    decode.add_argument("hex", nargs="+", help="Hex bytes, e.g. C3 B1 or C3B1")
    decode.add_argument("--text", action="store_true", help="Print characters instead of U+XXXX")
    decode.set_defaults(handler=cmd_decode)

    encode = subparsers.add_parser("encode", help="Encode codepoints to hex UTF-8 bytes")
    encode.add_argument("codepoints", nargs="+", help="Codepoints as U+XXXX, 0xXXXX or decimal")
    encode.set_defaults(handler=cmd_encode)

    classify = subparsers.add_parser("classify", help="Show the code unit length of each byte")
    classify.add_argument("hex", nargs="+", help="Hex bytes")
    classify.set_defaults(handler=cmd_classify)
    return argparser


def main(argv: Optional[List[str]] = None) -> int:
    argparser = build_parser()
    args = argparser.parse_args(argv)

    try:
        config = _load_config(args)
    except (OSError, ValueError) as e:
        argparser.error(str(e))
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    logger.debug("Running %s with %s", args.command, config)

    try:
        return args.handler(args, config)
    except CodecError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        argparser.error(str(e))
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
