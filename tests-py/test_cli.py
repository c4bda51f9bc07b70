"""Tests for the termcodec command line."""

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from termcodec.cli import format_bytes, format_text, main, parse_codepoint


def run(argv):
    """Run the CLI and return (exit status, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        try:
            status = main(argv)
        except SystemExit as e:
            status = e.code
    return status, out.getvalue(), err.getvalue()


class TestHelpers(unittest.TestCase):
    """Test cases for CLI parsing and formatting helpers."""

    def test_parse_codepoint(self) -> None:
        """U+, 0x and decimal forms are accepted."""
        self.assertEqual(parse_codepoint("U+20AC"), 0x20AC)
        self.assertEqual(parse_codepoint("u+1f9fe"), 0x1F9FE)
        self.assertEqual(parse_codepoint("0x41"), 0x41)
        self.assertEqual(parse_codepoint("65"), 65)

    def test_format_bytes(self) -> None:
        """Bytes print as spaced uppercase hex."""
        self.assertEqual(format_bytes(b"\xe2\x82\xac"), "E2 82 AC")

    def test_format_text(self) -> None:
        """Codepoints join into text."""
        self.assertEqual(format_text([0x61, 0xF1, 0x1F9FE]), "añ\U0001F9FE")

    def test_format_text_past_unicode_range(self) -> None:
        """Values chr() cannot represent print as U+FFFD."""
        self.assertEqual(format_text([0x61, 0x1FFFFF]), "a�")


class TestCommands(unittest.TestCase):
    """Test cases for the subcommands."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        """Remove temporary files."""
        self.tmpdir.cleanup()

    def write(self, name: str, data: bytes) -> str:
        """Write a temporary file and return its path."""
        path = Path(self.tmpdir.name) / name
        path.write_bytes(data)
        return str(path)

    def test_encode(self) -> None:
        """Boundary codepoints of each length class."""
        status, out, _ = run(["encode", "U+0001", "U+0080", "U+0800", "U+10FFFF"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "01 C2 80 E0 A0 80 F4 8F BF BF")

    def test_encode_out_of_range(self) -> None:
        """Out-of-range codepoints print the replacement bytes."""
        status, out, _ = run(["encode", "0x110000"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "EF BF BD")

    def test_encode_out_of_range_strict(self) -> None:
        """--strict reports the codec error and exits 2."""
        status, _, err = run(["--strict", "encode", "0x110000"])
        self.assertEqual(status, 2)
        self.assertIn("Invalid UTF32 codepoint.", err)

    def test_encode_bad_argument(self) -> None:
        """An unparsable codepoint is a usage error."""
        status, _, _ = run(["encode", "U+XYZ"])
        self.assertEqual(status, 2)

    def test_decode(self) -> None:
        """Hex bytes decode to U+XXXX values."""
        status, out, _ = run(["decode", "C2", "80", "F09FA7BE"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "U+0080 U+1F9FE")

    def test_decode_text(self) -> None:
        """--text prints characters."""
        status, out, _ = run(["decode", "--text", "C3B1", "61"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "ña")

    def test_decode_text_past_unicode_range(self) -> None:
        """--text shows an F7 BF BF BF unit as U+FFFD instead of failing."""
        status, out, err = run(["decode", "--text", "F7BFBFBF"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "�")
        self.assertEqual(err, "")

    def test_decode_past_unicode_range(self) -> None:
        """Without --text the decoded value is printed as is."""
        status, out, _ = run(["decode", "F7BFBFBF"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "U+1FFFFF")

    def test_decode_substitutes(self) -> None:
        """Malformed input decodes to U+FFFD."""
        status, out, _ = run(["decode", "C3", "28"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "U+FFFD")

    def test_decode_strict(self) -> None:
        """--strict reports malformed input and exits 2."""
        status, _, err = run(["--strict", "decode", "C3", "28"])
        self.assertEqual(status, 2)
        self.assertIn("Bad UTF-8 sequence.", err)

    def test_classify(self) -> None:
        """Each byte is printed with its code unit length."""
        status, out, _ = run(["classify", "61 C3 E2 F0 80 F8"])
        self.assertEqual(status, 0)
        self.assertEqual(
            out.splitlines(),
            ["61 -> 1", "C3 -> 2", "E2 -> 3", "F0 -> 4", "80 -> 0", "F8 -> 0"],
        )

    def test_validate_valid_file(self) -> None:
        """A UTF-8 file validates with exit status 0."""
        path = self.write("good.txt", "∞ γνωρίζω\n".encode("utf-8"))
        status, out, _ = run(["validate", path])
        self.assertEqual(status, 0)
        self.assertIn("valid UTF-8", out)

    def test_validate_invalid_file(self) -> None:
        """A malformed file reports the offset and exits 1."""
        path = self.write("bad.txt", b"abc\xe2\x28\xa1")
        status, out, _ = run(["validate", path])
        self.assertEqual(status, 1)
        self.assertIn("invalid UTF-8 at byte 3", out)

    def test_validate_missing_file(self) -> None:
        """A missing file is reported as an error."""
        status, _, err = run(["validate", str(Path(self.tmpdir.name) / "missing")])
        self.assertEqual(status, 2)
        self.assertIn("error:", err)

    def test_config_file(self) -> None:
        """fail_on_error from a config file makes decoding strict."""
        config = self.write("termcodec.yaml", b"fail_on_error: true\n")
        status, _, _ = run(["--config", config, "decode", "80"])
        self.assertEqual(status, 2)

    def test_bad_config_file(self) -> None:
        """An unknown config key is a usage error."""
        config = self.write("termcodec.yaml", b"unknown: 1\n")
        status, _, _ = run(["--config", config, "decode", "61"])
        self.assertEqual(status, 2)

    def test_config_file_with_non_string_keys(self) -> None:
        """Mixed-type keys are reported as a usage error, not a traceback."""
        config = self.write("termcodec.yaml", b"1: true\nfoo: x\n")
        status, _, err = run(["--config", config, "decode", "61"])
        self.assertEqual(status, 2)
        self.assertIn("keys must be strings", err)


if __name__ == "__main__":
    unittest.main()
