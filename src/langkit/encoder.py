"""Deterministic key generation and reversible escaping for language files.

Every runtime string is stored under a key derived from the untranslated
text, so the same source string resolves to the same entry on every
platform and across process restarts. The escaping helpers let arbitrary
text survive single-line storage in the text-based formats.

Usage::

    from langkit.encoder import LineEncoder

    key = LineEncoder.make_key("Loaded")       # e.g. "3A1F09C2"
    line = LineEncoder.join_multiline("a\\nb")  # "a~~b"
"""

from __future__ import annotations

import re
import zlib


class _TokenCodec:
    """Single-pass substitution between literal fragments and tokens.

    Encoding and decoding each run one regex over the input, so a token
    produced while encoding is never re-read as a literal. This keeps the
    substitution reversible as long as every token starts with a character
    that is itself encoded.
    """

    def __init__(self, mapping: dict[str, str]) -> None:
        self._encode_map = dict(mapping)
        self._decode_map = {token: literal for literal, token in mapping.items()}
        self._encode_re = self._compile(self._encode_map)
        self._decode_re = self._compile(self._decode_map)

    @staticmethod
    def _compile(mapping: dict[str, str]) -> re.Pattern[str]:
        # Longest first so "\r\n" wins over "\r".
        fragments = sorted(mapping, key=len, reverse=True)
        return re.compile("|".join(re.escape(fragment) for fragment in fragments))

    def encode(self, text: str) -> str:
        return self._encode_re.sub(lambda m: self._encode_map[m.group(0)], text)

    def decode(self, text: str) -> str:
        return self._decode_re.sub(lambda m: self._decode_map[m.group(0)], text)


_ESCAPE_CODEC = _TokenCodec(
    {
        "[": "[[]",
        "§": "[§]",
        "\r\n": "[CRLF]",
        "\n": "[LF]",
        "\r": "[CR]",
    }
)

_MULTILINE_CODEC = _TokenCodec(
    {
        "~": "~0",
        "\n": "~~",
        "\r": "~r",
    }
)

# INI readers strip whitespace around values, so it is kept as tokens
# at both ends of a line. Tokens are decoded wherever they appear.
_EDGE_WHITESPACE_RE = re.compile(r"^[^\S\r\n]+|[^\S\r\n]+$")


def _whitespace_token(char: str) -> str:
    if char == " ":
        return "~_"
    if char == "\t":
        return "~t"
    return f"~u{ord(char):04X}"


def _whitespace_literal(token: str) -> str:
    if token == "~_":
        return " "
    if token == "~t":
        return "\t"
    return chr(int(token[2:], 16))


_MULTILINE_DECODE_RE = re.compile(r"~[0~r_t]|~u[0-9A-F]{4}")
_MULTILINE_LITERALS = {"~0": "~", "~~": "\n", "~r": "\r"}


def _restore_token(match: re.Match[str]) -> str:
    token = match.group(0)
    if token in _MULTILINE_LITERALS:
        return _MULTILINE_LITERALS[token]
    return _whitespace_literal(token)


_KEY_CODEC = _TokenCodec(
    {
        "'": "''",
        ";": "[SEMICOLON]",
        "=": "[EQUAL]",
    }
)


def crc32_of_string(text: str) -> int:
    """Return the CRC-32 of ``text`` taken over its UTF-16 code units.

    Each code unit contributes its low byte and then its high byte, which
    is exactly the UTF-16-LE byte stream. Lone surrogates are hashed as
    the code units they are.
    """
    data = text.encode("utf-16-le", errors="surrogatepass")
    return zlib.crc32(data) & 0xFFFFFFFF


def make_key(text: str) -> str:
    """Return the 8-digit upper-case hexadecimal key of ``text``."""
    return f"{crc32_of_string(text):08X}"


class LineEncoder:
    """Static helpers for keys and single-line storage of text values."""

    crc32_of_string = staticmethod(crc32_of_string)
    make_key = staticmethod(make_key)

    @staticmethod
    def encode(text: str) -> str:
        """Replace line breaks and the list separator with tokens.

        ``\\r\\n`` becomes ``[CRLF]``, ``\\n`` ``[LF]``, ``\\r`` ``[CR]``,
        ``§`` ``[§]`` and a literal ``[`` is written as ``[[]``.
        """
        return _ESCAPE_CODEC.encode(text)

    @staticmethod
    def decode(text: str) -> str:
        """Inverse of :meth:`encode`."""
        return _ESCAPE_CODEC.decode(text)

    @staticmethod
    def join_multiline(text: str) -> str:
        """Collapse multiline text into one line using the ``~~`` placeholder.

        Whitespace at either end of the result is written as ``~_`` (space),
        ``~t`` (tab) or ``~uXXXX`` so INI readers cannot strip it.
        """
        joined = _MULTILINE_CODEC.encode(text)
        return _EDGE_WHITESPACE_RE.sub(
            lambda m: "".join(_whitespace_token(char) for char in m.group(0)), joined
        )

    @staticmethod
    def restore_multiline(text: str) -> str:
        """Inverse of :meth:`join_multiline`."""
        return _MULTILINE_DECODE_RE.sub(_restore_token, text)

    @staticmethod
    def normalize_key(text: str) -> str:
        """Escape apostrophes, semicolons and equals signs in a storage key."""
        return _KEY_CODEC.encode(text)

    @staticmethod
    def denormalize_key(text: str) -> str:
        """Inverse of :meth:`normalize_key`."""
        return _KEY_CODEC.decode(text)

    @staticmethod
    def normalize_path(text: str) -> str:
        """Double every backslash of a path."""
        return text.replace("\\", "\\\\")


__all__ = ["LineEncoder", "crc32_of_string", "make_key"]
