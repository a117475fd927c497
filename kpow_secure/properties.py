"""
Interpretation of decrypted configuration text.

Decrypted payloads are usually either ``.env`` style ``KEY=value`` lines or
Java ``.properties`` files. Both are handled by the same parser, which follows
the ``.properties`` rules: comments, ``=``/``:``/whitespace separators,
backslash continuation and escapes.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator

from .errors import MalformedPropertiesError
from .key import import_key
from .payload import PathLike, decoded_payload, decrypt_file

WHITESPACE = " \t\f"
SEPARATORS = "=:"
COMMENT_MARKERS = "#!"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _continues(line: str) -> bool:
    # An odd run of trailing backslashes escapes the line break.
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    lines = iter(_LINE_BREAK.split(text))
    for line in lines:
        line = line.lstrip(WHITESPACE)
        if not line or line[0] in COMMENT_MARKERS:
            continue
        while _continues(line):
            following = next(lines, None)
            line = line[:-1]
            if following is None:
                break
            line += following.lstrip(WHITESPACE)
        yield line


def _unescape(raw: str) -> str:
    out = []
    i, n = 0, len(raw)
    while i < n:
        c = raw[i]
        i += 1
        if c != "\\":
            out.append(c)
            continue
        if i >= n:
            break
        c = raw[i]
        i += 1
        if c == "u":
            digits = raw[i:i + 4]
            if not _HEX4.fullmatch(digits):
                raise MalformedPropertiesError(f"Malformed \\uXXXX escape: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_ESCAPES.get(c, c))
    return "".join(out)


def _split(line: str) -> tuple[str, str]:
    i, n = 0, len(line)
    while i < n:
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in SEPARATORS or c in WHITESPACE:
            break
        i += 1
    key_end = min(i, n)
    while i < n and line[i] in WHITESPACE:
        i += 1
    if i < n and line[i] in SEPARATORS:
        i += 1
    while i < n and line[i] in WHITESPACE:
        i += 1
    return line[:key_end], line[i:]


def to_map(text: str) -> Dict[str, str]:
    """
    Parse ``KEY=value`` or ``.properties`` text into a dict.

    Later definitions of a key replace earlier ones. Values are otherwise kept
    verbatim, so quoted JAAS configuration survives intact.

    Args:
        text: Configuration text

    Returns:
        Mapping of keys to values, in file order

    Raises:
        MalformedPropertiesError: On a malformed ``\\uXXXX`` escape
    """
    result: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split(line)
        result[_unescape(key)] = _unescape(value)
    return result


def decrypt_to_map(key_text: str, payload_text: str) -> Dict[str, str]:
    """Decrypt a payload with a base64 key text and parse it into a dict."""
    return to_map(decoded_payload(import_key(key_text), payload_text))


def load_properties(key_file: PathLike, payload_file: PathLike) -> Dict[str, str]:
    """Decrypt a payload file with a key file and parse it into a dict."""
    return to_map(decrypt_file(key_file, payload_file))
