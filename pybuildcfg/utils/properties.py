"""Reads Java `.properties` files such as Flutter's `key.properties`."""
from pathlib import Path
from typing import Dict, Tuple, Union

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str) -> Dict[str, str]:
    """Parses the contents of a `.properties` file.

    Supports `key=value`, `key: value` and `key value` lines, `#`/`!`
    comments, backslash line continuations and the common escapes.
    """
    properties: Dict[str, str] = {}
    logical = ""
    for raw_line in text.splitlines():
        line = raw_line.lstrip()
        if not logical and (not line or line[0] in "#!"):
            continue
        # An odd number of trailing backslashes continues the line.
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            logical += line[:-1]
            continue
        logical += line
        key, value = _split_entry(logical)
        properties[key] = value
        logical = ""
    if logical:
        key, value = _split_entry(logical)
        properties[key] = value
    return properties


def _split_entry(line: str) -> Tuple[str, str]:
    key_chars = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line):
            key_chars.append(_unescape_char(line[i + 1]))
            i += 2
            continue
        if ch in "=: \t":
            break
        key_chars.append(ch)
        i += 1

    rest = line[i:].lstrip(" \t")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t")
    return "".join(key_chars), _unescape(rest)


def _unescape_char(ch: str) -> str:
    return _ESCAPES.get(ch, ch)


def _unescape(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            out.append(_unescape_char(value[i + 1]))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """Reads and parses a `.properties` file.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_properties(f.read())
