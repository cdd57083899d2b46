"""Find comments in C-style source, aware of strings, template and regex literals."""

from __future__ import annotations

from typing import Iterator, NamedTuple

# A "/" after one of these starts a regex literal rather than a division.
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = {
    "case", "delete", "do", "else", "in", "instanceof", "new", "of",
    "return", "throw", "typeof", "void", "yield",
}


class Comment(NamedTuple):
    text: str
    line_number: int
    block: bool


def _regex_allowed(source: str, pos: int) -> bool:
    """Whether a ``/`` at ``pos`` can open a regex literal."""
    i = pos - 1
    while i >= 0 and source[i].isspace():
        i -= 1
    if i < 0:
        return True
    if source[i] in _REGEX_PRECEDERS:
        return True
    end = i + 1
    while i >= 0 and (source[i].isalnum() or source[i] in "_$"):
        i -= 1
    return source[i + 1:end] in _REGEX_KEYWORDS


def _regex_end(source: str, pos: int) -> int:
    """Index just past the regex literal opened at ``pos``, or -1 if there is none."""
    in_class = False
    i = pos + 1
    while i < len(source):
        ch = source[i]
        if ch == "\n":
            return -1
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            return i + 1
        i += 1
    return -1


def iter_comments(source: str) -> Iterator[Comment]:
    """Yield every ``//`` and ``/* */`` comment in ``source``, in order.

    Comment markers inside single, double or backtick quoted strings are
    ignored, as are those inside regex literals such as ``/https?:\\/\\//``.
    An unterminated block comment runs to the end of the source.
    """
    length = len(source)
    line = 1
    pos = 0
    quote = ""

    while pos < length:
        ch = source[pos]
        next_ch = source[pos + 1] if pos + 1 < length else ""

        if quote:
            if ch == "\\" and next_ch:
                if next_ch == "\n":
                    line += 1
                pos += 1  # skip escaped char
            elif ch == quote:
                quote = ""
            elif ch == "\n":
                line += 1
                if quote != "`":
                    quote = ""  # unterminated string literal
        elif ch == "/" and next_ch == "/":
            end = source.find("\n", pos)
            if end == -1:
                end = length
            yield Comment(source[pos + 2:end], line, False)
            pos = end
            continue
        elif ch == "/" and next_ch == "*":
            end = source.find("*/", pos + 2)
            if end == -1:
                end = length
            text = source[pos + 2:end]
            yield Comment(text, line, True)
            line += text.count("\n")
            pos = end + 2
            continue
        elif ch == "/" and _regex_allowed(source, pos):
            end = _regex_end(source, pos)
            if end != -1:
                pos = end
                continue
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == "\n":
            line += 1

        pos += 1
