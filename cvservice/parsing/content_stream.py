from __future__ import annotations

import re

from cvservice.normalize.text import normalize_extracted_text
from cvservice.parsing.limits import MAX_ARRAY_SEGMENT_CHARACTERS, MAX_RESULT_CHARACTERS
from cvservice.parsing.models import TextAccumulator

# Literals open only at an unescaped "(" and their bodies stop at the next
# unescaped "(", so each match attempt scans at most one literal.
_STRING_LITERAL = r"(?<!\\)\((?P<s>(?:\\[\s\S]|[^\\()])*)\)"

_SHOW_STRING_RE = re.compile(_STRING_LITERAL + r"\s*T[jJ]")
_SHOW_ARRAY_RE = re.compile(r"\[(?P<arr>[^\[\]]*)\]\s*TJ")
_ARRAY_FRAGMENT_RE = re.compile(_STRING_LITERAL)
_NEXT_LINE_SHOW_RES = (
    re.compile(_STRING_LITERAL + r"\s*'"),
    re.compile(_STRING_LITERAL + r'\s*"'),
)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "(": "(",
    ")": ")",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_OCTAL_DIGITS = "01234567"


def unescape_pdf_string(value: str) -> str:
    """Resolve the backslash escapes of a PDF literal string body."""
    out: list[str] = []
    index = 0
    length = len(value)
    while index < length:
        char = value[index]
        if char != "\\" or index + 1 >= length:
            out.append(char)
            index += 1
            continue

        following = value[index + 1]
        if following in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[following])
            index += 2
            continue

        if following in _OCTAL_DIGITS:
            end = index + 1
            while end < length and end - index <= 3 and value[end] in _OCTAL_DIGITS:
                end += 1
            out.append(chr(int(value[index + 1 : end], 8) & 0xFF))
            index = end
            continue

        out.append(following)
        index += 2
    return "".join(out)


def _collect_show_strings(pattern: re.Pattern[str], content: str, acc: TextAccumulator) -> None:
    for match in pattern.finditer(content):
        if not acc.add(unescape_pdf_string(match.group("s"))):
            return


def _collect_show_arrays(content: str, acc: TextAccumulator) -> None:
    for match in _SHOW_ARRAY_RE.finditer(content):
        fragments: list[str] = []
        size = 0
        for part in _ARRAY_FRAGMENT_RE.finditer(match.group("arr")):
            fragment = unescape_pdf_string(part.group("s"))
            fragments.append(fragment)
            size += len(fragment)
            if size > MAX_ARRAY_SEGMENT_CHARACTERS:
                break
        if not acc.add("".join(fragments)):
            return


def extract_text_from_content_streams(content: str, limit: int = MAX_RESULT_CHARACTERS) -> str:
    """Pull the operands of text-show operators out of decoded content streams."""
    if not content or not content.strip():
        return ""

    acc = TextAccumulator(limit=limit)
    _collect_show_strings(_SHOW_STRING_RE, content, acc)
    if not acc.exhausted:
        _collect_show_arrays(content, acc)
    for pattern in _NEXT_LINE_SHOW_RES:
        if acc.exhausted:
            break
        _collect_show_strings(pattern, content, acc)

    if not acc.parts:
        return ""
    return normalize_extracted_text(acc.join("\n"))
