"""Line-oriented Gemtext to HTML conversion.

Each input line is classified by its first whitespace-delimited token. Two
sticky flags, ``in_list`` and ``in_preformat``, track whether the converter is
inside a ``<ul>`` or ``<pre>`` block. The converter works on bytes so content
passes through untouched; no escaping or inline markup is applied.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterable, Iterator

WHITESPACE = b" \n\r\t\f\v"
NEWLINE = b"\n"


class LineKind(str, Enum):
    HEADING = "heading"
    QUOTE = "quote"
    LINK = "link"
    LIST_ITEM = "list_item"
    PREFORMAT_FENCE = "preformat_fence"
    PLAIN = "plain"


class GemMarker:
    LIST = b"*"
    PREFORMAT = b"```"
    HEADING = b"#"
    QUOTE = b">"
    LINK = b"=>"


class HTMLTag:
    LIST_START = b"<ul>"
    LIST_END = b"</ul>"
    LIST_ITEM = b"<li>%s</li>"
    PREFORMAT_START = b"<pre>"
    PREFORMAT_END = b"</pre>"
    QUOTE = b"<blockquote>%s</blockquote>"
    HEADING = b"<h%d>%s</h%d>"
    LINK = b'<a href="%s">%s</a>'


@dataclass(frozen=True, slots=True)
class GemLine:
    kind: LineKind
    raw: bytes
    prefix: bytes
    rest: bytes
    level: int = 0
    href: bytes = b""
    text: bytes = b""


def _first_token(value: bytes) -> bytes:
    parts = value.split(None, 1)
    return parts[0] if parts else b""


def classify_line(raw: bytes) -> GemLine:
    """Classify a single line (without its terminating LF)."""

    trimmed = raw.strip(WHITESPACE)
    prefix = _first_token(trimmed)
    rest = trimmed[len(prefix):].lstrip(WHITESPACE)

    # an empty prefix never reaches the heading test
    if prefix[:1] == GemMarker.HEADING:
        return GemLine(LineKind.HEADING, raw, prefix, rest, level=len(prefix))
    if prefix == GemMarker.QUOTE:
        return GemLine(LineKind.QUOTE, raw, prefix, rest)
    if prefix == GemMarker.LINK:
        href = _first_token(rest)
        text = rest[len(href):].strip(WHITESPACE)
        return GemLine(LineKind.LINK, raw, prefix, rest, href=href, text=text)
    if prefix == GemMarker.LIST:
        return GemLine(LineKind.LIST_ITEM, raw, prefix, rest)
    if prefix == GemMarker.PREFORMAT:
        return GemLine(LineKind.PREFORMAT_FENCE, raw, prefix, rest)
    return GemLine(LineKind.PLAIN, raw, prefix, rest)


class GemtextConverter:
    """Stateful converter for one Gemtext document."""

    def __init__(self, *, close_unterminated_preformat: bool = False) -> None:
        self.in_list = False
        self.in_preformat = False
        self._close_unterminated_preformat = close_unterminated_preformat

    def feed(self, raw: bytes) -> list[bytes]:
        line = classify_line(raw)
        out: list[bytes] = []

        if self.in_preformat and line.kind is not LineKind.PREFORMAT_FENCE:
            out.append(line.raw + NEWLINE)
            return out

        if self.in_list and line.kind is not LineKind.LIST_ITEM:
            out.append(HTMLTag.LIST_END + NEWLINE)
            self.in_list = False

        if line.kind is LineKind.HEADING:
            out.append(HTMLTag.HEADING % (line.level, line.rest, line.level) + NEWLINE)
        elif line.kind is LineKind.QUOTE:
            out.append(HTMLTag.QUOTE % line.rest + NEWLINE)
        elif line.kind is LineKind.LINK:
            out.append(HTMLTag.LINK % (line.href, line.text) + NEWLINE)
        elif line.kind is LineKind.LIST_ITEM:
            if not self.in_list:
                out.append(HTMLTag.LIST_START + NEWLINE)
                self.in_list = True
            out.append(HTMLTag.LIST_ITEM % line.rest + NEWLINE)
        elif line.kind is LineKind.PREFORMAT_FENCE:
            if self.in_preformat:
                out.append(HTMLTag.PREFORMAT_END + NEWLINE)
            else:
                out.append(HTMLTag.PREFORMAT_START + NEWLINE)
            self.in_preformat = not self.in_preformat
        else:
            out.append(line.raw + NEWLINE)
        return out

    def finish(self) -> list[bytes]:
        out: list[bytes] = []
        if self.in_list:
            out.append(HTMLTag.LIST_END + NEWLINE)
            self.in_list = False
        if self.in_preformat and self._close_unterminated_preformat:
            out.append(HTMLTag.PREFORMAT_END + NEWLINE)
            self.in_preformat = False
        return out


def split_lines(data: Iterable[bytes]) -> Iterator[bytes]:
    """Yield lines with the trailing LF removed. A CR before it is kept."""

    for chunk in data:
        yield chunk[:-1] if chunk.endswith(NEWLINE) else chunk


def convert_lines(
    lines: Iterable[bytes], *, close_unterminated_preformat: bool = False
) -> Iterator[bytes]:
    converter = GemtextConverter(close_unterminated_preformat=close_unterminated_preformat)
    for raw in lines:
        yield from converter.feed(raw)
    yield from converter.finish()


def convert_stream(
    source: BinaryIO, sink: BinaryIO, *, close_unterminated_preformat: bool = False
) -> None:
    for chunk in convert_lines(
        split_lines(source), close_unterminated_preformat=close_unterminated_preformat
    ):
        sink.write(chunk)


def convert_bytes(data: bytes, *, close_unterminated_preformat: bool = False) -> bytes:
    sink = io.BytesIO()
    convert_stream(io.BytesIO(data), sink, close_unterminated_preformat=close_unterminated_preformat)
    return sink.getvalue()


__all__ = [
    "GemLine",
    "GemtextConverter",
    "LineKind",
    "classify_line",
    "convert_bytes",
    "convert_lines",
    "convert_stream",
    "split_lines",
]
