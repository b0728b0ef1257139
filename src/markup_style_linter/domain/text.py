"""Offset/line bookkeeping and string-literal scanning shared by lexers and rules."""

from bisect import bisect_right
from dataclasses import dataclass

from markup_style_linter.domain.entities import SourcePosition


class LineIndex:
    """Maps 0-based offsets to 1-based (line, column) positions for one text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts: list[int] = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position(self, offset: int) -> SourcePosition:
        """Return the SourcePosition for an offset (clamped to the text length)."""
        offset = max(0, min(offset, len(self.text)))
        line_index = bisect_right(self._starts, offset) - 1
        return SourcePosition(
            line=line_index + 1,
            column=offset - self._starts[line_index] + 1,
            offset=offset,
        )

    def line_start(self, line: int) -> int:
        """Offset of the first character of a 1-based line."""
        return self._starts[line - 1]

    def line_end(self, line: int) -> int:
        """Offset of the line terminator (or text end), excluding any '\\r'."""
        end = self._starts[line] - 1 if line < len(self._starts) else len(self.text)
        if end > self.line_start(line) and self.text[end - 1] == "\r":
            end -= 1
        return end

    def line_text(self, line: int) -> str:
        """Text of a 1-based line without its terminator."""
        return self.text[self.line_start(line):self.line_end(line)]

    def lines(self) -> range:
        """All 1-based line numbers."""
        return range(1, len(self._starts) + 1)


@dataclass(frozen=True)
class StringLiteral:
    """A quoted string inside a larger text; offsets are absolute."""
    start: int
    end: int
    quote: str
    body: str
    terminated: bool = True

    @property
    def raw(self) -> str:
        return self.quote + self.body + (self.quote if self.terminated else "")


class StringScanner:
    """Finds quoted string literals in CSS/SCSS statement text."""

    @staticmethod
    def scan(text: str, base_offset: int = 0) -> list[StringLiteral]:
        """
        Return every quoted literal in text, skipping comments.

        Backslash escapes are honoured; a literal not closed before end of line
        is returned with terminated=False.
        """
        literals: list[StringLiteral] = []
        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            if text.startswith("/*", index):
                close = text.find("*/", index + 2)
                index = length if close == -1 else close + 2
                continue
            if text.startswith("//", index) and not StringScanner._in_url(text, index):
                newline = text.find("\n", index)
                index = length if newline == -1 else newline
                continue
            if char in "\"'":
                end, terminated = StringScanner.find_string_end(text, index)
                body_end = end - 1 if terminated else end
                literals.append(
                    StringLiteral(
                        start=base_offset + index,
                        end=base_offset + end,
                        quote=char,
                        body=text[index + 1:body_end],
                        terminated=terminated,
                    )
                )
                index = end
                continue
            index += 1
        return literals

    @staticmethod
    def find_string_end(text: str, start: int) -> tuple[int, bool]:
        """Return (offset past the closing quote, terminated) for a literal at start."""
        quote = text[start]
        index = start + 1
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                return index + 1, True
            if char == "\n":
                return index, False
            index += 1
        return len(text), False

    @staticmethod
    def _in_url(text: str, index: int) -> bool:
        """True if '//' at index sits inside an unclosed url( ... )."""
        opener = text.rfind("url(", 0, index)
        if opener == -1:
            return False
        return text.find(")", opener, index) == -1


def delimited_spans(text: str, delimiters: dict[str, str]) -> list[tuple[int, int]]:
    """
    Half-open spans of text enclosed by any opener/closer pair, delimiters included.

    Spans do not nest; an opener without a closer runs to the end of text.
    """
    spans: list[tuple[int, int]] = []
    index = 0
    while index < len(text):
        opener = next((o for o in delimiters if text.startswith(o, index)), None)
        if opener is None:
            index += 1
            continue
        close = text.find(delimiters[opener], index + len(opener))
        end = len(text) if close == -1 else close + len(delimiters[opener])
        spans.append((index, end))
        index = end
    return spans


def within_spans(text: str, char: str, spans: list[tuple[int, int]]) -> bool:
    """True if any occurrence of char lies inside one of spans."""
    return any(char in text[start:end] for start, end in spans)
