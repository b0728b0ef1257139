"""SCSS tokenizer: statements, braces, comments and whitespace with exact offsets."""

from collections.abc import Generator, Iterator

from markup_style_linter.domain.entities import Token, TokenKind
from markup_style_linter.domain.exceptions import MalformedSyntaxError
from markup_style_linter.domain.text import LineIndex, StringScanner


class SassLexer:
    """
    Converts SCSS text into a lazy, gap-free token stream.

    Statement boundaries (`;`, `{`, `}`) are only recognised outside strings,
    parentheses, comments and `#{...}` interpolation. An unterminated string
    ends its statement at the end of the line; an unterminated block comment
    runs to the end of input. Brace balance is checked by the parser.
    """

    def __init__(self, text: str, line_index: LineIndex | None = None) -> None:
        self.text = text
        self.line_index = line_index or LineIndex(text)
        self.errors: list[MalformedSyntaxError] = []

    def tokens(self) -> Iterator[Token]:
        """Yield tokens covering the whole text in order."""
        self.errors = []
        text = self.text
        length = len(text)
        pos = 0
        while pos < length:
            char = text[pos]
            if char.isspace():
                end = pos
                while end < length and text[end].isspace():
                    end += 1
                yield self._token(TokenKind.WHITESPACE, pos, end)
            elif text.startswith("/*", pos):
                close = text.find("*/", pos + 2)
                if close == -1:
                    self._error("unterminated comment", pos)
                    end = length
                else:
                    end = close + 2
                yield self._token(TokenKind.COMMENT, pos, end)
            elif text.startswith("//", pos):
                newline = text.find("\n", pos)
                end = length if newline == -1 else newline
                yield self._token(TokenKind.COMMENT, pos, end)
            elif char in "{}":
                end = pos + 1
                yield self._token(TokenKind.BRACE, pos, end)
            else:
                end = yield from self._statement(pos)
            pos = end

    def _statement(self, start: int) -> Generator[Token, None, int]:
        """Yield one statement token (plus trailing whitespace); return the next offset."""
        text = self.text
        length = len(text)
        index = start
        paren = 0
        terminator = ""
        while index < length:
            char = text[index]
            if char in "\"'":
                end, terminated = StringScanner.find_string_end(text, index)
                if not terminated:
                    self._error("unterminated string", index)
                    newline = text.find("\n", index)
                    index = length if newline == -1 else newline
                    break
                index = end
                continue
            if text.startswith("#{", index):
                close = self._interpolation_end(index)
                if close is None:
                    self._error("unterminated interpolation", index)
                    newline = text.find("\n", index)
                    index = length if newline == -1 else newline
                    break
                index = close
                continue
            if text.startswith("/*", index):
                close = text.find("*/", index + 2)
                if close == -1:
                    self._error("unterminated comment", index)
                    index = length
                    break
                index = close + 2
                continue
            if text.startswith("//", index) and paren == 0:
                newline = text.find("\n", index)
                index = length if newline == -1 else newline
                continue
            if char == "(":
                paren += 1
            elif char == ")":
                paren = max(0, paren - 1)
            elif paren == 0 and char in ";{}":
                terminator = char
                break
            index += 1

        if terminator == ";":
            end = index + 1
            kind = TokenKind.AT_RULE if text.startswith("@", start) else TokenKind.DECLARATION
            yield self._token(kind, start, end)
            return end

        end = index
        while end > start and text[end - 1].isspace():
            end -= 1
        if terminator == "{":
            kind = TokenKind.AT_RULE if text.startswith("@", start) else TokenKind.SELECTOR
        else:
            kind = TokenKind.AT_RULE if text.startswith("@", start) else TokenKind.DECLARATION
        if end > start:
            yield self._token(kind, start, end)
        if index > end:
            yield self._token(TokenKind.WHITESPACE, end, index)
        return index

    def _interpolation_end(self, start: int) -> int | None:
        """Offset past the `}` closing a `#{` at start, honouring nesting and strings."""
        text = self.text
        depth = 0
        index = start + 1
        while index < len(text):
            char = text[index]
            if char in "\"'":
                index, _ = StringScanner.find_string_end(text, index)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        return None

    def _token(self, kind: TokenKind, start: int, end: int) -> Token:
        return Token(kind=kind, text=self.text[start:end], position=self.line_index.position(start))

    def _error(self, message: str, offset: int) -> None:
        self.errors.append(MalformedSyntaxError(message, self.line_index.position(offset)))
