"""HTML tokenizer with exact offsets and resynchronizing error recovery."""

import re
from collections.abc import Iterator

from markup_style_linter.domain.constants import RAW_TEXT_ELEMENTS
from markup_style_linter.domain.entities import Token, TokenKind
from markup_style_linter.domain.exceptions import MalformedSyntaxError
from markup_style_linter.domain.text import LineIndex

_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9:._-]*")
_ATTRIBUTE_STOP = frozenset(" \t\n\r\f>=<\"'")
_TAG_BOUNDARY = re.compile(r">[^<]*<[/!A-Za-z]")
_MARKUP_START = re.compile(r"<[A-Za-z/!?]")


class HtmlLexer:
    """
    Converts HTML text into a lazy, gap-free token stream.

    Malformed constructs never abort tokenizing. Each recovery records one
    MalformedSyntaxError in `errors` and scanning resumes at the next tag
    boundary. Calling tokens() again re-scans from the start and resets errors.
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
        raw_element: str | None = None
        while pos < length:
            if raw_element is not None:
                end = self._find_raw_end(raw_element, pos)
                raw_element = None
                if end > pos:
                    yield self._token(TokenKind.TEXT, pos, end)
                    pos = end
                continue
            if text.startswith("<!--", pos):
                close = text.find("-->", pos + 4)
                if close == -1:
                    self._error("unterminated comment", pos)
                    end = length
                else:
                    end = close + 3
                yield self._token(TokenKind.COMMENT, pos, end)
                pos = end
            elif text.startswith("<!", pos) or text.startswith("<?", pos):
                end = self._find_tag_end(pos, "declaration")
                yield self._token(TokenKind.DOCTYPE, pos, end)
                pos = end
            elif text.startswith("</", pos) and _TAG_NAME.match(text, pos + 2):
                end = self._find_tag_end(pos, "closing tag")
                yield self._token(TokenKind.TAG_CLOSE, pos, end)
                pos = end
            elif text[pos] == "<" and (name_match := _TAG_NAME.match(text, pos + 1)):
                tokens, pos, raw_element = self._start_tag(pos, name_match)
                yield from tokens
            else:
                match = _MARKUP_START.search(text, pos + 1)
                end = match.start() if match else length
                yield self._token(TokenKind.TEXT, pos, end)
                pos = end

    def _start_tag(
        self, pos: int, name_match: "re.Match[str]"
    ) -> tuple[list[Token], int, str | None]:
        """Tokenize `<name attr... >`; return tokens, next offset and raw-text element name."""
        text = self.text
        length = len(text)
        name = name_match.group(0)
        tokens = [self._token(TokenKind.TAG_OPEN, pos, name_match.end())]
        index = name_match.end()
        while True:
            if index >= length:
                self._error(f"unterminated tag <{name}>", pos)
                return tokens, index, None
            char = text[index]
            if char.isspace():
                end = index
                while end < length and text[end].isspace():
                    end += 1
                tokens.append(self._token(TokenKind.WHITESPACE, index, end))
                index = end
            elif char == ">":
                tokens.append(self._token(TokenKind.TAG_END, index, index + 1))
                raw = name.lower() if name.lower() in RAW_TEXT_ELEMENTS else None
                return tokens, index + 1, raw
            elif text.startswith("/>", index):
                tokens.append(self._token(TokenKind.TAG_END, index, index + 2))
                return tokens, index + 2, None
            elif char == "<":
                self._error(f"unterminated tag <{name}>", pos)
                return tokens, index, None
            else:
                previous = tokens[-1]
                if (
                    previous.kind is TokenKind.ATTRIBUTE
                    and previous.text[:1] not in _ATTRIBUTE_STOP
                    and char not in _ATTRIBUTE_STOP
                ):
                    self._error("missing whitespace between attributes", index)
                end = self._attribute_end(index)
                tokens.append(self._token(TokenKind.ATTRIBUTE, index, end))
                index = end

    def _attribute_end(self, start: int) -> int:
        """Offset one past an attribute (`name`, `name=value`, `name="value"`)."""
        text = self.text
        length = len(text)
        index = start
        while (
            index < length
            and text[index] not in _ATTRIBUTE_STOP
            and not text.startswith("/>", index)
        ):
            index += 1
        if index == start:
            # Stray '=' or quote where a name was expected.
            self._error(f"unexpected {text[start]!r} in tag", start)
            return start + 1
        lookahead = index
        while lookahead < length and text[lookahead] in " \t\n\r\f":
            lookahead += 1
        if lookahead >= length or text[lookahead] != "=":
            return index
        value = lookahead + 1
        while value < length and text[value] in " \t\n\r\f":
            value += 1
        if value >= length:
            return value
        quote = text[value]
        if quote in "\"'":
            return self._quoted_value_end(value)
        end = value
        while end < length and not text[end].isspace() and text[end] not in "><" and not text.startswith("/>", end):
            end += 1
        return end

    def _quoted_value_end(self, value: int) -> int:
        """End of a quoted value; unterminated values stop before the next '>'."""
        text = self.text
        quote = text[value]
        close = text.find(quote, value + 1)
        if close != -1 and not _TAG_BOUNDARY.search(text, value + 1, close):
            return close + 1
        self._error("unterminated attribute value", value)
        gt = text.find(">", value + 1)
        return gt if gt != -1 else len(text)

    def _find_tag_end(self, pos: int, what: str) -> int:
        """End of a `<...>` construct; stops before a nested '<' or at EOF with an error."""
        text = self.text
        gt = text.find(">", pos + 1)
        lt = text.find("<", pos + 1)
        if gt != -1 and (lt == -1 or gt < lt):
            return gt + 1
        self._error(f"unterminated {what}", pos)
        return lt if lt != -1 else len(text)

    def _find_raw_end(self, name: str, pos: int) -> int:
        """Offset of the `</name` that ends a raw-text element, or EOF."""
        pattern = re.compile(rf"</{re.escape(name)}(?=[\s/>])", re.IGNORECASE)
        match = pattern.search(self.text, pos)
        return match.start() if match else len(self.text)

    def _token(self, kind: TokenKind, start: int, end: int) -> Token:
        return Token(kind=kind, text=self.text[start:end], position=self.line_index.position(start))

    def _error(self, message: str, offset: int) -> None:
        self.errors.append(MalformedSyntaxError(message, self.line_index.position(offset)))
