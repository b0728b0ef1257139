"""Unit tests for HtmlLexer: coverage, token kinds and recovery."""

import pytest

from markup_style_linter.domain.entities import TokenKind
from markup_style_linter.domain.syntax.html_lexer import HtmlLexer


def _kinds(text: str) -> list[tuple[TokenKind, str]]:
    return [(t.kind, t.text) for t in HtmlLexer(text).tokens()]


class TestTokenCoverage:
    @pytest.mark.parametrize(
        "text",
        [
            '<!DOCTYPE html>\n<html lang="en">\n  <body class=x>Hi</body>\n</html>\n',
            "<p>unclosed <b>bold\n",
            '<a href="x>text</a>',
            "<div\n  id='a'\n  hidden>",
            "<!-- never closed",
            "plain text < 3 and > 2",
            "<script>if (a < b) { x = '</div>'; }</script>",
            "",
        ],
    )
    def test_tokens_reproduce_input(self, text: str) -> None:
        assert "".join(t.text for t in HtmlLexer(text).tokens()) == text

    def test_offsets_are_contiguous(self) -> None:
        text = '<ul>\n  <li class="a">One</li>\n</ul>'
        cursor = 0
        for token in HtmlLexer(text).tokens():
            assert token.start == cursor
            cursor = token.end
        assert cursor == len(text)


class TestTokenKinds:
    def test_start_tag_parts(self) -> None:
        assert _kinds('<input type="text" disabled/>') == [
            (TokenKind.TAG_OPEN, "<input"),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.ATTRIBUTE, 'type="text"'),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.ATTRIBUTE, "disabled"),
            (TokenKind.TAG_END, "/>"),
        ]

    def test_close_comment_and_doctype(self) -> None:
        kinds = [kind for kind, _ in _kinds("<!doctype html><!-- c --></p>")]
        assert kinds == [TokenKind.DOCTYPE, TokenKind.COMMENT, TokenKind.TAG_CLOSE]

    def test_raw_text_element_content_is_one_text_token(self) -> None:
        tokens = _kinds("<style>a > b { color: red; }</style>")
        assert (TokenKind.TEXT, "a > b { color: red; }") in tokens
        assert tokens[-1] == (TokenKind.TAG_CLOSE, "</style>")

    def test_lone_angle_bracket_is_text(self) -> None:
        assert _kinds("a < b") == [(TokenKind.TEXT, "a < b")]

    def test_positions(self) -> None:
        tokens = list(HtmlLexer("<p>\n  <b>x</b>\n</p>").tokens())
        bold = next(t for t in tokens if t.text == "<b")
        assert (bold.position.line, bold.position.column) == (2, 3)


class TestRecovery:
    def test_unterminated_comment(self) -> None:
        lexer = HtmlLexer("<p>a</p><!-- open")
        tokens = list(lexer.tokens())
        assert tokens[-1].kind is TokenKind.COMMENT
        assert [e.message for e in lexer.errors] == ["unterminated comment"]

    def test_tag_interrupted_by_new_tag(self) -> None:
        lexer = HtmlLexer('<div class="a"\n<p>text</p>')
        tokens = list(lexer.tokens())
        assert any(t.text == "<p" and t.kind is TokenKind.TAG_OPEN for t in tokens)
        assert lexer.errors[0].message == "unterminated tag <div>"
        assert lexer.errors[0].position.line == 1

    def test_unterminated_attribute_value_stops_at_gt(self) -> None:
        lexer = HtmlLexer('<a href="x>text</a>')
        tokens = list(lexer.tokens())
        assert (TokenKind.ATTRIBUTE, 'href="x') in [(t.kind, t.text) for t in tokens]
        assert (TokenKind.TEXT, "text") in [(t.kind, t.text) for t in tokens]
        assert [e.message for e in lexer.errors] == ["unterminated attribute value"]

    def test_restart_resets_errors(self) -> None:
        lexer = HtmlLexer("<!-- open")
        list(lexer.tokens())
        list(lexer.tokens())
        assert len(lexer.errors) == 1

    def test_attributes_without_whitespace(self) -> None:
        lexer = HtmlLexer('<a b="1"c="2">')
        tokens = list(lexer.tokens())
        assert [t.text for t in tokens if t.kind is TokenKind.ATTRIBUTE] == ['b="1"', 'c="2"']
        assert [e.message for e in lexer.errors] == ["missing whitespace between attributes"]
        assert lexer.errors[0].position.column == 9

    def test_stray_equals_is_not_a_missing_separator(self) -> None:
        lexer = HtmlLexer('<a ="x">')
        list(lexer.tokens())
        messages = [e.message for e in lexer.errors]
        assert "unexpected '=' in tag" in messages
        assert "missing whitespace between attributes" not in messages
