"""HTML tree nodes produced by HtmlParser. Each node is owned by exactly one parent."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from markup_style_linter.domain.constants import VOID_ELEMENTS
from markup_style_linter.domain.entities import Token


@dataclass(frozen=True)
class Attribute:
    """One attribute of a start tag, as written."""
    token: Token
    name: str
    value: str | None
    """Unquoted value text; None for a bare attribute such as `disabled`."""
    quote: str | None
    """'"' or "'" for quoted values, '' for unquoted values, None without a value."""
    value_start: int | None = None
    """Offset of the value including its opening quote."""
    terminated: bool = True
    """False when a quoted value has no closing quote."""

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def is_recovered(self) -> bool:
        """True for a stray `=` or quote the lexer skipped where a name was expected."""
        return self.name[:1] in ("=", '"', "'")


@dataclass
class Element:
    """An element with its start tag, ordered attributes and ordered children."""
    name: str
    open_token: Token
    attributes: list[Attribute] = field(default_factory=list)
    children: list["Node"] = field(default_factory=list)
    end_token: Token | None = None
    """The `>` or `/>` token; None when the start tag was never terminated."""
    close_token: Token | None = None
    """The matching `</name>` token; None when auto-closed, void or self-closed."""
    closed_at_eof: bool = False
    """True when the parser auto-closed the element at end of input."""
    content_start: int = 0
    content_end: int = 0
    """Half-open range of offsets inside the element (between its tags)."""

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def start(self) -> int:
        return self.open_token.start

    @property
    def start_tag_end(self) -> int:
        if self.end_token is not None:
            return self.end_token.end
        if self.attributes:
            return self.attributes[-1].end
        return self.open_token.end

    @property
    def is_void(self) -> bool:
        return self.lower_name in VOID_ELEMENTS

    @property
    def self_closing(self) -> bool:
        return self.end_token is not None and self.end_token.text == "/>"

    def attribute(self, name: str) -> Attribute | None:
        """First attribute with the given name (case-insensitive)."""
        lowered = name.lower()
        return next((a for a in self.attributes if a.lower_name == lowered), None)

    def iter_elements(self) -> Iterator["Element"]:
        """This element and all descendant elements in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()


@dataclass(frozen=True)
class TextNode:
    token: Token


@dataclass(frozen=True)
class CommentNode:
    """A comment or a doctype/processing declaration."""
    token: Token


Node = Element | TextNode | CommentNode


@dataclass
class Document:
    """Root of an HTML tree."""
    children: list[Node] = field(default_factory=list)
    stray_close_tokens: list[Token] = field(default_factory=list)
    """Closing-tag tokens that matched no open element."""

    def iter_elements(self) -> Iterator[Element]:
        """All elements in document order."""
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()
