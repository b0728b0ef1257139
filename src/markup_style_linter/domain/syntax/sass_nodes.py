"""SCSS tree nodes produced by SassParser. Sass logic is never evaluated."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from markup_style_linter.domain.constants import (
    CHILD_SELECTOR,
    CONTROL_AT_RULES,
    EXTEND,
    INCLUDE,
    INCLUDE_BLOCK,
    PROPERTY,
    SELF_MODIFIER,
    VARIABLE,
)
from markup_style_linter.domain.entities import Token

_AT_KEYWORD = re.compile(r"@([\w-]+)")


def at_keyword(text: str) -> str | None:
    """Lowercased at-rule keyword of a statement, or None if it is not an at-rule."""
    match = _AT_KEYWORD.match(text)
    return match.group(1).lower() if match else None


@dataclass(frozen=True)
class Declaration:
    """A property, `$variable`, `@extend`, `@include` or other block-less at-rule."""
    token: Token

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end

    @property
    def keyword(self) -> str | None:
        return at_keyword(self.token.text)

    @property
    def is_variable(self) -> bool:
        return self.token.text.startswith("$")

    @property
    def is_extend(self) -> bool:
        return self.keyword == "extend"

    @property
    def is_include(self) -> bool:
        return self.keyword == "include"

    @property
    def is_property(self) -> bool:
        return not self.is_variable and self.keyword is None

    @property
    def terminated(self) -> bool:
        return self.token.text.endswith(";")

    @property
    def category(self) -> str | None:
        """Declaration-order category; None for items that are never reordered."""
        if self.is_variable:
            return VARIABLE
        if self.is_extend:
            return EXTEND
        if self.is_include:
            return INCLUDE
        if self.is_property:
            return PROPERTY
        return None


@dataclass(frozen=True)
class SassComment:
    token: Token

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end


@dataclass
class RuleBlock:
    """A `prelude { ... }` block: selector rule, nested property or at-rule block."""
    prelude: Token | None
    open_brace: Token
    depth: int
    """Number of enclosing selector blocks, counting this one if it is a selector block."""
    children: list["SassNode"] = field(default_factory=list)
    close_brace: Token | None = None
    content_end: int = 0

    @property
    def prelude_text(self) -> str:
        return self.prelude.text if self.prelude is not None else ""

    @property
    def keyword(self) -> str | None:
        return at_keyword(self.prelude_text)

    @property
    def is_property_block(self) -> bool:
        """Nested property such as `font: { family: x; }`."""
        return self.keyword is None and self.prelude_text.rstrip().endswith(":")

    @property
    def is_selector_block(self) -> bool:
        return self.prelude is not None and self.keyword is None and not self.is_property_block

    @property
    def selectors(self) -> list[str]:
        """Comma-separated selectors of the prelude, whitespace-collapsed."""
        if not self.is_selector_block:
            return []
        parts: list[str] = []
        depth = 0
        current: list[str] = []
        for char in self.prelude_text:
            if char in "([":
                depth += 1
            elif char in ")]":
                depth = max(0, depth - 1)
            if char == "," and depth == 0:
                parts.append("".join(current))
                current = []
                continue
            current.append(char)
        parts.append("".join(current))
        return [" ".join(p.split()) for p in parts if p.strip()]

    @property
    def start(self) -> int:
        return self.prelude.start if self.prelude is not None else self.open_brace.start

    @property
    def end(self) -> int:
        return self.close_brace.end if self.close_brace is not None else self.content_end

    @property
    def content_start(self) -> int:
        return self.open_brace.end

    @property
    def category(self) -> str | None:
        """Declaration-order category; None for control-flow blocks."""
        keyword = self.keyword
        if keyword == "include":
            return INCLUDE_BLOCK
        if keyword in CONTROL_AT_RULES:
            return None
        if keyword is not None:
            return CHILD_SELECTOR
        if self.is_property_block:
            return PROPERTY
        if self.prelude_text.lstrip().startswith("&"):
            return SELF_MODIFIER
        return CHILD_SELECTOR

    def iter_blocks(self) -> Iterator["RuleBlock"]:
        """This block and all nested blocks in source order."""
        yield self
        for child in self.children:
            if isinstance(child, RuleBlock):
                yield from child.iter_blocks()


SassNode = Declaration | RuleBlock | SassComment


@dataclass
class Stylesheet:
    """Root of an SCSS tree."""
    children: list[SassNode] = field(default_factory=list)
    stray_braces: list[Token] = field(default_factory=list)

    def iter_blocks(self) -> Iterator[RuleBlock]:
        for child in self.children:
            if isinstance(child, RuleBlock):
                yield from child.iter_blocks()
