"""
Markup Style Linter: shared constants and documented defaults.
"""

RULE_PREFIX: str = "style."

_ART: str = r"""
  __  __            _                 ___ _        _
 |  \/  |__ _ _ _ _| |___  _ _ __   / __| |_ _  _| |___
 | |\/| / _` | '_| / / || | '_ \_ \ \__ \  _| || | / -_)
 |_|  |_\__,_|_| |_\_\\_,_| .__/__/ |___/\__|\_, |_\___|
                          |_|                |__/
"""
BANNER: str = _ART

DEFAULT_INDENT_WIDTH: int = 4
DEFAULT_INDENT_STYLE: str = "spaces"
DEFAULT_QUOTE_STYLE: str = "double"
DEFAULT_MAX_NESTING_DEPTH: int = 3
DEFAULT_MAX_FIX_PASSES: int = 5
DEFAULT_FAIL_ON: str = "warning"

# Attribute categories: exact names, prefix globs ending in "*", and the
# catch-all "other".
OTHER_CATEGORY: str = "other"
DEFAULT_ATTRIBUTE_ORDER: tuple[str, ...] = ("class", "id", "data-*", OTHER_CATEGORY)

VARIABLE: str = "variable"
EXTEND: str = "extend"
INCLUDE: str = "include"
PROPERTY: str = "property"
INCLUDE_BLOCK: str = "include-block"
SELF_MODIFIER: str = "self-modifier"
CHILD_SELECTOR: str = "child-selector"

DECLARATION_CATEGORIES: frozenset[str] = frozenset(
    {VARIABLE, EXTEND, INCLUDE, PROPERTY, INCLUDE_BLOCK, SELF_MODIFIER, CHILD_SELECTOR}
)
DEFAULT_DECLARATION_ORDER: tuple[str, ...] = (
    VARIABLE,
    EXTEND,
    INCLUDE,
    PROPERTY,
    INCLUDE_BLOCK,
    SELF_MODIFIER,
    CHILD_SELECTOR,
)

QUOTE_CHARS: dict[str, str] = {"double": '"', "single": "'"}
SEVERITY_LEVELS: tuple[str, ...] = ("error", "warning")

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Content of these elements is kept verbatim as text until the matching end tag.
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style", "textarea"})
# Whitespace inside these elements is significant or foreign; never re-indented.
PREFORMATTED_ELEMENTS: frozenset[str] = RAW_TEXT_ELEMENTS | {"pre"}

BOOLEAN_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)

# Foreign (XML) content keeps case-sensitive names such as viewBox.
FOREIGN_ELEMENTS: frozenset[str] = frozenset({"svg", "math"})

# Block at-rules whose bodies are conditional or generative; blocks holding
# them are never reordered.
CONTROL_AT_RULES: frozenset[str] = frozenset(
    {"if", "else", "each", "for", "while", "function", "mixin", "return"}
)

# Template syntax inside attribute values, as opener -> closer.
TEMPLATE_DELIMITERS: dict[str, str] = {"{{": "}}", "{%": "%}", "<%": "%>", "${": "}"}
TEMPLATE_MARKERS: tuple[str, ...] = tuple(TEMPLATE_DELIMITERS)

# SCSS `#{...}` interpolation.
INTERPOLATION_DELIMITERS: dict[str, str] = {"#{": "}"}

SOURCE_EXTENSIONS: dict[str, str] = {
    ".html": "html",
    ".htm": "html",
    ".scss": "scss",
    ".css": "scss",
}

SYNTAX_RULE_ID: str = "syntax"
