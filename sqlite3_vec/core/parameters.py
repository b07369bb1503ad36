"""Placeholder-style classification for SQL text.

The classifier is lexical: it walks the SQL once with a single regex, skips
string literals, quoted identifiers and comments, and records every
placeholder token it finds. Precedence when styles are mixed is
named > numeric > anonymous.
"""

import re
from enum import Enum
from functools import lru_cache
from typing import Final, Optional, Union

__all__ = ("ParameterStyle", "SqlMeta", "bare_parameter_name", "classify_sql", "null_parameters")


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    NONE = "none"
    QMARK = "qmark"
    """Positional anonymous: ``?``."""
    NUMERIC = "numeric"
    """Positional numbered: ``?1``, ``?2``."""
    NAMED = "named"
    """Named: ``:name``, ``@name``, ``$name``."""

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value

    @property
    def is_positional(self) -> bool:
        return self in {ParameterStyle.QMARK, ParameterStyle.NUMERIC}


_PARAMETER_REGEX: Final = re.compile(
    r"""
    # Literals and comments are matched first so their contents are skipped
    (?P<squote>'(?:[^']|'')*') |
    (?P<dquote>"(?:[^"]|"")*") |
    (?P<bracket>\[[^\]]*\]) |
    (?P<backtick>`(?:[^`]|``)*`) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*[\s\S]*?(?:\*/|$)) |
    # Placeholders
    (?P<named>[:@$](?P<name>[A-Za-z_][A-Za-z0-9_]*)) |
    (?P<numeric>\?(?P<number>\d+)) |
    (?P<qmark>\?)
    """,
    re.VERBOSE,
)

_STYLE_PRECEDENCE: Final = (ParameterStyle.NAMED, ParameterStyle.NUMERIC, ParameterStyle.QMARK)


class SqlMeta:
    """Immutable placeholder metadata for one SQL text.

    ``param_count`` is the highest number for numeric style, the occurrence
    count for anonymous style, and 0 for named and none.
    """

    __slots__ = ("names", "param_count", "style", "styles")

    style: ParameterStyle
    param_count: int
    styles: "frozenset[ParameterStyle]"
    names: "tuple[str, ...]"

    def __init__(
        self,
        style: ParameterStyle,
        param_count: int = 0,
        styles: "frozenset[ParameterStyle]" = frozenset(),
        names: "tuple[str, ...]" = (),
    ) -> None:
        object.__setattr__(self, "style", style)
        object.__setattr__(self, "param_count", param_count)
        object.__setattr__(self, "styles", styles)
        object.__setattr__(self, "names", names)

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.style == other.style
            and self.param_count == other.param_count
            and self.styles == other.styles
            and self.names == other.names
        )

    def __hash__(self) -> int:
        return hash((self.style, self.param_count, self.styles, self.names))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(style={self.style!r}, param_count={self.param_count!r}, "
            f"mixed={self.mixed!r}, names={self.names!r})"
        )

    @property
    def mixed(self) -> bool:
        """True when the SQL uses more than one placeholder style."""
        return len(self.styles) > 1

    @property
    def has_parameters(self) -> bool:
        return self.style is not ParameterStyle.NONE


@lru_cache(maxsize=1024)
def classify_sql(sql: str) -> SqlMeta:
    """Classify the placeholder convention used by ``sql``.

    Args:
        sql: SQL text to analyze.

    Returns:
        The ``SqlMeta`` for the text. Results are cached per distinct string.
    """
    styles: set[ParameterStyle] = set()
    names: list[str] = []
    max_number = 0
    qmark_count = 0

    for match in _PARAMETER_REGEX.finditer(sql):
        kind = match.lastgroup
        if kind == "named":
            styles.add(ParameterStyle.NAMED)
            name = match.group("name")
            if name not in names:
                names.append(name)
        elif kind == "numeric":
            styles.add(ParameterStyle.NUMERIC)
            max_number = max(max_number, int(match.group("number")))
        elif kind == "qmark":
            styles.add(ParameterStyle.QMARK)
            qmark_count += 1

    frozen_styles = frozenset(styles)
    for style in _STYLE_PRECEDENCE:
        if style not in frozen_styles:
            continue
        if style is ParameterStyle.NAMED:
            return SqlMeta(style, 0, frozen_styles, tuple(names))
        if style is ParameterStyle.NUMERIC:
            return SqlMeta(style, max_number, frozen_styles)
        return SqlMeta(style, qmark_count, frozen_styles)
    return SqlMeta(ParameterStyle.NONE)


_SIGILS: Final = (":", "@", "$")


def bare_parameter_name(key: "str | int") -> "str | int":
    """Strip a leading ``:``, ``@`` or ``$`` from a named-parameter key.

    Integer keys are returned unchanged.
    """
    if isinstance(key, str) and key.startswith(_SIGILS):
        return key[1:]
    return key


def null_parameters(sql: str) -> "Optional[Union[dict[str, None], list[None]]]":
    """Return a NULL for every placeholder in ``sql``, shaped for ``sqlite3``.

    Returns None when ``sql`` mixes placeholder styles, since no single
    container can bind it.
    """
    meta = classify_sql(sql)
    if meta.mixed:
        return None
    if meta.style is ParameterStyle.NAMED:
        return dict.fromkeys(meta.names)
    return [None] * meta.param_count
