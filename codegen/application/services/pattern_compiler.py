"""Pattern compilation: template string -> ordered literal and placeholder segments.

Placeholder syntax is ``{KIND}`` or ``{KIND:param}``. Unknown kinds are kept as
literal text so newer templates never fail on older code. Compilation is pure
and cached by template string.
"""

import re
from functools import lru_cache

from codegen.domain.enums import PlaceholderKind
from codegen.domain.value_objects import (
    CompiledPattern,
    LiteralSegment,
    Placeholder,
    Segment,
)

_PLACEHOLDER_RE = re.compile(r"\{([A-Z]+)(?::([^{}]*))?\}")
_ALNUM_RE = re.compile(r"^[A-Za-z0-9]+$")
_DIGITS_RE = re.compile(r"^[0-9]+$")

# Upper bounds for numeric parameters; larger values count as invalid.
MAX_SEQUENCE_WIDTH = 20
MAX_RANDOM_LENGTH = 64

_NO_PARAM_KINDS = frozenset(
    {PlaceholderKind.TYPE, PlaceholderKind.LOCATION, PlaceholderKind.UUID}
)
_FORMAT_KINDS = frozenset({PlaceholderKind.DATE, PlaceholderKind.TIME})


def _bounded_number(param: str | None, upper: int) -> bool:
    if param is None or not _DIGITS_RE.match(param) or len(param) > len(str(upper)):
        return False
    return 1 <= int(param) <= upper


def _to_placeholder(keyword: str, param: str | None, raw: str) -> Placeholder | None:
    """Build a placeholder for a brace token, or None if the token is literal text.

    DATE/TIME parameters must be alphanumeric and SEQUENCE parameters a width
    from 1 to MAX_SEQUENCE_WIDTH; an invalid one is dropped so the configured
    default applies. RANDOM needs a length from 1 to MAX_RANDOM_LENGTH and
    TYPE/LOCATION/UUID take no parameter; otherwise the token stays literal.
    """
    kind = PlaceholderKind.from_keyword(keyword)
    if kind is None:
        return None
    if kind in _NO_PARAM_KINDS:
        return Placeholder(kind, None, raw) if param is None else None
    if kind is PlaceholderKind.RANDOM:
        if not _bounded_number(param, MAX_RANDOM_LENGTH):
            return None
        return Placeholder(kind, param, raw)
    if kind in _FORMAT_KINDS:
        valid = param is not None and bool(_ALNUM_RE.match(param))
        return Placeholder(kind, param if valid else None, raw)
    # SEQUENCE
    valid = _bounded_number(param, MAX_SEQUENCE_WIDTH)
    return Placeholder(kind, param if valid else None, raw)


@lru_cache(maxsize=256)
def compile_pattern(template: str) -> CompiledPattern:
    """Compile template into a CompiledPattern.

    Adjacent literal runs are merged, so a rejected placeholder and the text
    around it form one literal segment.

    Args:
        template: Pattern such as '{TYPE}-{DATE:ymd}-{SEQUENCE:4}'.

    Returns:
        Immutable compiled pattern.
    """
    segments: list[Segment] = []
    literal: list[str] = []
    position = 0
    for match in _PLACEHOLDER_RE.finditer(template):
        literal.append(template[position : match.start()])
        position = match.end()
        placeholder = _to_placeholder(match.group(1), match.group(2), match.group(0))
        if placeholder is None:
            literal.append(match.group(0))
            continue
        if "".join(literal):
            segments.append(LiteralSegment("".join(literal)))
        literal = []
        segments.append(placeholder)
    literal.append(template[position:])
    if "".join(literal):
        segments.append(LiteralSegment("".join(literal)))
    return CompiledPattern(template=template, segments=tuple(segments))


def contains_placeholder(text: str) -> bool:
    """Return True if text contains at least one recognised placeholder."""
    return bool(compile_pattern(text).placeholders)
