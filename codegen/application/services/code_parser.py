"""Code parsing: inverse of the formatter for a compiled pattern.

Converts each placeholder into a named capturing group with a kind-appropriate
character class and each literal run into escaped text, anchored to the whole
code. TYPE, LOCATION, DATE, TIME and SEQUENCE round-trip exactly; RANDOM and
UUID come back as opaque strings.
"""

import re

from codegen.application.dtos.generation import GenerationConfig
from codegen.application.services.date_format import format_regex
from codegen.domain.enums import PlaceholderKind
from codegen.domain.exceptions import PatternMismatchException
from codegen.domain.value_objects import CompiledPattern, LiteralSegment, Placeholder

_GENERIC_CLASSES: dict[PlaceholderKind, str] = {
    PlaceholderKind.TYPE: r"[A-Z0-9]+",
    PlaceholderKind.LOCATION: r"[A-Z0-9]+",
    PlaceholderKind.DATE: r"[0-9A-Za-z]+",
    PlaceholderKind.TIME: r"[0-9]+",
    PlaceholderKind.SEQUENCE: r"[0-9]+",
    PlaceholderKind.RANDOM: r"[A-Za-z0-9]+",
    PlaceholderKind.UUID: r"[0-9a-fA-F-]{36}",
}


def _group_body(placeholder: Placeholder, config: GenerationConfig) -> str:
    """Regex body for one placeholder (no capturing groups)."""
    kind = placeholder.kind
    if kind in (PlaceholderKind.DATE, PlaceholderKind.TIME):
        shape = format_regex(config.date_format_for(kind, placeholder.param))
        return shape or _GENERIC_CLASSES[kind]
    if kind is PlaceholderKind.RANDOM and placeholder.width:
        return f"[A-Za-z0-9]{{{placeholder.width}}}"
    return _GENERIC_CLASSES[kind]


def build_code_regex(
    pattern: CompiledPattern, config: GenerationConfig
) -> tuple[re.Pattern[str], dict[str, PlaceholderKind]]:
    """Return the anchored regex for pattern and a map of group name -> kind.

    Only the first occurrence of each kind is mapped; later occurrences get
    numbered group names so the expression stays valid.
    """
    parts: list[str] = []
    groups: dict[str, PlaceholderKind] = {}
    seen: dict[PlaceholderKind, int] = {}
    for segment in pattern.segments:
        if isinstance(segment, LiteralSegment):
            parts.append(re.escape(segment.text))
            continue
        if segment.kind is PlaceholderKind.SEQUENCE and not config.use_sequence:
            # Formatter removes SEQUENCE when sequencing is inactive.
            continue
        count = seen.get(segment.kind, 0) + 1
        seen[segment.kind] = count
        name = segment.kind.value.lower()
        if count == 1:
            groups[name] = segment.kind
        else:
            name = f"{name}_{count}"
        parts.append(f"(?P<{name}>{_group_body(segment, config)})")
    return re.compile(r"\A" + "".join(parts) + r"\Z", re.ASCII), groups


def parse_code(
    pattern: CompiledPattern, code: str, config: GenerationConfig
) -> dict[PlaceholderKind, str]:
    """Extract placeholder values from code.

    Args:
        pattern: Compiled pattern the code was generated from.
        code: Candidate code.
        config: Effective configuration (formats, sequencing, type, location).

    Returns:
        Dict of kind -> captured string for kinds present in the pattern, with
        TYPE and LOCATION back-filled from config when absent.

    Raises:
        PatternMismatchException: If code does not match the pattern.
    """
    regex, groups = build_code_regex(pattern, config)
    match = regex.fullmatch(code)
    if not match:
        raise PatternMismatchException(code, pattern.template)
    components = {kind: match.group(name) for name, kind in groups.items()}
    components.setdefault(PlaceholderKind.TYPE, config.type_code)
    components.setdefault(PlaceholderKind.LOCATION, config.location_code)
    return components
