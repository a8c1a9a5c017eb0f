"""Code formatting: compiled pattern + timestamp + sequence -> concrete code."""

from datetime import datetime

from codegen.application.dtos.generation import GenerationConfig
from codegen.application.interfaces.services import IEntropySource
from codegen.application.services.date_format import format_datetime
from codegen.domain.enums import PlaceholderKind
from codegen.domain.value_objects import CompiledPattern, LiteralSegment, Placeholder


class CodeFormatter:
    """Substitutes each placeholder of a compiled pattern.

    Pure given its inputs apart from RANDOM and UUID, which draw fresh values
    from the entropy source on every call and are never checked for collisions.
    """

    def __init__(self, entropy: IEntropySource) -> None:
        self.entropy = entropy

    def format(
        self,
        pattern: CompiledPattern,
        config: GenerationConfig,
        now: datetime,
        sequence: int,
    ) -> str:
        """Render pattern into a code.

        Args:
            pattern: Compiled pattern to render.
            config: Effective configuration (type, location, formats, widths).
            now: Timestamp for DATE and TIME placeholders.
            sequence: Reserved sequence value; ignored when sequencing is off.

        Returns:
            Formatted code (before length normalization).
        """
        parts: list[str] = []
        for segment in pattern.segments:
            if isinstance(segment, LiteralSegment):
                parts.append(segment.text)
            else:
                parts.append(self._render(segment, config, now, sequence))
        return "".join(parts)

    def _render(
        self,
        placeholder: Placeholder,
        config: GenerationConfig,
        now: datetime,
        sequence: int,
    ) -> str:
        kind = placeholder.kind
        if kind is PlaceholderKind.TYPE:
            return config.type_code
        if kind is PlaceholderKind.LOCATION:
            return config.location_code
        if kind in (PlaceholderKind.DATE, PlaceholderKind.TIME):
            return format_datetime(now, config.date_format_for(kind, placeholder.param))
        if kind is PlaceholderKind.SEQUENCE:
            # Unresolved tokens never leak into codes when sequencing is off.
            if not config.use_sequence:
                return ""
            width = placeholder.width or config.sequence_length
            return str(sequence).zfill(width)
        if kind is PlaceholderKind.RANDOM:
            return self.entropy.random_string(placeholder.width or 0)
        return self.entropy.uuid4()
