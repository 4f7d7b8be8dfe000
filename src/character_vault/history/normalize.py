"""Canonical string forms of section values for comparison and display."""

from __future__ import annotations

import json
import logging
from typing import Any

from character_vault.history.errors import NormalizationError
from character_vault.models.sections import (
    ImageValue,
    ListValue,
    RecordValue,
    Section,
    SectionKind,
    SectionValue,
    TextValue,
    section_meta,
)

logger = logging.getLogger(__name__)


def to_section_value(section: Section, raw: Any) -> SectionValue:
    """Lift a raw stored value into the tagged variant for its section."""
    kind = section_meta(section).kind
    if kind == SectionKind.TEXT and (raw is None or isinstance(raw, str)):
        return TextValue(text=raw)
    if kind == SectionKind.IMAGE and (raw is None or isinstance(raw, str)):
        return ImageValue(reference=raw)
    if kind == SectionKind.LIST and (
        raw is None
        or (isinstance(raw, list) and all(isinstance(item, str) for item in raw))
    ):
        return ListValue(items=raw)
    if kind == SectionKind.RECORD and (raw is None or isinstance(raw, dict)):
        return RecordValue(record=raw)
    raise NormalizationError(section.value, raw)


def normalize(value: SectionValue) -> str:
    """Return the canonical string for a section value.

    Records serialize with sorted keys and fixed indentation so an unchanged
    value always yields byte-identical output.
    """
    match value:
        case TextValue(text=text):
            return text or ""
        case ListValue(items=items):
            return "\n".join(items or [])
        case ImageValue(reference=reference):
            return reference or ""
        case RecordValue(record=record):
            if not record:
                return ""
            try:
                return json.dumps(record, indent=2, sort_keys=True, ensure_ascii=False)
            except (TypeError, ValueError) as exc:
                raise NormalizationError("record", record) from exc
    raise NormalizationError("unknown", value)


def normalize_section(section: Section, raw: Any) -> str:
    """Normalize a raw stored value, degrading to an empty string if malformed."""
    try:
        return normalize(to_section_value(section, raw))
    except NormalizationError:
        logger.warning(
            "Unrecognized value shape for section=%s, treating as empty",
            section,
            exc_info=True,
        )
        return ""
