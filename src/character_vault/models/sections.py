"""Section catalogue and the tagged section-value variant."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from character_vault.models.character import Character
    from character_vault.models.snapshot import SnapshotPayload


class Section(StrEnum):
    """Logical sections of a character card, in declared diff order."""

    IMAGE = "image"
    NAME = "name"
    DESCRIPTION = "description"
    PERSONALITY = "personality"
    SCENARIO = "scenario"
    FIRST_MES = "first_mes"
    MES_EXAMPLE = "mes_example"
    SYSTEM_PROMPT = "system_prompt"
    POST_HISTORY_INSTRUCTIONS = "post_history_instructions"
    ALTERNATE_GREETINGS = "alternate_greetings"
    PHYSICAL_DESCRIPTION = "physical_description"
    LOREBOOK = "lorebook"
    CREATOR = "creator"
    CREATOR_NOTES = "creator_notes"
    TAGS = "tags"
    CHARACTER_VERSION = "character_version"
    EXTENSIONS = "extensions"
    AVATAR = "avatar"


class SectionKind(StrEnum):
    TEXT = "text"
    LIST = "list"
    RECORD = "record"
    IMAGE = "image"


@dataclass(frozen=True)
class SectionMeta:
    section: Section
    label: str
    kind: SectionKind


SECTIONS: tuple[SectionMeta, ...] = (
    SectionMeta(Section.IMAGE, "Image", SectionKind.IMAGE),
    SectionMeta(Section.NAME, "Name", SectionKind.TEXT),
    SectionMeta(Section.DESCRIPTION, "Description", SectionKind.TEXT),
    SectionMeta(Section.PERSONALITY, "Personality", SectionKind.TEXT),
    SectionMeta(Section.SCENARIO, "Scenario", SectionKind.TEXT),
    SectionMeta(Section.FIRST_MES, "First Message", SectionKind.TEXT),
    SectionMeta(Section.MES_EXAMPLE, "Examples", SectionKind.TEXT),
    SectionMeta(Section.SYSTEM_PROMPT, "System", SectionKind.TEXT),
    SectionMeta(Section.POST_HISTORY_INSTRUCTIONS, "Post-History", SectionKind.TEXT),
    SectionMeta(Section.ALTERNATE_GREETINGS, "Greetings", SectionKind.LIST),
    SectionMeta(Section.PHYSICAL_DESCRIPTION, "Appearance", SectionKind.TEXT),
    SectionMeta(Section.LOREBOOK, "Lorebook", SectionKind.RECORD),
    SectionMeta(Section.CREATOR, "Creator", SectionKind.TEXT),
    SectionMeta(Section.CREATOR_NOTES, "Creator Notes", SectionKind.TEXT),
    SectionMeta(Section.TAGS, "Tags", SectionKind.LIST),
    SectionMeta(Section.CHARACTER_VERSION, "Version", SectionKind.TEXT),
    SectionMeta(Section.EXTENSIONS, "Extensions", SectionKind.RECORD),
    SectionMeta(Section.AVATAR, "Avatar URL", SectionKind.TEXT),
)

_META_BY_SECTION = {meta.section: meta for meta in SECTIONS}


def section_meta(section: Section) -> SectionMeta:
    return _META_BY_SECTION[section]


class TextValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str | None = None


class ListValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    items: list[str] | None = None


class RecordValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["record"] = "record"
    record: dict[str, Any] | None = None


class ImageValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    reference: str | None = None


SectionValue = Annotated[
    TextValue | ListValue | RecordValue | ImageValue,
    Field(discriminator="kind"),
]


def read_section(document: Character | SnapshotPayload, section: Section) -> Any:
    """Return the raw stored value of a section as plain JSON-like data.

    Both the live ``Character`` and a ``SnapshotPayload`` expose ``image_data``
    and ``data``, so one accessor serves either side of a diff.
    """
    if section == Section.IMAGE:
        return document.image_data
    if section == Section.LOREBOOK:
        book = document.data.character_book
        return book.model_dump(mode="json", exclude_none=True) if book else None
    if section == Section.EXTENSIONS:
        return dict(document.data.extensions)
    value = getattr(document.data.spec, section.value)
    return list(value) if isinstance(value, list) else value
