"""Character document model — the live card edited by the author."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from character_vault.models.base import DocumentBase

LorebookPosition = Literal["before_char", "after_char", "before_example", "after_example"]


class LorebookEntry(BaseModel):
    """A single lore entry triggered by its keys."""

    id: int
    keys: list[str] = Field(default_factory=list)
    content: str = ""
    extensions: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    insertion_order: int = 0
    case_sensitive: bool = False
    name: str | None = None
    priority: int | None = None
    comment: str | None = None
    selective: bool | None = None
    secondary_keys: list[str] | None = None
    constant: bool | None = None
    position: LorebookPosition | None = None


class CharacterBook(BaseModel):
    """Lorebook attached to a character."""

    name: str | None = None
    description: str | None = None
    scan_depth: int | None = None
    token_budget: int | None = None
    recursive_scanning: bool | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)
    entries: list[LorebookEntry] = Field(default_factory=list)


class CharacterSpec(BaseModel):
    """Card spec fields (v2 plus the optional v3 additions)."""

    name: str = ""
    description: str = ""
    personality: str = ""
    scenario: str = ""
    first_mes: str = ""
    mes_example: str = ""
    system_prompt: str = ""
    post_history_instructions: str = ""
    alternate_greetings: list[str] = Field(default_factory=list)
    physical_description: str = ""
    avatar: str | None = None
    creator_notes: str | None = None
    creator: str | None = None
    character_version: str | None = None
    tags: list[str] | None = None


class CharacterData(BaseModel):
    spec: CharacterSpec = Field(default_factory=CharacterSpec)
    character_book: CharacterBook | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)


class Character(DocumentBase):
    """The live character record owned by the editing surface."""

    name: str = ""
    image_data: str = ""
    data: CharacterData = Field(default_factory=CharacterData)
    version: int = 1
    last_opened_at: str | None = None
