"""Repository modules for each Cosmos DB container."""

from character_vault.database.repositories.characters import CharacterRepository
from character_vault.database.repositories.snapshots import SnapshotRepository

__all__ = [
    "CharacterRepository",
    "SnapshotRepository",
]
