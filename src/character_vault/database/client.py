"""Async Cosmos DB client for the character vault database."""

from __future__ import annotations

import logging

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient as AzureCosmosClient
from azure.cosmos.aio import DatabaseProxy

from character_vault.config import CosmosConfig
from character_vault.database.repositories.characters import CharacterRepository
from character_vault.database.repositories.snapshots import SnapshotRepository

logger = logging.getLogger(__name__)

# Container name -> partition key path. Snapshots share a partition per character.
CONTAINERS: dict[str, str] = {
    CharacterRepository.container_name: "/id",
    SnapshotRepository.container_name: "/character_id",
}


class CosmosClient:
    """Owns the SDK client and the vault database handle."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._database: DatabaseProxy | None = None

    async def initialize(self, *, provision: bool = False) -> None:
        """Connect, optionally creating the database and its containers."""
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        if not provision:
            self._database = self._client.get_database_client(self._config.database)
        else:
            self._database = await self._client.create_database_if_not_exists(
                id=self._config.database
            )
            for name, partition_key in CONTAINERS.items():
                await self._database.create_container_if_not_exists(
                    id=name, partition_key=PartitionKey(path=partition_key)
                )
            logger.info("Provisioned containers — %s", ", ".join(CONTAINERS))
        logger.info("Cosmos DB ready — database=%s", self._config.database)

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None

    @property
    def database(self) -> DatabaseProxy:
        if self._database is None:
            raise RuntimeError("Cosmos DB client is not connected")
        return self._database


async def init_database(config: CosmosConfig, *, provision: bool = False) -> CosmosClient:
    """Connect to Cosmos DB; ``provision`` is meant for local development."""
    client = CosmosClient(config)
    await client.initialize(provision=provision)
    return client
