"""Cosmos DB access layer."""
