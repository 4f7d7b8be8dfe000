"""Offline character card authoring — snapshot history core."""
