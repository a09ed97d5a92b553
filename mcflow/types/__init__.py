"""Shared type aliases, result containers and enums."""
