"""Route group exports."""

from . import editor, entities, health, network, schedules

__all__ = ["editor", "entities", "health", "network", "schedules"]
