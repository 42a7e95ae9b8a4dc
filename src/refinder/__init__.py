"""Live zone, loot and inventory tracker for persisted game sessions."""

__version__ = "0.3.0"
