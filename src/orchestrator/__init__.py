"""Engine routing and the editor's structured event log."""

__all__ = ["log", "router"]
