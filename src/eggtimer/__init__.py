"""eggtimer: boiling time estimates and a deadline-anchored countdown."""

__version__ = "0.1.0"
