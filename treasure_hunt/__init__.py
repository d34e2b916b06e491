"""Treasure hunts kept on disk, with a manager, a score calculator, a monitor and a hub."""

__version__ = "0.1.0"