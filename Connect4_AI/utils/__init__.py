"""CLI, logging, timing, and settings helpers."""
