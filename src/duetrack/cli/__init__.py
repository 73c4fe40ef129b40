"""Command-line interface for duetrack."""
