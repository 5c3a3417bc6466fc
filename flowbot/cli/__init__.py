"""CLI module for flowbot."""
