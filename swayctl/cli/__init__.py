"""Command-line interface for swayctl."""
