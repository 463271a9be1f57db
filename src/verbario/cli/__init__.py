"""Command-line interface for verbario."""
