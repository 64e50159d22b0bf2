"""Command-line entry point for the subtitle bridge."""
