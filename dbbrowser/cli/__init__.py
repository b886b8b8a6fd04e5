"""Command line interface for DB Browser."""
