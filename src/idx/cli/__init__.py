"""Command line interface for idx."""
