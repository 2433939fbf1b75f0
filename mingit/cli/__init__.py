"""Command-line interface for mingit."""
