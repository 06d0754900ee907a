"""Command-line interface for odc."""
