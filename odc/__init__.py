"""odc: developer CLI for an Obsidian plugin project."""

__version__ = "0.1.0"
