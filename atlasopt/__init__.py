"""Rust build optimization tool: project configuration, tool installation and cargo shortcuts."""

__version__ = "0.1.0"