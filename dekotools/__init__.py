"""MME macro encoding and header output, engine register definition generators, and binary file helpers."""

__version__ = "1.0.0"