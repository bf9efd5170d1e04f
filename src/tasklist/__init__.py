"""tasklist - a small persistent task list manager."""

__version__ = "0.1.0"
