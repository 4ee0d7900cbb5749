"""Helpers shared by the Spark Dataset workshop notebooks."""

__version__ = "0.1.0"
