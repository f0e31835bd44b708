"""Automatic ``@types/*`` installation for imported JavaScript modules."""

__version__ = "0.1.0"
