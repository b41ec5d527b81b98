"""Mod manager that unpacks zip mod archives and sorts their files by JSON configurations."""

__version__ = "0.1.0"