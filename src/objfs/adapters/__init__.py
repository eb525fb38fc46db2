"""Concrete adapters for objfs ports."""
