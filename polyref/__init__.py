"""Core data model for validating cross-artifact refactorings."""

__version__ = "0.1.0"