"""Dependency audit tool for npm projects."""

__version__ = "0.1.0"
