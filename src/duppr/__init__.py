"""Duplicate a GitHub pull request onto another target branch."""

__version__ = "0.1.0"
