"""Chirpy: a small social-posting API backed by a single JSON file."""

__version__ = "0.1.0"
