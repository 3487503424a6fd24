"""Climasim HTTP backend."""
