"""Utility functions for the Docker tag poller."""

from .version import biggest, expand, latest_of

__all__ = ["biggest", "expand", "latest_of"]
