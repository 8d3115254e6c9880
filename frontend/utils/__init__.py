"""Shared utilities for the frontend package."""

__all__ = ["fs"]
