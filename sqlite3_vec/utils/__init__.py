"""Utility helpers for sqlite3-vec."""

from sqlite3_vec.utils import attempt, logging

__all__ = ("attempt", "logging")
