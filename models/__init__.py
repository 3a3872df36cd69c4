"""Data models."""

from models.record import Record

__all__ = ["Record"]
