"""Ports - interfaces/protocols for external dependencies."""

from .board_store import BoardStore

__all__ = [
    "BoardStore",
]
