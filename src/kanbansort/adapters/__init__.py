"""Adapters - I/O implementations of ports."""

from .markdown_board import BoardFileError, MarkdownBoardStore

__all__ = [
    "BoardFileError",
    "MarkdownBoardStore",
]
