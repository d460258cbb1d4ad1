"""Board store interface."""

from typing import Protocol

from kanbansort.core.board import Board


class BoardStore(Protocol):
    """Interface for reading and writing a board from any backend."""

    def load(self) -> Board:
        """Read the current board snapshot."""
        ...

    def save(self, board: Board) -> None:
        """Persist a board."""
        ...
