"""Board snapshot - the read-only input of a sort pass."""

from dataclasses import dataclass, field


@dataclass
class Card:
    """A card on the board."""

    id: str
    title: str
    description: str = ""
    done: bool = False

    def text(self, include_description: bool = True) -> str:
        """Text that carries the card's ``@`` tags."""
        if include_description and self.description:
            return f"{self.title} {self.description}"
        return self.title


@dataclass
class Column:
    """A column; its title holds the gather/ordering tags."""

    id: str
    title: str
    cards: list[Card] = field(default_factory=list)


@dataclass
class Board:
    """Columns in board order, plus the markdown parts the sorter does not touch."""

    columns: list[Column] = field(default_factory=list)
    title: str = ""
    yaml_header: str | None = None
    footer: str | None = None

    def iter_cards(self):
        """Yield (column, card) pairs in board traversal order."""
        for column in self.columns:
            for card in column.cards:
                yield column, card
