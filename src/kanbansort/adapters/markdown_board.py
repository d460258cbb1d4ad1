"""Markdown kanban file adapter."""

import logging
from pathlib import Path

from kanbansort.core.board import Board, Card, Column

logger = logging.getLogger(__name__)


class BoardFileError(RuntimeError):
    """Raised when a board file cannot be read or written."""


def parse_markdown(content: str) -> Board:
    """
    Parse kanban markdown into a board.

    Recognised structure: optional ``---`` YAML front matter, ``# Title``,
    ``## Column`` headings, ``- [ ] card`` items followed by indented
    description lines, and a trailing ``%%`` footer. Front matter and footer
    are kept verbatim. Ids are derived from position so re-reading an
    unchanged file gives the same ids.
    """
    board = Board()
    lines = content.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    column: Column | None = None
    card: Card | None = None
    description: list[str] = []
    yaml_lines: list[str] = []
    footer_lines: list[str] = []
    in_yaml = False

    def finish_card() -> None:
        nonlocal card, description
        if card is not None and column is not None:
            card.description = "\n".join(description).rstrip()
            column.cards.append(card)
        card = None
        description = []

    for i, line in enumerate(lines):
        if footer_lines:
            footer_lines.append(line)
            continue

        if line.startswith("---") and (i == 0 or in_yaml):
            yaml_lines.append(line)
            if in_yaml:
                board.yaml_header = "\n".join(yaml_lines)
                in_yaml = False
            else:
                in_yaml = True
            continue
        if in_yaml:
            yaml_lines.append(line)
            continue

        if line.startswith("%%"):
            finish_card()
            footer_lines.append(line)
            continue

        if line.startswith("# ") and not board.title:
            finish_card()
            board.title = line[2:].strip()
            continue

        if line.startswith("## "):
            finish_card()
            column = Column(id=f"col-{len(board.columns) + 1}", title=line[3:].strip())
            board.columns.append(column)
            continue

        if line.startswith("- "):
            finish_card()
            if column is None:
                logger.debug(f"Skipping card outside any column: {line!r}")
                continue
            title = line[2:].strip()
            done = False
            if title.startswith("[ ] ") or title.startswith("[x] "):
                done = title[1] == "x"
                title = title[4:].strip()
            card = Card(id=f"{column.id}-card-{len(column.cards) + 1}", title=title, done=done)
            continue

        if card is not None:
            description.append(line.lstrip())

    finish_card()

    if in_yaml:
        logger.warning("Unterminated YAML front matter; keeping it as-is")
        board.yaml_header = "\n".join(yaml_lines)
    if footer_lines:
        board.footer = "\n".join(footer_lines)

    return board


def render_markdown(board: Board) -> str:
    """Regenerate kanban markdown for a board."""
    out = ""

    if board.yaml_header:
        out += board.yaml_header + "\n\n"

    if board.title:
        out += f"# {board.title}\n\n"

    for column in board.columns:
        out += f"## {column.title}\n"
        for card in column.cards:
            box = "[x]" if card.done else "[ ]"
            out += f"- {box} {card.title}\n"
            if card.description.strip():
                for desc_line in card.description.split("\n"):
                    out += f"  {desc_line}\n"
        out += "\n"

    if board.footer:
        if out.endswith("\n\n"):
            out = out[:-1]
        out += board.footer
        if not board.footer.endswith("\n"):
            out += "\n"
    else:
        out = out.rstrip() + "\n"

    return out


class MarkdownBoardStore:
    """
    Markdown file board storage.

    Implements BoardStore protocol for a single ``.md`` kanban file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> Board:
        """Read and parse the board file."""
        if not self.path.exists():
            raise BoardFileError(f"Board file not found: {self.path}")
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise BoardFileError(f"Cannot read {self.path}: {e}") from e
        return parse_markdown(content)

    def save(self, board: Board) -> None:
        """Overwrite the board file with the rendered board."""
        try:
            self.path.write_text(render_markdown(board), encoding="utf-8")
        except OSError as e:
            raise BoardFileError(f"Cannot write {self.path}: {e}") from e
