"""Shared workflow layer between the CLI and the functional core.

Each function reads the board through a BoardStore, runs one pure core
pass and reports diagnostics through logging.
"""

import logging
from datetime import date
from pathlib import Path

from .adapters.markdown_board import MarkdownBoardStore
from .config import Config
from .core.board import Board, Card, Column
from .core.facts import CardFacts, extract
from .core.rules import ColumnRuleSet
from .core.sorting import (
    SortPlan,
    TextSelector,
    apply_plan,
    card_text,
    compile_board_rules,
    sort_board,
    title_text,
)
from .ports.board_store import BoardStore

logger = logging.getLogger(__name__)


def get_store(path: Path | str) -> MarkdownBoardStore:
    """Board store for a markdown board file."""
    return MarkdownBoardStore(path)


def text_selector(config: Config) -> TextSelector:
    """Which part of a card carries its tags."""
    return card_text if config.include_description else title_text


def plan_sort(store: BoardStore, config: Config, today: date | None = None) -> tuple[Board, SortPlan]:
    """Load the board and compute a sort plan without changing anything."""
    today = today or date.today()
    board = store.load()
    plan = sort_board(board, today, text_for=text_selector(config))

    for column_id, diagnostics in plan.diagnostics.items():
        for d in diagnostics:
            logger.warning(f"Column {column_id}: {d}")
    for move in plan.moves():
        logger.debug(f"Move {move.card_id}: {move.source_column_id} -> {move.target_column_id}")

    return board, plan


def run_sort(
    store: BoardStore,
    config: Config,
    today: date | None = None,
    write: bool = False,
) -> tuple[Board, SortPlan]:
    """Compute a sort plan and, with ``write``, apply it and save the board."""
    board, plan = plan_sort(store, config, today)
    if not write:
        return board, plan

    sorted_board = apply_plan(
        board,
        plan,
        text_for=text_selector(config),
        apply_order=config.apply_column_order,
    )
    store.save(sorted_board)
    logger.info(f"Saved board with {len(plan.moves())} moved card(s)")
    return sorted_board, plan


def board_facts(board: Board, config: Config) -> list[tuple[Column, Card, CardFacts]]:
    """Extracted facts for every card in traversal order."""
    select = text_selector(config)
    return [(column, card, extract(select(card))) for column, card in board.iter_cards()]


def board_rules(board: Board) -> list[tuple[Column, ColumnRuleSet]]:
    """Compiled rule sets for every column in board order."""
    return compile_board_rules(board)
