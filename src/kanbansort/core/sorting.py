"""Whole-board classification pass - pure, no I/O.

``sort_board`` reads a board snapshot and returns a ``SortPlan``; nothing
is moved until the host calls ``apply_plan``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date

from .board import Board, Card, Column
from .evaluate import matches
from .facts import CardFacts, extract
from .rules import ColumnRuleSet, Diagnostic, parse_column_rules

TextSelector = Callable[[Card], str]


def card_text(card: Card) -> str:
    """Default tag source: title plus description."""
    return card.text(include_description=True)


def title_text(card: Card) -> str:
    return card.text(include_description=False)


@dataclass(frozen=True)
class Placement:
    """Where one card goes. ``target_column_id`` is None when the card stays put."""

    card_id: str
    source_column_id: str
    target_column_id: str | None = None

    @property
    def unchanged(self) -> bool:
        return self.target_column_id is None

    @property
    def is_move(self) -> bool:
        return self.target_column_id is not None and self.target_column_id != self.source_column_id


@dataclass
class SortPlan:
    """Result of one sort pass, in board traversal order."""

    placements: list[Placement] = field(default_factory=list)
    diagnostics: dict[str, list[Diagnostic]] = field(default_factory=dict)

    def moves(self) -> list[Placement]:
        return [p for p in self.placements if p.is_move]

    def target_for(self, card_id: str) -> str | None:
        for p in self.placements:
            if p.card_id == card_id:
                return p.target_column_id
        raise KeyError(card_id)

    @property
    def is_noop(self) -> bool:
        return not self.moves()


def compile_board_rules(board: Board) -> list[tuple[Column, ColumnRuleSet]]:
    """Rule sets for every column, in board order."""
    return [(column, parse_column_rules(column.title)) for column in board.columns]


def sort_board(board: Board, today: date, text_for: TextSelector = card_text) -> SortPlan:
    """
    Classify every card on the board.

    Per card, in traversal order: sticky cards and cards without a due date
    or person stay; otherwise the first column (board order) whose rules
    match wins; unmatched cards go to the fallback column if there is one.

    ``today`` must be read once by the caller and is held for the whole pass.
    """
    plan = SortPlan()
    compiled = compile_board_rules(board)

    fallback: Column | None = None
    for column, rules in compiled:
        if rules.diagnostics:
            plan.diagnostics.setdefault(column.id, []).extend(rules.diagnostics)
        if not rules.is_fallback:
            continue
        if fallback is None:
            fallback = column
        else:
            plan.diagnostics.setdefault(column.id, []).append(
                Diagnostic(rules.fallback_tag, f"ignored: fallback column is already '{fallback.title}'")
            )

    gathering = [(column, rules) for column, rules in compiled if not rules.is_empty]

    for source, card in board.iter_cards():
        facts = extract(text_for(card))
        target = _classify(facts, gathering, fallback, today)
        plan.placements.append(
            Placement(
                card_id=card.id,
                source_column_id=source.id,
                target_column_id=target.id if target else None,
            )
        )

    return plan


def _classify(
    facts: CardFacts,
    gathering: list[tuple[Column, ColumnRuleSet]],
    fallback: Column | None,
    today: date,
) -> Column | None:
    if facts.sticky or not facts.has_attributes:
        return None
    for column, rules in gathering:
        if matches(rules, facts, today):
            return column
    return fallback


def apply_plan(
    board: Board,
    plan: SortPlan,
    text_for: TextSelector = card_text,
    apply_order: bool = True,
) -> Board:
    """
    Return a new board with the plan's moves applied.

    Moved cards are appended to their target column in traversal order.
    With ``apply_order``, columns tagged ``#sort-bydate`` / ``#sort-byname``
    are then reordered, each order tag in header order. The input board is
    left untouched.
    """
    moves = {p.card_id: p.target_column_id for p in plan.moves()}
    kept: dict[str, list[Card]] = {c.id: [] for c in board.columns}
    arriving: dict[str, list[Card]] = {c.id: [] for c in board.columns}

    for column, card in board.iter_cards():
        target = moves.get(card.id)
        if target is not None and target in arriving:
            arriving[target].append(replace(card))
        else:
            kept[column.id].append(replace(card))

    columns = []
    for column in board.columns:
        cards = kept[column.id] + arriving[column.id]
        if apply_order:
            for order in parse_column_rules(column.title).orders:
                cards = order_cards(cards, order, text_for)
        columns.append(replace(column, cards=cards))

    return replace(board, columns=columns)


def order_cards(cards: list[Card], order: str | None, text_for: TextSelector = card_text) -> list[Card]:
    """Stable in-column ordering for ``#sort-bydate`` (undated last) or ``#sort-byname``."""
    if order == "bydate":
        def date_key(card: Card) -> tuple[bool, date]:
            due = extract(text_for(card)).due_date
            return (due is None, due or date.min)

        return sorted(cards, key=date_key)
    if order == "byname":
        return sorted(cards, key=lambda c: c.title.casefold())
    return list(cards)
