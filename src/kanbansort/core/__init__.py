"""Functional core - pure classification logic with no I/O."""

from .board import Board, Card, Column
from .facts import CardFacts, extract
from .rules import ColumnRuleSet, Diagnostic, RuleAtom, RuleClause, parse_column_rules
from .evaluate import matches
from .sorting import Placement, SortPlan, apply_plan, sort_board

__all__ = [
    # Board
    "Board",
    "Card",
    "Column",
    # Facts
    "CardFacts",
    "extract",
    # Rules
    "ColumnRuleSet",
    "Diagnostic",
    "RuleAtom",
    "RuleClause",
    "parse_column_rules",
    "matches",
    # Sorting
    "Placement",
    "SortPlan",
    "apply_plan",
    "sort_board",
]
