"""Tests for the shared workflow layer."""

import logging
from datetime import date
from unittest.mock import MagicMock

import pytest

from kanbansort.config import Config
from kanbansort.core.board import Board, Card, Column
from kanbansort.workflows import board_facts, board_rules, get_store, plan_sort, run_sort

BOARD = """## Todo
- [ ] Ship @2025-03-11
- [ ] Call @Reto
  @2025-03-10
- [ ] Plain

## Tomorrow #gather_day=1

## Reto Mondays #gather_reto&weekday=mon #gather_color=red
"""


@pytest.fixture
def today():
    return date(2025, 3, 10)


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.md"
    path.write_text(BOARD)
    return path


class TestPlanSort:
    def test_does_not_write(self, board_file, today):
        board, plan = plan_sort(get_store(board_file), Config(), today)
        assert [m.target_column_id for m in plan.moves()] == ["col-2", "col-3"]
        assert board_file.read_text() == BOARD

    def test_title_only_tag_source(self, board_file, today):
        _, plan = plan_sort(get_store(board_file), Config(tag_source="title"), today)
        assert [m.card_id for m in plan.moves()] == ["col-1-card-1"]

    def test_logs_diagnostics(self, board_file, today, caplog):
        with caplog.at_level(logging.WARNING, logger="kanbansort.workflows"):
            plan_sort(get_store(board_file), Config(), today)
        assert "unknown field 'color'" in caplog.text

    def test_defaults_to_today(self):
        store = MagicMock()
        store.load.return_value = Board()
        _, plan = plan_sort(store, Config())
        assert plan.placements == []


class TestRunSort:
    def test_write_moves_cards(self, board_file, today):
        run_sort(get_store(board_file), Config(), today, write=True)
        assert board_file.read_text() == (
            "## Todo\n"
            "- [ ] Plain\n"
            "\n"
            "## Tomorrow #gather_day=1\n"
            "- [ ] Ship @2025-03-11\n"
            "\n"
            "## Reto Mondays #gather_reto&weekday=mon #gather_color=red\n"
            "- [ ] Call @Reto\n"
            "  @2025-03-10\n"
        )

    def test_saves_through_store(self, today):
        store = MagicMock()
        store.load.return_value = Board(
            columns=[Column("a", "Todo", [Card("1", "@Karl")]), Column("b", "K #gather_karl")]
        )
        board, plan = run_sort(store, Config(), today, write=True)

        store.save.assert_called_once_with(board)
        assert [c.id for c in board.columns[1].cards] == ["1"]

    def test_no_write_no_save(self, today):
        store = MagicMock()
        store.load.return_value = Board()
        run_sort(store, Config(), today)
        store.save.assert_not_called()


class TestInspection:
    def test_board_facts(self, board_file):
        board = get_store(board_file).load()
        rows = board_facts(board, Config())
        assert [(card.title, sorted(f.persons)) for _, card, f in rows] == [
            ("Ship @2025-03-11", []),
            ("Call @Reto", ["Reto"]),
            ("Plain", []),
        ]
        assert rows[1][2].due_date == date(2025, 3, 10)

    def test_board_rules(self, board_file):
        board = get_store(board_file).load()
        described = [(column.id, rules.describe()) for column, rules in board_rules(board)]
        assert described == [
            ("col-1", ""),
            ("col-2", "dayoffset=1"),
            ("col-3", "reto&weekday=mon"),
        ]
