"""kanbansort CLI - gather/sort markdown kanban boards."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.markdown_board import BoardFileError
from .config import Config, load_config
from .workflows import board_facts, board_rules, get_store, plan_sort, run_sort


def _setup_logging(config: Config, debug: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )


@click.group()
@click.version_option(package_name="kanbansort")
def main():
    """kanbansort - tag-driven kanban card sorting."""
    pass


@main.command()
@click.argument("board_path", type=click.Path(dir_okay=False))
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Reference date (default: today's local date)",
)
@click.option("--write", is_flag=True, help="Apply the moves and save the board")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def sort(board_path: str, today, write: bool, as_json: bool, debug: bool):
    """Gather cards into columns by their #gather_ rules."""
    config = load_config()
    _setup_logging(config, debug)
    ref = today.date() if today else date.today()

    store = get_store(board_path)
    try:
        if write:
            board, plan = run_sort(store, config, ref, write=True)
        else:
            board, plan = plan_sort(store, config, ref)
    except BoardFileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    titles = {card.id: card.title for _, card in board.iter_cards()}
    columns = {column.id: column.title for column in board.columns}

    if as_json:
        click.echo(
            json.dumps(
                {
                    "today": ref.isoformat(),
                    "placements": [
                        {
                            "card_id": p.card_id,
                            "title": titles.get(p.card_id, ""),
                            "source": p.source_column_id,
                            "target": p.target_column_id,
                        }
                        for p in plan.placements
                    ],
                    "diagnostics": {
                        column_id: [{"tag": d.tag, "reason": d.reason} for d in diags]
                        for column_id, diags in plan.diagnostics.items()
                    },
                },
                indent=2,
            )
        )
        return

    moves = plan.moves()
    if not moves:
        click.echo("Nothing to move.")
        return

    verb = "Moved" if write else "Would move"
    for move in moves:
        source = columns.get(move.source_column_id, move.source_column_id)
        target = columns.get(move.target_column_id, move.target_column_id)
        click.echo(f"{verb} '{titles.get(move.card_id, move.card_id)}': {source} -> {target}")


@main.command()
@click.argument("board_path", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def facts(board_path: str, as_json: bool):
    """Show the attributes extracted from each card."""
    config = load_config()
    try:
        board = get_store(board_path).load()
    except BoardFileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    rows = board_facts(board, config)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "card_id": card.id,
                        "column": column.title,
                        "title": card.title,
                        "due_date": f.due_date.isoformat() if f.due_date else None,
                        "other_dates": {k: v.isoformat() for k, v in f.other_dates.items()},
                        "persons": sorted(f.persons),
                        "sticky": f.sticky,
                    }
                    for column, card, f in rows
                ],
                indent=2,
            )
        )
        return

    current = None
    for column, card, f in rows:
        if column.id != current:
            if current is not None:
                click.echo()
            click.echo(f"### {column.title}")
            current = column.id

        parts = []
        if f.due_date:
            parts.append(f"due {f.due_date.isoformat()}")
        parts.extend(f"{k} {v.isoformat()}" for k, v in sorted(f.other_dates.items()))
        if f.persons:
            parts.append("persons " + ", ".join(sorted(f.persons)))
        if f.sticky:
            parts.append("sticky")
        click.echo(f"  {card.title}: {'; '.join(parts) or '-'}")


@main.command()
@click.argument("board_path", type=click.Path(dir_okay=False))
def rules(board_path: str):
    """Show the compiled gather rules of each column."""
    try:
        board = get_store(board_path).load()
    except BoardFileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for column, rule_set in board_rules(board):
        flags = []
        if rule_set.is_fallback:
            flags.append("fallback")
        flags.extend(f"sort-{order}" for order in rule_set.orders)
        suffix = f" [{', '.join(flags)}]" if flags else ""
        expr = rule_set.describe() or "-"
        click.echo(f"{column.title}: {expr}{suffix}")
        for d in rule_set.diagnostics:
            click.echo(f"  ! {d}")
