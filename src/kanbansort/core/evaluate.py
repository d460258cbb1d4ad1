"""Gather rule evaluation - pure, no I/O."""

from datetime import date

from . import dates
from .facts import CardFacts
from .rules import ColumnRuleSet, Field, Op, RuleAtom, RuleClause


def matches(rule_set: ColumnRuleSet, facts: CardFacts, today: date) -> bool:
    """True iff any clause of the rule set matches. An empty rule set never matches."""
    return any(clause_matches(c, facts, today) for c in rule_set.clauses)


def clause_matches(clause: RuleClause, facts: CardFacts, today: date) -> bool:
    return all(atom_matches(a, facts, today) for a in clause.atoms)


def atom_matches(atom: RuleAtom, facts: CardFacts, today: date) -> bool:
    """
    Evaluate one atom against a card.

    Date atoms on a card without a due date are false, negated or not.
    """
    if atom.field is Field.PERSON:
        wanted = str(atom.value).lower()
        present = any(p.lower() == wanted for p in facts.persons)
        return present != atom.negated

    if facts.due_date is None:
        return False

    actual = field_value(atom.field, facts.due_date, today)
    return _compare(actual, atom.op, atom.value) != atom.negated


def field_value(which: Field, due: date, today: date) -> int | str:
    """Derived value of a date field for a due date, relative to today."""
    match which:
        case Field.DAY_OFFSET:
            return dates.day_offset(due, today)
        case Field.WEEKDAY:
            return dates.weekday_abbrev(due)
        case Field.WEEKDAY_NUM:
            return dates.weekday_num(due)
        case Field.MONTH:
            return dates.month_abbrev(due)
        case Field.MONTH_NUM:
            return due.month
    raise ValueError(f"Not a date field: {which}")


def _compare(actual: int | str, op: Op, expected: int | str) -> bool:
    match op:
        case Op.EQ:
            return actual == expected
        case Op.NOT_EQ:
            return actual != expected
        case Op.LT:
            return actual < expected
        case Op.GT:
            return actual > expected
    return False
