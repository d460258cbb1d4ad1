"""Gather rule compilation - pure, no I/O.

A column header carries its rules as tags:

    ## Tomorrow #gather_dayoffset=1
    ## Reto on Mondays #gather_reto&weekday=mon
    ## Team #gather_karl|bruno #gather_!reto&day<0
    ## Inbox #ungathered #sort-bydate

Each ``#gather_`` expression is flat disjunctive normal form: ``|`` separates
clauses, ``&`` separates atoms inside a clause. All clauses of all gather
tags in one header are OR'd together.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from .dates import month_index, weekday_index

GATHER_PREFIX = "#gather_"
UNGATHERED_TAG = "#ungathered"
UNSORTED_TAG = "#unsorted"
ORDER_PREFIX = "#sort-"
ORDERS = ("bydate", "byname")


class Field(Enum):
    """Card attribute an atom compares against."""

    PERSON = "person"
    DAY_OFFSET = "dayoffset"
    WEEKDAY = "weekday"
    WEEKDAY_NUM = "weekdaynum"
    MONTH = "month"
    MONTH_NUM = "monthnum"

    @property
    def is_numeric(self) -> bool:
        return self in (Field.DAY_OFFSET, Field.WEEKDAY_NUM, Field.MONTH_NUM)


class Op(Enum):
    EQ = "="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"

    def flipped(self) -> "Op":
        """Operator to use when the operands swap sides (``0<day`` -> ``day>0``)."""
        return {Op.LT: Op.GT, Op.GT: Op.LT}.get(self, self)


FIELD_KEYWORDS = {
    "dayoffset": Field.DAY_OFFSET,
    "day": Field.DAY_OFFSET,
    "weekday": Field.WEEKDAY,
    "weekdaynum": Field.WEEKDAY_NUM,
    "month": Field.MONTH,
    "monthnum": Field.MONTH_NUM,
}

_OPERATOR = re.compile(r"^(.*?)(!=|=|<|>)(.*)$")
_REVERSED = re.compile(r"^([+-]?\d+)([<>])([A-Za-z]+)$")
_INTEGER = re.compile(r"^[+-]?\d+$")


class RuleSyntaxError(ValueError):
    """Raised for a gather atom that cannot be compiled."""


@dataclass(frozen=True)
class RuleAtom:
    """A single field/operator/value comparison, optionally negated."""

    field: Field
    op: Op
    value: int | str
    negated: bool = False

    def describe(self) -> str:
        prefix = "!" if self.negated else ""
        if self.field is Field.PERSON:
            return f"{prefix}{self.value}"
        return f"{prefix}{self.field.value}{self.op.value}{self.value}"


@dataclass(frozen=True)
class RuleClause:
    """Atoms combined by AND."""

    atoms: tuple[RuleAtom, ...]

    def describe(self) -> str:
        return "&".join(a.describe() for a in self.atoms)


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal problem found while compiling a gather tag."""

    tag: str
    reason: str

    def __str__(self) -> str:
        return f"{self.tag}: {self.reason}"


@dataclass
class ColumnRuleSet:
    """Clauses attached to one column, combined by OR."""

    clauses: list[RuleClause] = field(default_factory=list)
    is_ungathered: bool = False
    is_unsorted: bool = False
    orders: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        """``#ungathered`` and ``#unsorted`` both mark the fallback bucket."""
        return self.is_ungathered or self.is_unsorted

    @property
    def fallback_tag(self) -> str | None:
        """The tag that made this column the fallback bucket."""
        if self.is_ungathered:
            return UNGATHERED_TAG
        if self.is_unsorted:
            return UNSORTED_TAG
        return None

    @property
    def is_empty(self) -> bool:
        return not self.clauses

    def describe(self) -> str:
        """Canonical gather expression for the compiled clauses."""
        return "|".join(c.describe() for c in self.clauses)


def parse_column_rules(header_text: str) -> ColumnRuleSet:
    """
    Compile every rule tag in a column header.

    Never raises: malformed clauses are dropped and reported in
    ``diagnostics``.
    """
    rules = ColumnRuleSet()

    for word in (header_text or "").split():
        if word.startswith(GATHER_PREFIX):
            clauses, diagnostics = parse_expression(word[len(GATHER_PREFIX):], tag=word)
            rules.clauses.extend(clauses)
            rules.diagnostics.extend(diagnostics)
        elif word == UNGATHERED_TAG:
            rules.is_ungathered = True
        elif word == UNSORTED_TAG:
            rules.is_unsorted = True
        elif word.startswith(ORDER_PREFIX):
            order = word[len(ORDER_PREFIX):]
            if order in ORDERS:
                rules.orders.append(order)

    return rules


def parse_expression(expr: str, tag: str | None = None) -> tuple[list[RuleClause], list[Diagnostic]]:
    """Split a gather expression into clauses, dropping the ones that fail to compile."""
    tag = tag or f"{GATHER_PREFIX}{expr}"
    clauses: list[RuleClause] = []
    diagnostics: list[Diagnostic] = []

    for clause_text in expr.split("|"):
        atom_texts = [a for a in clause_text.split("&") if a]
        if not atom_texts:
            continue
        try:
            atoms = tuple(parse_atom(a) for a in atom_texts)
        except RuleSyntaxError as e:
            diagnostics.append(Diagnostic(tag, f"clause '{clause_text}' dropped: {e}"))
            continue
        clauses.append(RuleClause(atoms))

    if not clauses and not diagnostics:
        diagnostics.append(Diagnostic(tag, "empty gather expression"))

    return clauses, diagnostics


def parse_atom(text: str) -> RuleAtom:
    """
    Compile one atom.

    ``field<op>value`` for a known field keyword, ``<int><op>field`` for a
    reversed range, anything without an operator is a person name. Leading
    ``!`` negates.
    """
    negated = False
    while text.startswith("!") and not text.startswith("!="):
        negated = not negated
        text = text[1:]
    if not text:
        raise RuleSyntaxError("missing operand after '!'")

    m = _REVERSED.match(text)
    if m:
        value, op, keyword = m.groups()
        return _field_atom(keyword, Op(op).flipped(), value, negated)

    m = _OPERATOR.match(text)
    if m:
        keyword, op, value = m.groups()
        return _field_atom(keyword, Op(op), value, negated)

    return RuleAtom(Field.PERSON, Op.EQ, text, negated)


def _field_atom(keyword: str, op: Op, raw: str, negated: bool) -> RuleAtom:
    found = FIELD_KEYWORDS.get(keyword.lower())
    if found is None:
        raise RuleSyntaxError(f"unknown field '{keyword}'")
    if not raw:
        raise RuleSyntaxError(f"missing value for '{keyword}'")

    if found.is_numeric:
        if not _INTEGER.match(raw):
            raise RuleSyntaxError(f"'{keyword}' expects an integer, got '{raw}'")
        return RuleAtom(found, op, int(raw), negated)

    if op in (Op.LT, Op.GT):
        raise RuleSyntaxError(f"operator '{op.value}' needs a numeric field, not '{keyword}'")

    lookup = weekday_index if found is Field.WEEKDAY else month_index
    if lookup(raw) is None:
        raise RuleSyntaxError(f"unknown {found.value} '{raw}'")
    return RuleAtom(found, op, raw.lower(), negated)
