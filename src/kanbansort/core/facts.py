"""Card attribute extraction - pure, no I/O.

A card carries facts as ``@`` tags inside its text:

    @2025-03-11          due date
    @done=2025-03-12     typed date (``due``, ``done``, ``start``, ...)
    @Reto                person
    @sticky              never moved by a sort pass
"""

import re
from dataclasses import dataclass, field
from datetime import date

from .dates import parse_date_shape

DUE = "due"
STICKY = "sticky"

_TAG = re.compile(r"@(\S+)")
_TYPED_DATE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)[=:](.+)$")


@dataclass
class CardFacts:
    """Attributes extracted from one card's text."""

    due_date: date | None = None
    other_dates: dict[str, date] = field(default_factory=dict)
    persons: set[str] = field(default_factory=set)
    sticky: bool = False

    @property
    def has_attributes(self) -> bool:
        """A card is eligible for sorting only with a due date or a person."""
        return self.due_date is not None or bool(self.persons)


def iter_tags(text: str) -> list[str]:
    """
    Tag bodies (without ``@``) in text order.

    A tag starts at any ``@`` and runs to the next whitespace, so ``(@Karl)``
    gives ``Karl)`` and ``@a@b`` gives ``a@b``.
    """
    return _TAG.findall(text)


def extract(text: str) -> CardFacts:
    """
    Build the fact set for a card.

    Only the first occurrence of each date type is kept; later duplicates
    are ignored. A tag with a date-like value that is not a real date is
    treated as a person tag.
    """
    facts = CardFacts()

    for tag in iter_tags(text or ""):
        if tag == STICKY:
            facts.sticky = True
            continue

        bare = parse_date_shape(tag)
        if bare is not None:
            _add_date(facts, DUE, bare)
            continue

        m = _TYPED_DATE.match(tag)
        if m:
            typed = parse_date_shape(m.group(2))
            if typed is not None:
                _add_date(facts, m.group(1).lower(), typed)
                continue

        facts.persons.add(tag)

    return facts


def _add_date(facts: CardFacts, kind: str, value: date) -> None:
    if kind == DUE:
        if facts.due_date is None:
            facts.due_date = value
        return
    facts.other_dates.setdefault(kind, value)
