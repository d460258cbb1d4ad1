"""Tests for gather rule compilation."""

import pytest

from kanbansort.core.rules import (
    Field,
    Op,
    RuleAtom,
    RuleClause,
    RuleSyntaxError,
    parse_atom,
    parse_column_rules,
    parse_expression,
)


class TestParseAtom:
    def test_person(self):
        assert parse_atom("reto") == RuleAtom(Field.PERSON, Op.EQ, "reto")

    def test_negated_person(self):
        assert parse_atom("!reto") == RuleAtom(Field.PERSON, Op.EQ, "reto", negated=True)

    def test_double_negation(self):
        assert parse_atom("!!reto").negated is False

    @pytest.mark.parametrize(
        "text, atom",
        [
            ("dayoffset=1", RuleAtom(Field.DAY_OFFSET, Op.EQ, 1)),
            ("day<-2", RuleAtom(Field.DAY_OFFSET, Op.LT, -2)),
            ("day>+3", RuleAtom(Field.DAY_OFFSET, Op.GT, 3)),
            ("weekdaynum!=7", RuleAtom(Field.WEEKDAY_NUM, Op.NOT_EQ, 7)),
            ("monthnum=12", RuleAtom(Field.MONTH_NUM, Op.EQ, 12)),
            ("weekday=Mon", RuleAtom(Field.WEEKDAY, Op.EQ, "mon")),
            ("month!=dec", RuleAtom(Field.MONTH, Op.NOT_EQ, "dec")),
            ("WeekDay=fri", RuleAtom(Field.WEEKDAY, Op.EQ, "fri")),
        ],
    )
    def test_field_atoms(self, text, atom):
        assert parse_atom(text) == atom

    def test_negated_field(self):
        assert parse_atom("!weekday=mon") == RuleAtom(Field.WEEKDAY, Op.EQ, "mon", negated=True)

    def test_reversed_range_flips_operator(self):
        assert parse_atom("0<day") == RuleAtom(Field.DAY_OFFSET, Op.GT, 0)
        assert parse_atom("5>dayoffset") == RuleAtom(Field.DAY_OFFSET, Op.LT, 5)

    @pytest.mark.parametrize(
        "text",
        [
            "color=red",  # unknown field
            "day=soon",  # non-integer on numeric field
            "weekday<3",  # comparison on name field
            "month>jan",
            "weekday=funday",  # unknown abbreviation
            "day=",  # missing value
            "!",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(RuleSyntaxError):
            parse_atom(text)


class TestParseExpression:
    def test_or_of_and(self):
        clauses, diagnostics = parse_expression("reto&weekday=mon|karl")
        assert diagnostics == []
        assert clauses == [
            RuleClause((RuleAtom(Field.PERSON, Op.EQ, "reto"), RuleAtom(Field.WEEKDAY, Op.EQ, "mon"))),
            RuleClause((RuleAtom(Field.PERSON, Op.EQ, "karl"),)),
        ]

    def test_malformed_clause_dropped(self):
        clauses, diagnostics = parse_expression("karl|color=red&bruno|day=1")
        assert [c.describe() for c in clauses] == ["karl", "dayoffset=1"]
        assert len(diagnostics) == 1
        assert diagnostics[0].tag == "#gather_karl|color=red&bruno|day=1"
        assert "unknown field 'color'" in diagnostics[0].reason

    def test_empty_segments_ignored(self):
        clauses, diagnostics = parse_expression("karl||bruno&")
        assert [c.describe() for c in clauses] == ["karl", "bruno"]
        assert diagnostics == []

    def test_empty_expression(self):
        clauses, diagnostics = parse_expression("", tag="#gather_")
        assert clauses == []
        assert diagnostics[0].reason == "empty gather expression"


class TestParseColumnRules:
    def test_no_tags(self):
        rules = parse_column_rules("Backlog")
        assert rules.is_empty
        assert not rules.is_fallback
        assert rules.orders == []

    def test_multiple_gather_tags_are_ored(self):
        split = parse_column_rules("Team #gather_karl #gather_bruno&day<0")
        joined = parse_column_rules("Team #gather_karl|bruno&day<0")
        assert split.clauses == joined.clauses
        assert split.describe() == "karl|bruno&dayoffset<0"

    def test_prefix_is_case_sensitive(self):
        assert parse_column_rules("#Gather_karl #GATHER_bruno").is_empty

    def test_fallback_tags(self):
        assert parse_column_rules("Inbox #ungathered").is_ungathered
        assert parse_column_rules("Inbox #unsorted").is_unsorted
        assert parse_column_rules("Inbox #unsorted").is_fallback

    def test_fallback_tag_must_be_exact(self):
        assert not parse_column_rules("Inbox #ungathered_stuff").is_fallback

    def test_order_tags_kept_in_header_order(self):
        assert parse_column_rules("Done #sort-byname #sort-bydate").orders == ["byname", "bydate"]
        assert parse_column_rules("Done #sort-random").orders == []

    def test_fallback_tag(self):
        assert parse_column_rules("Inbox #ungathered").fallback_tag == "#ungathered"
        assert parse_column_rules("Inbox #unsorted").fallback_tag == "#unsorted"
        assert parse_column_rules("Inbox").fallback_tag is None

    def test_diagnostics_collected(self):
        rules = parse_column_rules("X #gather_day=soon #gather_karl")
        assert rules.describe() == "karl"
        assert [str(d) for d in rules.diagnostics] == [
            "#gather_day=soon: clause 'day=soon' dropped: 'day' expects an integer, got 'soon'"
        ]

    def test_never_raises(self):
        rules = parse_column_rules("#gather_!=& #gather_<> #gather_=")
        assert rules.is_empty
        assert len(rules.diagnostics) == 3
