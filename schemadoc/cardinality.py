"""Relation cardinality values and their accepted spellings."""

from __future__ import annotations

from enum import Enum

__all__ = ["Cardinality", "to_cardinality"]


class Cardinality(str, Enum):
    """How many rows on one side of a relation match a row on the other."""

    ZERO_OR_ONE = "zero_or_one"
    EXACTLY_ONE = "exactly_one"
    ZERO_OR_MORE = "zero_or_more"
    ONE_OR_MORE = "one_or_more"
    UNKNOWN = ""

    def __str__(self) -> str:
        return self.value


_ALIASES: dict[str, Cardinality] = {
    "zero or one": Cardinality.ZERO_OR_ONE,
    "exactly one": Cardinality.EXACTLY_ONE,
    "zero or more": Cardinality.ZERO_OR_MORE,
    "one or more": Cardinality.ONE_OR_MORE,
    "one or zero": Cardinality.ZERO_OR_ONE,
    "zero or many": Cardinality.ZERO_OR_MORE,
    "one or many": Cardinality.ONE_OR_MORE,
    "zero_or_one": Cardinality.ZERO_OR_ONE,
    "exactly_one": Cardinality.EXACTLY_ONE,
    "zero_or_more": Cardinality.ZERO_OR_MORE,
    "one_or_more": Cardinality.ONE_OR_MORE,
    "one_or_zero": Cardinality.ZERO_OR_ONE,
    "zero_or_many": Cardinality.ZERO_OR_MORE,
    "one_or_many": Cardinality.ONE_OR_MORE,
    "many(0)": Cardinality.ZERO_OR_MORE,
    "many(1)": Cardinality.ONE_OR_MORE,
    "0+": Cardinality.ZERO_OR_MORE,
    "1+": Cardinality.ONE_OR_MORE,
    "*": Cardinality.ZERO_OR_MORE,
    "0..*": Cardinality.ZERO_OR_MORE,
    "0..1": Cardinality.ZERO_OR_ONE,
    "1..*": Cardinality.ONE_OR_MORE,
    "1": Cardinality.EXACTLY_ONE,
    "": Cardinality.UNKNOWN,
}


def to_cardinality(value: str) -> Cardinality:
    """Parse a cardinality spelling, case-insensitively.

    Raises ValueError for an unknown spelling.
    """
    try:
        return _ALIASES[value.lower()]
    except KeyError:
        raise ValueError(f"invalid cardinality: {value}") from None