"""Helper functions offered to document templates."""

from __future__ import annotations

import re
import string
from collections.abc import Callable, Mapping
from typing import Any, Optional
from urllib.parse import quote

from .cardinality import Cardinality

__all__ = [
    "nl2br",
    "nl2br_slash",
    "nl2mdnl",
    "nl2space",
    "escape_nl",
    "escape_double_quote",
    "show_only_first_paragraph",
    "label_join",
    "escape_url",
    "escape_mermaid",
    "left_cardinality",
    "right_cardinality",
    "template_functions",
]

_NEWLINE = re.compile(r"\r\n|\n|\r")
_MERMAID_UNSAFE = re.compile(r"[^a-zA-Z0-9_\-]")
_URL_PIECE = re.compile(r"%[0-9A-Fa-f]{2}|.", re.DOTALL)
_URL_SAFE = frozenset(string.ascii_letters + string.digits + ";/?:@&=+$,-_.!~*'()#")


def _replace_newlines(text: str, replacement: str) -> str:
    return _NEWLINE.sub(lambda _: replacement, text)


def nl2br(text: str) -> str:
    return _replace_newlines(text, "<br>")


def nl2br_slash(text: str) -> str:
    return _replace_newlines(text, "<br />")


def nl2mdnl(text: str) -> str:
    """Turn newlines into markdown hard line breaks."""
    return _replace_newlines(text, "  \n")


def nl2space(text: str) -> str:
    return _replace_newlines(text, " ")


def escape_nl(text: str) -> str:
    return _replace_newlines(text, "\\n")


def escape_double_quote(text: str) -> str:
    return text.replace('"', "#quot;")


def show_only_first_paragraph(text: str) -> str:
    """Return the text up to the first blank line."""
    for separator in ("\r\n\r\n", "\r\r"):
        if separator in text:
            return text.split(separator, 1)[0]
    return text.split("\n\n", 1)[0]


def label_join(labels) -> str:
    """Join label names as backquoted words separated by spaces."""
    names = [label.name for label in labels or []]
    if not names:
        return ""
    return "`" + "` `".join(names) + "`"


def escape_url(text: str) -> str:
    """Percent-encode a URL, keeping reserved characters and existing escapes."""

    def encode(match: re.Match) -> str:
        piece = match.group(0)
        if len(piece) == 3 or piece in _URL_SAFE:
            return piece
        return quote(piece, safe="")

    return _URL_PIECE.sub(encode, text)


def escape_mermaid(text: str) -> str:
    return _MERMAID_UNSAFE.sub("_", text)


_LEFT = {
    Cardinality.ZERO_OR_ONE: "|o",
    Cardinality.EXACTLY_ONE: "||",
    Cardinality.ZERO_OR_MORE: "}o",
    Cardinality.ONE_OR_MORE: "}|",
}

_RIGHT = {
    Cardinality.ZERO_OR_ONE: "o|",
    Cardinality.EXACTLY_ONE: "||",
    Cardinality.ZERO_OR_MORE: "o{",
    Cardinality.ONE_OR_MORE: "|{",
}


def left_cardinality(cardinality) -> str:
    """Crow's-foot mark for the left end of a relation line."""
    return _LEFT.get(cardinality, "}")


def right_cardinality(cardinality) -> str:
    """Crow's-foot mark for the right end of a relation line."""
    return _RIGHT.get(cardinality, "")


def template_functions(dictionary: Optional[Mapping[str, str]] = None) -> dict[str, Callable[..., Any]]:
    """Return the named helpers; ``lookup`` translates through ``dictionary``."""
    words = dict(dictionary or {})

    def lookup(text: str) -> str:
        return words.get(text, text)

    return {
        "nl2br": nl2br,
        "nl2br_slash": nl2br_slash,
        "nl2mdnl": nl2mdnl,
        "nl2space": nl2space,
        "escape_nl": escape_nl,
        "escape_double_quote": escape_double_quote,
        "show_only_first_paragraph": show_only_first_paragraph,
        "lookup": lookup,
        "label_join": label_join,
        "escape": escape_url,
        "escape_mermaid": escape_mermaid,
        "lcardi": left_cardinality,
        "rcardi": right_cardinality,
    }