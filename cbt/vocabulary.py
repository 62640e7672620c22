"""The closed set of words the language understands.

Lookup is case-insensitive and exact: no abbreviations, no fuzzy matching.
"""
from enum import Enum
from typing import Dict, Optional, Union

import attr

from .ast import Span
from .errors import UnknownKeyword


class Keyword(Enum):
    DEFINE = "define"
    MODULE = "module"
    FUNCTION = "function"
    CALL = "call"
    EQUAL = "equal"
    ARGUMENT = "argument"
    THE = "the"
    WITH = "with"
    CONTENTS = "contents"
    CONTAINS = "contains"
    END = "end"
    IS = "is"
    TO = "to"
    SET = "set"
    A = "a"
    EXPECTS = "expects"
    THAT = "that"
    RETURNS = "returns"
    DISPLAY = "display"
    IF = "if"
    THEN = "then"
    DO = "do"
    TRUE = "true"
    FALSE = "false"
    BEGIN = "begin"
    PROGRAM = "program"

    def __str__(self) -> str:
        return render(self)


@attr.s(auto_attribs=True, frozen=True)
class Word:
    """A recognized keyword as it appeared in the source."""

    which: Keyword
    # reserved for plural detection, always False for now
    plural: bool = False


_SPELLINGS: Dict[str, Keyword] = {kw.value: kw for kw in Keyword}


def lookup(text: str) -> Optional[Keyword]:
    return _SPELLINGS.get(text.lower())


def resolve(text: str, span: Optional[Span] = None) -> Word:
    """Resolve a run of letters to a word.

    Parameters
    ----------
    text : str
        The letters as written in the source, in any case.
    span : Optional[Span]
        Where the letters came from, reported if the lookup fails.

    Raises
    ------
    UnknownKeyword
        If `text` is not a keyword.
    """
    keyword = lookup(text)
    if keyword is None:
        raise UnknownKeyword(text, span)
    return Word(keyword)


def render(word: Union[Word, Keyword]) -> str:
    """Canonical uppercase spelling of a word."""
    if isinstance(word, Word):
        word = word.which
    return word.value.upper()
