"""Token definitions shared by the tokenizer and the parser."""
from enum import Enum
from typing import Optional, Sequence

import attr

from .ast import Span
from .vocabulary import Keyword, Word, render


class TokenKind(Enum):
    COLON = ":"
    PERIOD = "."
    SEMICOLON = ";"
    DOLLAR = "$"
    STRING = "string"
    WORD = "word"


PUNCTUATION = {
    ":": TokenKind.COLON,
    ".": TokenKind.PERIOD,
    ";": TokenKind.SEMICOLON,
    "$": TokenKind.DOLLAR,
}


@attr.s(auto_attribs=True, frozen=True)
class Location:
    """Where a token was found.

    `offset` is the position of the first character of the token, `line` is
    one indexed. `span` is only recorded for tokens with content: the letters
    of a word, or the inside of a string literal without its quotes.
    """

    filename: str
    offset: int
    line: int
    span: Optional[Span] = None


@attr.s(auto_attribs=True, frozen=True)
class Token:
    kind: TokenKind
    location: Location
    word: Optional[Word] = None

    @property
    def span(self) -> Span:
        """Span to underline when reporting this token."""
        if self.location.span is not None:
            return self.location.span
        return Span(self.location.filename, self.location.offset, self.location.offset + 1)

    def is_word(self, keyword: Keyword) -> bool:
        return self.word is not None and self.word.which == keyword

    def text(self, source: str) -> str:
        """Literal content of a string or word token."""
        assert self.location.span is not None, f"{self.kind} tokens carry no text"
        return self.location.span.slice(source)

    def describe(self, source: str) -> str:
        """How the token reads in an error message."""
        if self.kind == TokenKind.WORD:
            return f"`{render(self.word)}`"
        if self.kind == TokenKind.STRING:
            return f"\"{self.text(source)}\""
        return f"`{self.kind.value}`"


def reconstruct(tokens: Sequence[Token], source: str) -> str:
    """Render a token list back to canonical source text.

    Keywords are written in uppercase, strings are quoted again and tokens are
    separated by single spaces. Tokenizing the result gives back the same
    sequence of token kinds, as long as it is tokenized with the same
    `allow_multiline_strings` setting: string content is written back
    unchanged, newlines included.
    """
    parts = []
    for token in tokens:
        if token.kind == TokenKind.WORD:
            parts.append(render(token.word))
        elif token.kind == TokenKind.STRING:
            parts.append(f"\"{token.text(source)}\"")
        else:
            parts.append(token.kind.value)
    return " ".join(parts)
