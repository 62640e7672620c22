"""Split CBT source text into tokens.

The tokenizer makes a single forward pass over the source and produces the
whole token list before any parsing happens.
"""
import logging
from typing import List, Optional

from .ast import Span
from .errors import UnknownCharacter, UnterminatedConstruct
from .tokens import PUNCTUATION, Location, Token, TokenKind
from .vocabulary import Word, resolve

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\r\f\v")


class Tokenizer:
    source: str
    filename: str
    allow_multiline_strings: bool
    idx: int
    line: int
    tokens: List[Token]

    def __init__(
        self,
        source: str,
        filename: str = "<string input>",
        allow_multiline_strings: bool = False,
    ):
        self.source = source
        self.filename = filename
        self.allow_multiline_strings = allow_multiline_strings
        self.idx = 0
        self.line = 1
        self.tokens = []
        self._done = False

    def span(self, start: int, end: int) -> Span:
        return Span(self.filename, start, end)

    def line_span(self, start: int, end: int) -> Span:
        """Span up to `end`, leaving out the carriage return of a CRLF line end."""
        if end > start and self.source[end - 1] == "\r":
            end -= 1
        return self.span(start, end)

    def push(
        self,
        kind: TokenKind,
        offset: int,
        span: Optional[Span] = None,
        word: Optional[Word] = None,
        line: Optional[int] = None,
    ) -> None:
        line = self.line if line is None else line
        self.tokens.append(
            Token(kind, Location(self.filename, offset, line, span), word)
        )

    def run(self) -> List[Token]:
        """Tokenize the whole source.

        Raises
        ------
        LexError
            On the first character sequence that is not part of the language.
        """
        if self._done:
            raise RuntimeError("a Tokenizer can only be run once")
        self._done = True
        while self.idx < len(self.source):
            self.lex()
        logger.debug("%s: %d tokens over %d lines", self.filename, len(self.tokens), self.line)
        return self.tokens

    def lex(self) -> None:
        current = self.source[self.idx]
        if current == "\n":
            self.line += 1
            self.idx += 1
        elif current in _WHITESPACE:
            self.idx += 1
        elif current in PUNCTUATION:
            self.push(PUNCTUATION[current], self.idx)
            self.idx += 1
        elif current == '"':
            self.lex_string()
        elif current.isalpha():
            self.lex_word()
        else:
            raise UnknownCharacter(current, self.span(self.idx, self.idx + 1))

    def lex_string(self) -> None:
        start = self.idx
        line = self.line
        self.idx += 1
        while self.idx < len(self.source):
            current = self.source[self.idx]
            if current == '"':
                break
            if current == "\n":
                if not self.allow_multiline_strings:
                    raise UnterminatedConstruct(
                        "string literal",
                        self.line_span(start, self.idx),
                        "missing closing quote before the end of the line",
                    )
                self.line += 1
            self.idx += 1
        else:
            raise UnterminatedConstruct(
                "string literal",
                self.line_span(start, self.idx),
                "missing closing quote before the end of the file",
            )
        # the span holds the content only, without the quotes
        self.push(TokenKind.STRING, start, self.span(start + 1, self.idx), line=line)
        self.idx += 1

    def lex_word(self) -> None:
        start = self.idx
        while self.idx < len(self.source) and self.source[self.idx].isalpha():
            self.idx += 1
        span = self.span(start, self.idx)
        word = resolve(span.slice(self.source), span)
        self.push(TokenKind.WORD, start, span, word)


def tokenize(
    source: str,
    filename: str = "<string input>",
    allow_multiline_strings: bool = False,
) -> List[Token]:
    """Turn source text into an ordered list of tokens.

    Parameters
    ----------
    source : str
        The program text.
    filename : str
        Name recorded in every span, used when rendering diagnostics.
    allow_multiline_strings : bool
        By default a newline inside a string literal is an error. When set,
        the newline becomes part of the literal.

    Returns
    -------
    List[Token]
        Tokens in strictly increasing offset order.
    """
    return Tokenizer(source, filename, allow_multiline_strings).run()
