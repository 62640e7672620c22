"""Errors raised by the tokenizer and the parser.

Every error is fatal for the compilation unit. Each one carries the span of
the offending text and a stable error code so the diagnostic context can
render it against the source.
"""
from typing import List, Optional, Tuple

from .ast import Span


class CompileError(Exception):
    """Base class of all errors raised while reading a CBT program."""

    code = "E0000"
    summary = "Compilation failed."

    def __init__(self, message: str, span: Span, label: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.span = span
        self.label = label
        self.notes: List[str] = []
        self.secondary: List[Tuple[Span, str]] = []

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class LexError(CompileError):
    """Raised when the source cannot be split into tokens."""


class UnterminatedConstruct(LexError):
    code = "E0003"
    summary = "Unterminated construct."

    def __init__(self, construct: str, span: Span, reason: str):
        super().__init__(f"unterminated {construct}", span, reason)
        self.construct = construct


class UnknownCharacter(LexError):
    code = "E0004"
    summary = "Unknown character."

    def __init__(self, char: str, span: Span):
        super().__init__(f"unknown character {char!r}", span, "not part of the language")
        self.char = char


class InvalidEncoding(LexError):
    code = "E0007"
    summary = "Source is not valid UTF-8."

    def __init__(self, reason: str, byte_offset: int, span: Span):
        super().__init__("source file is not valid UTF-8", span, reason)
        self.reason = reason
        self.byte_offset = byte_offset
        self.notes.append(f"the undecodable data starts at byte {byte_offset}")


class UnknownKeyword(LexError):
    code = "E0002"
    summary = "Non-existent keyword."

    def __init__(self, text: str, span: Optional[Span] = None):
        super().__init__(
            f"`{text}` is not a keyword",
            Span.invalid() if span is None else span,
            "unknown keyword",
        )
        self.text = text
        self.notes.append("names are written as quoted strings, e.g. \"main\"")


class ParseError(CompileError):
    """Raised when the token stream does not match the grammar."""


class UnexpectedToken(ParseError):
    code = "E0001"
    summary = "Provided keyword did not match the expected keyword."

    def __init__(self, expected: str, found: str, span: Span):
        super().__init__(
            f"expected {expected} but found {found}", span, f"expected {expected}"
        )
        self.expected = expected
        self.found = found


class MismatchedBlockCloser(ParseError):
    code = "E0005"
    summary = "Block closer does not match its opener."

    def __init__(
        self,
        kind: str,
        expected_name: str,
        found_name: str,
        span: Span,
        opener: Optional[Span] = None,
    ):
        super().__init__(
            f"{kind} closer names \"{found_name}\" but the {kind} was opened as \"{expected_name}\"",
            span,
            f"expected \"{expected_name}\"",
        )
        self.kind = kind
        self.expected_name = expected_name
        self.found_name = found_name
        if opener is not None:
            self.secondary.append((opener, f"{kind} opened here"))
        self.notes.append("a closing phrase must repeat the opening name exactly")


class UnsupportedConstruct(ParseError):
    code = "E0006"
    summary = "Construct is not supported."

    def __init__(self, construct: str, span: Span):
        super().__init__(f"{construct} are not supported", span, "not supported")
        self.construct = construct
