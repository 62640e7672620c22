"""This module contains the recursive descent parser from a CBT token list to
the CBT AST.

Grammar, with keywords shown in their canonical spelling:

.. code-block:: text

    Program        := [ BEGIN PROGRAM '.' ] Stmt*
    Stmt           := DefineModule | DefineFunction | SetVariable | IfStmt | CallStmt
    DefineModule   := DEFINE MODULE <str> WITH CONTENTS ':' Block END MODULE <str> '.'
    DefineFunction := DEFINE FUNCTION <str> THAT RETURNS A ':' Block END FUNCTION <str> '.'
    SetVariable    := SET <str> EQUAL TO <value> '.'
    CallStmt       := CALL FUNCTION <str> [ WITH THE ARGUMENT <value> ] '.'
    IfStmt         := IF <value> IS EQUAL TO <value> THEN DO Block IF
    <value>        := <str> | TRUE | FALSE

A conditional closes on a bare ``IF`` while modules and functions close with
``END <KIND> <name> .``. Each construct consumes its own closer before
returning to the enclosing block.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

from .ast import (
    BinaryOp,
    BinaryOperator,
    Block,
    Call,
    Condition,
    ExprStmt,
    Function,
    Identifier,
    Literal,
    Module,
    Span,
    Stmt,
    Variable,
)
from .errors import MismatchedBlockCloser, UnexpectedToken, UnsupportedConstruct
from .tokens import Token, TokenKind
from .vocabulary import Keyword, render

logger = logging.getLogger(__name__)


class Parser:
    tokens: List[Token]
    source: str
    filename: str
    require_header: bool
    idx: int
    nodes: List[Stmt]

    def __init__(
        self,
        tokens: Sequence[Token],
        source: str,
        filename: str = "<string input>",
        require_header: bool = False,
    ):
        self.tokens = list(tokens)
        self.source = source
        self.filename = filename
        self.require_header = require_header
        self.idx = 0
        self.nodes = []
        self._done = False

    # Cursor

    def peek(self) -> Optional[Token]:
        if self.idx < len(self.tokens):
            return self.tokens[self.idx]
        return None

    def peek_word(self, keyword: Keyword) -> bool:
        token = self.peek()
        return token is not None and token.is_word(keyword)

    def advance(self) -> Token:
        token = self.tokens[self.idx]
        self.idx += 1
        return token

    def end_span(self) -> Span:
        if self.tokens:
            return self.tokens[-1].span
        return Span(self.filename, 0, 0)

    def unexpected(self, expected: str) -> UnexpectedToken:
        token = self.peek()
        if token is None:
            return UnexpectedToken(expected, "end of input", self.end_span())
        return UnexpectedToken(expected, token.describe(self.source), token.span)

    def expect(self, kind: TokenKind) -> Token:
        token = self.peek()
        if token is None or token.kind != kind:
            raise self.unexpected(f"`{kind.value}`")
        return self.advance()

    def expect_word(self, *keywords: Keyword) -> Token:
        """Consume a phrase of keywords, failing on the first one missing."""
        token = None
        for keyword in keywords:
            if not self.peek_word(keyword):
                raise self.unexpected(f"`{render(keyword)}`")
            token = self.advance()
        assert token is not None, "expect_word needs at least one keyword"
        return token

    def expect_string(self, what: str) -> Token:
        token = self.peek()
        if token is None or token.kind != TokenKind.STRING:
            raise self.unexpected(what)
        return self.advance()

    # Grammar

    def run(self) -> List[Stmt]:
        """Parse the whole token list.

        Raises
        ------
        ParseError
            On the first token that does not fit the grammar. No partial
            tree is returned.
        """
        if self._done:
            raise RuntimeError("a Parser can only be run once")
        self._done = True
        if self.require_header or self.peek_word(Keyword.BEGIN):
            self.expect_word(Keyword.BEGIN, Keyword.PROGRAM)
            self.expect(TokenKind.PERIOD)
        while self.peek() is not None:
            self.nodes.append(self.parse_stmt())
        logger.debug("%s: parsed %d top-level statements", self.filename, len(self.nodes))
        return self.nodes

    def parse_stmt(self) -> Stmt:
        token = self.peek()
        if token is not None and token.word is not None:
            handler = self._statements.get(token.word.which)
            if handler is not None:
                return handler(self)
        raise self.unexpected("a statement (`DEFINE`, `SET`, `CALL` or `IF`)")

    def parse_block(self, closer: Keyword, closing_phrase: str) -> Block:
        """Parse statements up to, but not including, the `closer` keyword."""
        stmts: List[Stmt] = []
        while True:
            token = self.peek()
            if token is None:
                raise self.unexpected(closing_phrase)
            if token.is_word(closer):
                break
            stmts.append(self.parse_stmt())
        if stmts:
            span = Span.union([stmt.span for stmt in stmts])
        else:
            span = Span(token.location.filename, token.location.offset, token.location.offset)
        return Block(span, stmts)

    def close_named_block(self, kind: Keyword, name: Token) -> Token:
        """Consume `END <kind> <name> .` and check it repeats the opening name."""
        expected_name = name.text(self.source)
        self.expect_word(Keyword.END, kind)
        closing = self.expect_string(f"the name \"{expected_name}\"")
        found_name = closing.text(self.source)
        if found_name != expected_name:
            raise MismatchedBlockCloser(
                render(kind).lower(), expected_name, found_name, closing.span, name.span
            )
        return self.expect(TokenKind.PERIOD)

    def parse_define(self) -> Stmt:
        start = self.advance()
        if self.peek_word(Keyword.MODULE):
            return self.parse_module(start)
        if self.peek_word(Keyword.FUNCTION):
            return self.parse_function(start)
        raise self.unexpected("`MODULE` or `FUNCTION`")

    def parse_module(self, start: Token) -> Module:
        self.advance()
        name = self.expect_string("a quoted module name")
        self.expect_word(Keyword.WITH, Keyword.CONTENTS)
        self.expect(TokenKind.COLON)
        text = name.text(self.source)
        body = self.parse_block(Keyword.END, f"`END MODULE \"{text}\" .`")
        end = self.close_named_block(Keyword.MODULE, name)
        return Module(start.span.merge(end.span), text, body)

    def parse_function(self, start: Token) -> Function:
        self.advance()
        name = self.expect_string("a quoted function name")
        token = self.peek()
        if token is not None and token.is_word(Keyword.EXPECTS):
            raise UnsupportedConstruct("functions that take arguments", token.span)
        self.expect_word(Keyword.THAT, Keyword.RETURNS, Keyword.A)
        self.expect(TokenKind.COLON)
        text = name.text(self.source)
        body = self.parse_block(Keyword.END, f"`END FUNCTION \"{text}\" .`")
        end = self.close_named_block(Keyword.FUNCTION, name)
        return Function(start.span.merge(end.span), text, body)

    def parse_set(self) -> Variable:
        start = self.advance()
        name = self.expect_string("a quoted variable name")
        self.expect_word(Keyword.EQUAL, Keyword.TO)
        value = self.parse_value("a value")
        end = self.expect(TokenKind.PERIOD)
        return Variable(
            start.span.merge(end.span), name.text(self.source), value.ty, value
        )

    def parse_call(self) -> ExprStmt:
        start = self.advance()
        self.expect_word(Keyword.FUNCTION)
        name = self.expect_string("a quoted function name")
        callee = Identifier(name.span, name.text(self.source))
        args: Optional[List[Literal]] = None
        if self.peek_word(Keyword.WITH):
            self.advance()
            token = self.peek()
            if token is not None and not token.is_word(Keyword.THE):
                raise UnsupportedConstruct("calls with more than one argument", token.span)
            self.expect_word(Keyword.THE, Keyword.ARGUMENT)
            args = [self.parse_value("an argument value")]
        end = self.expect(TokenKind.PERIOD)
        last = args[-1] if args else callee
        call = Call(start.span.merge(last.span), callee, args)
        return ExprStmt(start.span.merge(end.span), call)

    def parse_if(self) -> Condition:
        start = self.advance()
        left = self.parse_value("a value to compare")
        self.expect_word(Keyword.IS)
        token = self.peek()
        if token is not None and not token.is_word(Keyword.EQUAL):
            raise UnsupportedConstruct("comparisons other than `IS EQUAL TO`", token.span)
        self.expect_word(Keyword.EQUAL, Keyword.TO)
        right = self.parse_value("a value to compare")
        self.expect_word(Keyword.THEN, Keyword.DO)
        # a bare IF closes the block, there is no END IF
        then = self.parse_block(Keyword.IF, "`IF` to close the conditional")
        end = self.advance()
        test = BinaryOp(left.span.merge(right.span), BinaryOperator.EQUAL_TO, left, right)
        return Condition(start.span.merge(end.span), test, then, None)

    def parse_value(self, what: str) -> Literal:
        token = self.peek()
        if token is not None:
            if token.kind == TokenKind.STRING:
                self.advance()
                return Literal(token.span, token.text(self.source))
            if token.is_word(Keyword.TRUE) or token.is_word(Keyword.FALSE):
                self.advance()
                return Literal(token.span, token.is_word(Keyword.TRUE))
        raise self.unexpected(what)

    _statements: Dict[Keyword, Callable[["Parser"], Stmt]] = {
        Keyword.DEFINE: parse_define,
        Keyword.SET: parse_set,
        Keyword.CALL: parse_call,
        Keyword.IF: parse_if,
    }


def parse(
    tokens: Sequence[Token],
    source: str,
    filename: str = "<string input>",
    require_header: bool = False,
) -> List[Stmt]:
    """Build the statement list for a token list.

    Parameters
    ----------
    tokens : Sequence[Token]
        The output of :py:func:`cbt.tokenizer.tokenize` for `source`.
    source : str
        The text the tokens were produced from. String contents are sliced
        out of it using the token spans.
    filename : str
        Name used for spans that do not come from a token.
    require_header : bool
        Reject programs that do not start with ``BEGIN PROGRAM .``.
    """
    return Parser(tokens, source, filename, require_header).run()
