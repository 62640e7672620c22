"""
`cbt.ast` contains definitions of all nodes in the CBT syntax tree. Every node
carries the span of the source phrase it was parsed from, so later passes can
report errors against the original text.
"""
import attr
from enum import Enum
from typing import Optional, List, Union, Sequence


@attr.s(auto_attribs=True, frozen=True)
class Span:
    """A contiguous interval of characters in a source file.

    Notes
    -----
    Offsets are zero indexed positions in the decoded source string. The
    interval spanned is inclusive of the start and exclusive of the end.
    """

    filename: str
    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def merge(self, span: "Span") -> "Span":
        """Return the span starting from the beginning of the first span and
        ending at the end of the second span.

        Notes
        -----
        Gaps between the two spans are contained in the merged span. The
        spans do not need to be in order.

        Example
        -------

            >>> Span("", 2, 4).merge(Span("", 7, 9))
            Span(filename='', start=2, end=9)

        """
        assert self.filename == span.filename, "Spans must be from the same file"
        return Span(self.filename, min(self.start, span.start), max(self.end, span.end))

    @staticmethod
    def union(spans: Sequence["Span"]) -> "Span":
        """A span containing all the given spans with no gaps.

        This function is the equivalent to merge with more than two spans.
        """
        if len(spans) == 0:
            return Span.invalid()
        span = spans[0]
        for s in spans[1:]:
            span = span.merge(s)
        return span

    def slice(self, source: str) -> str:
        """The text covered by this span."""
        return source[self.start : self.end]

    @staticmethod
    def invalid() -> "Span":
        """An invalid span"""
        return Span("", -1, -1)


@attr.s(auto_attribs=True, frozen=True)
class Node:
    """Base class of any AST node.

    All AST nodes must have a span.
    """

    span: Span


class Stmt(Node):
    """Base class of a statement in the AST."""

    pass


class Expr(Node):
    """Base class of a expression in the AST."""

    pass


class BinaryOperator(Enum):
    """Comparison phrases usable in a condition.

    Example
    -------
    :code:`IS EQUAL TO` in :code:`IF "a" IS EQUAL TO "b" THEN DO ... IF`.
    """

    EQUAL_TO = "IS EQUAL TO"


class VariableType(Enum):
    """The literal types the grammar distinguishes."""

    STRING = "string"
    BOOL = "bool"
    NUMBER = "number"

    @staticmethod
    def of(value: Union[str, bool, float]) -> "VariableType":
        # bool first, it is a subclass of int
        if isinstance(value, bool):
            return VariableType.BOOL
        if isinstance(value, str):
            return VariableType.STRING
        return VariableType.NUMBER


@attr.s(auto_attribs=True, frozen=True)
class Literal(Expr):
    """A literal value in an expression.

    Examples
    --------
    :code:`"hello"` in :code:`SET "v" EQUAL TO "hello".`
    :code:`TRUE` in :code:`SET "flag" EQUAL TO TRUE.`
    """

    value: Union[str, bool, float]

    @property
    def ty(self) -> VariableType:
        return VariableType.of(self.value)


@attr.s(auto_attribs=True, frozen=True)
class Identifier(Expr):
    """A reference to a named entity.

    Example
    -------
    :code:`"f"` in :code:`CALL FUNCTION "f".`
    """

    name: str


@attr.s(auto_attribs=True, frozen=True)
class Call(Expr):
    """A function call.

    Example
    -------
    In :code:`CALL FUNCTION "greet" WITH THE ARGUMENT "bob".`,
    :code:`callee` is :code:`Identifier("greet")` and :code:`args` is
    :code:`[Literal("bob")]`. Without an argument phrase :code:`args` is
    :code:`None`.
    """

    callee: Expr
    args: Optional[List[Expr]]


@attr.s(auto_attribs=True, frozen=True)
class BinaryOp(Expr):
    """A binary comparison.

    Example
    -------
    :code:`"a" IS EQUAL TO "b"` becomes
    :code:`BinaryOp(BinaryOperator.EQUAL_TO, Literal("a"), Literal("b"))`.
    """

    op: BinaryOperator
    left: Expr
    right: Expr


@attr.s(auto_attribs=True, frozen=True)
class Block(Stmt):
    """An ordered sequence of statements.

    Example
    -------
    Everything between :code:`WITH CONTENTS :` and :code:`END MODULE "m".`
    forms the module's :code:`Block`.
    """

    stmts: List[Stmt]


@attr.s(auto_attribs=True, frozen=True)
class Module(Stmt):
    """A module definition.

    Example
    -------
    .. code-block:: text

        DEFINE MODULE "main" WITH CONTENTS :
            SET "v" EQUAL TO "hello".
        END MODULE "main".

    Here :code:`name` is :code:`main` and :code:`body` holds the variable.
    """

    name: str
    body: Block


@attr.s(auto_attribs=True, frozen=True)
class Function(Stmt):
    """A function definition. Only the no-argument form exists.

    Example
    -------
    .. code-block:: text

        DEFINE FUNCTION "f" THAT RETURNS A :
            CALL FUNCTION "g".
        END FUNCTION "f".
    """

    name: str
    body: Block


@attr.s(auto_attribs=True, frozen=True)
class Variable(Stmt):
    """A variable declaration.

    Example
    -------
    In :code:`SET "v" EQUAL TO "hello".`, :code:`name` is :code:`v`,
    :code:`ty` is :code:`VariableType.STRING` and :code:`value` is
    :code:`Literal("hello")`.
    """

    name: str
    ty: VariableType
    value: Optional[Expr]


@attr.s(auto_attribs=True, frozen=True)
class Condition(Stmt):
    """A conditional statement.

    Notes
    -----
    The language has no else phrase yet, so :code:`orelse` is always
    :code:`None` coming out of the parser.
    """

    test: Expr
    then: Block
    orelse: Optional[Block]


@attr.s(auto_attribs=True, frozen=True)
class ExprStmt(Stmt):
    """An expression used as a statement.

    Example
    -------
    :code:`CALL FUNCTION "f".` is an :code:`ExprStmt` wrapping a
    :code:`Call`.
    """

    expr: Expr
