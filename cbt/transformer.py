"""This module handles converting a CBT AST into the representation a code
generator wants. We provide a visitor class that the user can inherit from to
write their conversion.
"""
from typing import TypeVar, Generic, List, Sequence, Union

from . import ast
from .diagnostic_context import Diagnostic, DiagnosticContext, Severity

M = TypeVar("M")
F = TypeVar("F")
S = TypeVar("S")
E = TypeVar("E")
B = TypeVar("B")


class Transformer(Generic[M, F, S, E, B]):
    """A visitor to handle user specified transformations on the AST."""

    def do_transform(
        self, program: Union[ast.Node, Sequence[ast.Stmt]], diag: "DiagnosticContext"
    ) -> Union[List[Union[M, F, S, E, B, None]], M, F, S, E, B, None]:
        """Entry point for the transformation.

        This is called with the parsed statement list (or a single node) and
        the diagnostic context used while parsing.
        """
        self._diagnostic_context = diag
        if isinstance(program, ast.Node):
            return self.transform(program)
        return [self.transform(stmt) for stmt in program]

    def error(self, message, span):
        """Report an error on a given span."""
        self._diagnostic_context.emit(
            Severity.ERROR, message, Diagnostic().add_label(span)
        )

    def transform(self, node: ast.Node) -> Union[M, F, S, E, B, None]:
        """Visitor function.

        Call this to recurse into child nodes.
        """
        if isinstance(node, ast.Module):
            return self.transform_module(node)
        if isinstance(node, ast.Function):
            return self.transform_function(node)
        if isinstance(node, ast.Block):
            return self.transform_block(node)
        if isinstance(node, ast.Stmt):
            return self.transform_stmt(node)
        if isinstance(node, ast.Expr):
            return self.transform_expr(node)
        self.error(f"Unexpected CBT ast type {type(node)}", node.span)
        return None

    def transform_module(self, mod: ast.Module) -> M:
        pass

    def transform_function(self, func: ast.Function) -> F:
        pass

    def transform_stmt(self, stmt: ast.Stmt) -> S:
        pass

    def transform_expr(self, expr: ast.Expr) -> E:
        pass

    def transform_block(self, block: ast.Block) -> B:
        pass
