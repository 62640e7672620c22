"""This module contains the entry points that run the tokenizer and parser and
route any failure through a diagnostic context."""
import logging
import os
from typing import Any, List, Optional, Union

from .ast import Span
from .diagnostic_context import Diagnostic, DiagnosticContext, Severity
from .errors import CompileError, InvalidEncoding
from .parser import parse
from .tokenizer import tokenize
from .tokens import Token
from .transformer import Transformer

logger = logging.getLogger(__name__)


def report_error(error: CompileError, diagnostic_ctx: DiagnosticContext) -> Any:
    """Turn a compile error into a halting diagnostic and emit it."""
    diag = Diagnostic(error.code).add_label(error.span, error.label)
    for span, message in error.secondary:
        diag.add_label(span, message, primary=False)
    for note in error.notes:
        diag.add_note(note)
    return diagnostic_ctx.emit(Severity.ERROR, error.message, diag.end_process())


def to_ast(
    program: str,
    diagnostic_ctx: DiagnosticContext,
    filename: str = "<string input>",
    transformer: Optional[Transformer] = None,
    allow_multiline_strings: bool = False,
    require_header: bool = False,
    token_sink: Optional[List[Token]] = None,
) -> Any:
    """Parse a CBT program into a list of statements.

    Examples
    --------

    .. code-block:: python

        import cbt

        src = 'SET "v" EQUAL TO "hello".'
        cbt.to_ast(src, cbt.PrinterDiagnosticContext())

    Parameters
    ----------
    program : str
        The program text.
    diagnostic_ctx : DiagnosticContext
        A diagnostic context to handle reporting of errors. The first error
        stops compilation; whether that raises is up to the context.
    filename : str
        Name of the program shown in diagnostics.
    transformer : Optional[Transformer]
        An optional transformer to apply to the statements after parsing. It
        shares the diagnostic context used while parsing.
    allow_multiline_strings : bool
        Accept newlines inside string literals instead of rejecting them.
    require_header : bool
        Require the program to start with ``BEGIN PROGRAM .``.
    token_sink : Optional[List[Token]]
        When given, the tokens are appended to this list as soon as
        tokenizing succeeds, so callers can inspect them without tokenizing
        the source a second time.

    Returns
    -------
    Union[List[cbt.ast.Stmt], Any]
        The statements if no transformer was specified and no error occurred.
        Or the rendered errors of the context if one occurred. Or the result of
        applying the transformer to the statements.
    """
    diagnostic_ctx.add_source(filename, program)
    try:
        tokens = tokenize(program, filename, allow_multiline_strings)
        if token_sink is not None:
            token_sink.extend(tokens)
        stmts = parse(tokens, program, filename, require_header)
    except CompileError as error:
        logger.debug("%s: %s", filename, error)
        report_error(error, diagnostic_ctx)
        return diagnostic_ctx.render()
    if transformer is not None:
        transformed = transformer.do_transform(stmts, diagnostic_ctx)
        err = diagnostic_ctx.render()
        if err is not None:
            return err
        return transformed
    return stmts


def compile_file(
    path: Union[str, "os.PathLike[str]"],
    diagnostic_ctx: DiagnosticContext,
    **options: Any,
) -> Any:
    """Read a UTF-8 source file once and compile it with :py:func:`to_ast`.

    A file that does not decode is reported as an error against the first
    undecodable character, shown as U+FFFD in the rendered source line.
    """
    filename = os.fspath(path)
    with open(filename, "rb") as f:
        data = f.read()
    try:
        program = data.decode("utf-8")
    except UnicodeDecodeError as e:
        program = data.decode("utf-8", errors="replace")
        # everything before e.start decoded cleanly
        offset = len(data[: e.start].decode("utf-8"))
        logger.debug("%s: undecodable byte at %d", filename, e.start)
        diagnostic_ctx.add_source(filename, program)
        report_error(
            InvalidEncoding(e.reason, e.start, Span(filename, offset, offset + 1)),
            diagnostic_ctx,
        )
        return diagnostic_ctx.render()
    logger.debug("loaded %s (%d characters)", filename, len(program))
    return to_ast(program, diagnostic_ctx, filename=filename, **options)
