"""Command line entry point: check a CBT file and optionally dump what was read."""
import logging
import sys
from typing import List

import click
from rich.console import Console
from rich.pretty import pprint

from .compiler import compile_file
from .diagnostic_context import CompilationHalted, PrinterDiagnosticContext
from .tokens import Token


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the token stream.")
@click.option("--tree", "show_tree", is_flag=True, help="Print the statement tree.")
@click.option(
    "--allow-multiline-strings",
    is_flag=True,
    help="Accept newlines inside string literals.",
)
@click.option(
    "--require-header",
    is_flag=True,
    help="Require the program to start with BEGIN PROGRAM.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(
    source: str,
    show_tokens: bool,
    show_tree: bool,
    allow_multiline_strings: bool,
    require_header: bool,
    verbose: bool,
) -> None:
    """Check the CBT program SOURCE.

    Diagnostics are written to stderr. The exit code is 1 when compilation
    was halted by an error.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    diag_ctx = PrinterDiagnosticContext()
    tokens: List[Token] = []
    try:
        stmts = compile_file(
            source,
            diag_ctx,
            token_sink=tokens,
            allow_multiline_strings=allow_multiline_strings,
            require_header=require_header,
        )
    except CompilationHalted:
        sys.exit(1)

    if show_tokens:
        program = diag_ctx.sources[source]
        for token in tokens:
            location = token.location
            click.echo(
                f"{location.line}:{location.offset}\t{token.kind.name}\t{token.describe(program)}"
            )
    if show_tree:
        pprint(stmts, console=Console(highlight=False, soft_wrap=True), expand_all=True)
    if not show_tokens and not show_tree:
        click.echo(f"{source}: {len(stmts)} top-level statements")
