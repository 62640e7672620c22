"""
cbt is the front end of a compiler for CBT, a verbose language written in
English phrases such as :code:`SET "v" EQUAL TO "hello".`

cbt provides
- A tokenizer with exact source offsets for every token.
- A parser producing a syntax tree of modules, functions, variables, calls
  and conditionals.
- Diagnostics that show the offending source line with the error underlined.
"""

__version__ = "0.1.0"

from .compiler import to_ast, compile_file
from .diagnostic_context import (
    CompilationHalted,
    Diagnostic,
    DiagnosticContext,
    PrinterDiagnosticContext,
    Severity,
)
from .simple_diagnostic import SimpleDiagnosticCtx
from .parser import parse
from .tokenizer import tokenize
from .transformer import Transformer
