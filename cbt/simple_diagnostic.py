from typing import Dict, List, Optional, Tuple

from rich.text import Text

from .diagnostic_context import Diagnostic, DiagnosticContext, Severity, render_report


class SimpleDiagnosticCtx(DiagnosticContext):
    """Collects diagnostics without printing them or raising.

    Useful when the caller wants to inspect errors itself, e.g. in an editor
    integration or in tests.
    """

    source_map: Dict[str, str]
    diagnostics: List[Tuple[Severity, str, Diagnostic, Text]]

    def __init__(self) -> None:
        self.source_map = {}
        self.diagnostics = []
        self.halted = False

    def add_source(self, name: str, source: str) -> None:
        self.source_map[name] = source

    def emit(self, level: Severity, message: str, diagnostic: Diagnostic) -> Text:
        report = render_report(level, message, diagnostic, self.source_map)
        self.diagnostics.append((level, message, diagnostic, report))
        if diagnostic.halt:
            self.halted = True
        return report

    def render(self) -> Optional[List[Tuple[Severity, str, Diagnostic, Text]]]:
        if len(self.diagnostics) == 0:
            return None
        return self.diagnostics
