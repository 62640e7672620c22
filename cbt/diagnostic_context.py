"""Error handling in CBT is done through a `DiagnosticContext`. The tokenizer
and parser never print or exit: their errors are turned into a
:py:class:`Diagnostic` and handed to the context, which renders the report
and decides whether compilation stops.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import attr
from rich.console import Console
from rich.text import Text

from .ast import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def style(self) -> str:
        return _STYLES[self]


_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "bold yellow",
    Severity.INFO: "bold blue",
}
_GUTTER = "bold blue"


class CompilationHalted(RuntimeError):
    """Raised by a context once a diagnostic asking to halt was emitted."""

    def __init__(self, report: str):
        super().__init__(report)
        self.report = report


@attr.s(auto_attribs=True, frozen=True)
class Label:
    span: Span
    message: Optional[str] = None
    primary: bool = True


@attr.s(auto_attribs=True)
class Diagnostic:
    """A report under construction.

    Labels and notes are accumulated first, then the diagnostic is emitted
    with a severity and a primary message through
    :py:meth:`DiagnosticContext.emit`.

    Example
    -------

        >>> diag = Diagnostic("E0001").add_label(span, "expected `WITH`")
        >>> ctx.emit(Severity.ERROR, "expected `WITH` but found `CONTENTS`", diag.end_process())

    """

    code: Optional[str] = None
    labels: List[Label] = attr.ib(factory=list)
    notes: List[str] = attr.ib(factory=list)
    halt: bool = False

    def add_label(
        self, span: Span, message: Optional[str] = None, primary: bool = True
    ) -> "Diagnostic":
        self.labels.append(Label(span, message, primary))
        return self

    def add_note(self, note: str) -> "Diagnostic":
        self.notes.append(note)
        return self

    def end_process(self, toggle: bool = True) -> "Diagnostic":
        """Ask the context to stop compilation once this diagnostic is emitted."""
        self.halt = toggle
        return self


def _line_bounds(source: str, offset: int) -> Tuple[int, int, int]:
    """The one indexed line number and the [start, end) of the line holding `offset`."""
    offset = max(0, min(offset, len(source)))
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    return source.count("\n", 0, start) + 1, start, end


def render_report(
    level: Severity,
    message: str,
    diagnostic: Diagnostic,
    sources: Dict[str, str],
) -> Text:
    """Render a diagnostic against its source text.

    Each labelled line is shown verbatim, followed by a run of carets exactly
    as long as the label span. Spans running past the end of their first line
    are underlined up to the end of that line.
    """
    report = Text()
    header = level.value if diagnostic.code is None else f"{level.value}[{diagnostic.code}]"
    report.append(header, style=level.style)
    report.append(f": {message}\n", style="bold")

    labels = sorted(diagnostic.labels, key=lambda label: (label.span.start, not label.primary))
    shown = [label for label in labels if label.span.filename in sources]
    width = 1
    if shown:
        width = max(
            len(str(_line_bounds(sources[label.span.filename], label.span.start)[0]))
            for label in shown
        )
    pad = " " * width

    primary = next((label for label in shown if label.primary), shown[0] if shown else None)
    if primary is not None:
        source = sources[primary.span.filename]
        line, line_start, _ = _line_bounds(source, primary.span.start)
        column = primary.span.start - line_start + 1
        report.append(f"{pad}--> ", style=_GUTTER)
        report.append(f"{primary.span.filename}:{line}:{column}\n")
        report.append(f"{pad} |\n", style=_GUTTER)

    for label in shown:
        source = sources[label.span.filename]
        line, line_start, line_end = _line_bounds(source, label.span.start)
        content = source[line_start:line_end].rstrip("\r")
        report.append(f"{str(line).rjust(width)} | ", style=_GUTTER)
        report.append(f"{content}\n")

        start = label.span.start - line_start
        length = min(len(label.span), max(len(content) - start, 0))
        # keep tabs so the carets line up with the text above
        prefix = "".join(c if c == "\t" else " " for c in content[:start])
        style = level.style if label.primary else _GUTTER
        marker = "^" if label.primary else "-"
        report.append(f"{pad} | ", style=_GUTTER)
        report.append(prefix)
        report.append(marker * max(length, 1), style=style)
        if label.message:
            report.append(f" {label.message}", style=style)
        report.append("\n")

    if diagnostic.notes:
        if shown:
            report.append(f"{pad} |\n", style=_GUTTER)
        for note in diagnostic.notes:
            report.append(f"{pad} = ", style=_GUTTER)
            report.append("note", style="bold")
            report.append(f": {note}\n")
    report.rstrip()
    return report


class DiagnosticContext:
    """Receives every diagnostic produced while compiling."""

    halted: bool = False

    def add_source(self, name: str, source: str) -> None:
        """Add a file with source code to the context. This will be called
        before any call to :py:func:`emit` that contains a span in this
        file.
        """
        raise NotImplementedError()

    def emit(self, level: Severity, message: str, diagnostic: Diagnostic) -> Any:
        """Called when a diagnostic is ready. Returns the rendered report."""
        raise NotImplementedError()

    def render(self) -> Optional[Any]:
        """Render out all error messages. Can either return a value or raise
        an exception.
        """
        raise NotImplementedError()


@attr.s(auto_attribs=True)
class PrinterDiagnosticContext(DiagnosticContext):
    """Prints each report to the error stream, colored by severity. Raises
    :py:class:`CompilationHalted` once a diagnostic asking to halt is emitted.
    """

    sources: Dict[str, str] = attr.ib(factory=dict)
    reports: List[Tuple[Severity, Text]] = attr.ib(factory=list)
    console: Console = attr.ib(
        factory=lambda: Console(stderr=True, highlight=False, soft_wrap=True)
    )
    halted: bool = False

    def add_source(self, name: str, source: str) -> None:
        self.sources[name] = source

    def emit(self, level: Severity, message: str, diagnostic: Diagnostic) -> Text:
        report = render_report(level, message, diagnostic, self.sources)
        self.reports.append((level, report))
        self.console.print(report)
        if diagnostic.halt:
            self.halted = True
            raise CompilationHalted(report.plain)
        return report

    def render(self) -> Optional[str]:
        errors = [r.plain for level, r in self.reports if level == Severity.ERROR]
        if len(errors) == 0:
            return None
        return "\n\n".join(errors)
