#!/usr/bin/env python3

from collections.abc import Iterable

from rich.console import Console as RichConsole
from rich.markup import escape

from docport.models import Diagnostic, Severity

_STYLES = {
    Severity.INFO: "dim",
    Severity.WARNING: "yellow",
}


class Console:
    """Simple console wrapper focused on output, writing to stderr."""

    def __init__(self, rich: RichConsole | None = None):
        self._rich = rich or RichConsole(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    def status(self, *args, **kwargs):
        """Create Rich status context."""
        return self._rich.status(*args, **kwargs)

    def report(self, diagnostics: Iterable[Diagnostic], verbose: bool = False) -> int:
        """Print diagnostics; info-level ones only when verbose. Returns the number shown."""
        shown = 0
        for diagnostic in diagnostics:
            if diagnostic.severity == Severity.INFO and not verbose:
                continue
            style = _STYLES[diagnostic.severity]
            self._rich.print(f"[{style}]{escape(str(diagnostic))}[/{style}]")
            shown += 1
        return shown
