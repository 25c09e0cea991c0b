"""Console logging for docrest, rendered with rich."""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


def _style(markup: str) -> Callable[[str], str]:
    return lambda text: f"[{markup}]{escape(str(text))}[/{markup}]"


# Markup helpers for the names that show up in log lines
color_palette: Dict[str, Callable[[str], str]] = {
    "database": _style("bold cyan"),
    "collection": _style("green"),
    "method": _style("bold yellow"),
    "path": _style("blue"),
}


class Logger:
    """Small leveled logger that prints through the shared rich console."""

    def __init__(self, console: Console, debug: bool = False):
        self.console = console
        self.debug_enabled = debug
        self._indent = 0

    def _emit(self, marker: str, message: str) -> None:
        self.console.print(f"{'  ' * self._indent}{marker} {message}", highlight=False)

    def section(self, title: str) -> None:
        """Print a horizontal rule with a title."""
        self.console.rule(f"[bold]{title}[/bold]")

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self._emit("[dim]DEBUG[/dim]", f"[dim]{message}[/dim]")

    def info(self, message: str) -> None:
        self._emit("[blue]INFO[/blue] ", message)

    def success(self, message: str) -> None:
        self._emit("[green]✓[/green]    ", message)

    def warn(self, message: str) -> None:
        self._emit("[yellow]WARN[/yellow] ", message)

    def error(self, message: str) -> None:
        self._emit("[bold red]ERROR[/bold red]", message)

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Indent every line logged inside the block."""
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1


log = Logger(console)
