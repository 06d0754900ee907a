"""Console output abstraction.

Services and the release flow write through ``ConsoleProtocol``. In a
terminal ``RichConsole`` renders styled lines; under test ``MockConsole``
keeps an ``OutputRecord`` per line.

Status lines share one prefix table so both consoles agree on wording:

    success  ->  "OK ..."
    error    ->  "error: ..."
    warning  ->  "warning: ..."
    info     ->  "info: ..."
    dry_run  ->  "[dry-run] ..."
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]

DRY_RUN_PREFIX = "[dry-run]"


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Status prefix and the Rich style it is drawn in.
_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}

_RICH_STYLES: dict[Style, str] = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def dry_run(self, message: str) -> None:
        """Describe an action that a dry run skipped."""
        ...

    def newline(self) -> None: ...


class _StatusLines:
    """Derives the status helpers from ``_status``."""

    def _status(self, style: Style, message: str) -> None:
        raise NotImplementedError

    def success(self, message: str) -> None:
        self._status(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._status(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._status(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._status(Style.INFO, message)


class RichConsole(_StatusLines):
    """Terminal console. Messages are never parsed as Rich markup."""

    def __init__(self) -> None:
        # Lazy so `odc --version` does not pay for rich
        from rich.console import Console

        self._console = Console(highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=_RICH_STYLES[style] or None, markup=False)

    def _status(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text(_PREFIXES[style], style=_RICH_STYLES[style])
        line.append(f" {message}")
        self._console.print(line)

    def header(self, message: str) -> None:
        self.newline()
        self.print(message, Style.HEADER)

    def dry_run(self, message: str) -> None:
        self.print(f"{DRY_RUN_PREFIX} {message}", Style.DIM)

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole(_StatusLines):
    """Records output instead of printing it."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def _status(self, style: Style, message: str) -> None:
        self.print(f"{_PREFIXES[style]} {message}", style)

    def header(self, message: str) -> None:
        self.print(message, Style.HEADER)

    def dry_run(self, message: str) -> None:
        self.print(f"{DRY_RUN_PREFIX} {message}", Style.DIM)

    def newline(self) -> None:
        self.print("")

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def _any(self, style: Style) -> bool:
        return any(o.style == style for o in self.outputs)

    def has_error(self) -> bool:
        return self._any(Style.ERROR)

    def has_warning(self) -> bool:
        return self._any(Style.WARNING)

    def has_success(self) -> bool:
        return self._any(Style.SUCCESS)

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains ``substring``."""
        return [o for o in self.outputs if substring in o.message]

    def dry_run_lines(self) -> list[str]:
        return [m for m in self.messages if m.startswith(DRY_RUN_PREFIX)]
