"""Operator prompts used by the release flow.

``PromptProtocol`` is the seam between the state machines and the terminal.
``TerminalPrompt`` asks through click's prompt helpers, ``ScriptedPrompt``
replays canned answers in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import click
import typer

__all__ = [
    "PromptOption",
    "PromptProtocol",
    "ScriptedPrompt",
    "TerminalPrompt",
]


@dataclass(frozen=True, slots=True)
class PromptOption[T]:
    value: T
    label: str


class PromptProtocol(Protocol):
    def select[T](self, title: str, options: list[PromptOption[T]]) -> T | None:
        """Return the chosen option's value, or None if the operator cancelled."""
        ...

    def text(self, message: str) -> str: ...

    def confirm(self, message: str, *, default: bool = True) -> bool: ...

    def pause(self, message: str) -> None: ...


class TerminalPrompt:
    """Numbered menus and plain prompts; Ctrl-C surfaces as ``click.Abort``."""

    def select[T](self, title: str, options: list[PromptOption[T]]) -> T | None:
        if not options:
            raise ValueError("select requires at least one option")
        typer.echo(title)
        for i, opt in enumerate(options, start=1):
            typer.echo(f"{i:2}) {opt.label}")
        index: int = typer.prompt(
            "Select", type=click.IntRange(1, len(options)), default=1, show_default=True
        )
        return options[index - 1].value

    def text(self, message: str) -> str:
        return str(typer.prompt(message, default="", show_default=False))

    def confirm(self, message: str, *, default: bool = True) -> bool:
        return bool(typer.confirm(message, default=default))

    def pause(self, message: str) -> None:
        typer.prompt(message, default="", show_default=False, prompt_suffix="")


def _empty_answers() -> list[object]:
    return []


@dataclass
class ScriptedPrompt:
    """Prompt double that replays ``answers`` in order.

    ``select`` answers are option values (or None to cancel), ``text``
    answers are strings, ``confirm`` answers are bools. Every question asked,
    including ``pause`` messages, is appended to ``asked``.
    """

    answers: list[object] = field(default_factory=_empty_answers)
    asked: list[str] = field(default_factory=list)

    def _next(self, question: str) -> object:
        self.asked.append(question)
        if not self.answers:
            raise AssertionError(f"no scripted answer for: {question}")
        return self.answers.pop(0)

    def select[T](self, title: str, options: list[PromptOption[T]]) -> T | None:
        answer = self._next(title)
        if answer is None:
            return None
        for opt in options:
            if opt.value == answer:
                return opt.value
        raise AssertionError(f"{answer!r} is not an option of: {title}")

    def text(self, message: str) -> str:
        answer = self._next(message)
        assert isinstance(answer, str)
        return answer

    def confirm(self, message: str, *, default: bool = True) -> bool:
        answer = self._next(message)
        assert isinstance(answer, bool)
        return answer

    def pause(self, message: str) -> None:
        self.asked.append(message)
