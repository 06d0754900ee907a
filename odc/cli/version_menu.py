"""Interactive next-version selection.

With published versions the operator picks a patch/minor/major bump, types a
version, or lists the previous versions (which returns to the same menu).
The very first release, or a current version that is not semver, goes
straight to manual entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from odc.cli.prompts import PromptOption, PromptProtocol
from odc.cli.release_fsm import StepOutcome, advance, finish, run_state_machine
from odc.core.result import Err, Ok, Result
from odc.output.console import ConsoleProtocol, Style
from odc.services.release.errors import ReleaseError
from odc.services.release.semver import SemVer, parse_tag
from odc.services.release.versions import PublishedVersions, bump_choices, validate_candidate

MANUAL_ENTRY_PROMPT = "Enter new version number or press Enter to exit: "
BACK_TO_MENU_PROMPT = "Press Enter to go back to the menu..."

MenuChoice = Literal["patch", "minor", "major", "manual", "view", "exit"]


@dataclass(frozen=True, slots=True)
class _MenuState:
    step: Literal["menu", "manual"]
    current: SemVer


def prompt_manual_version(
    *,
    published: PublishedVersions,
    prompt: PromptProtocol,
    console: ConsoleProtocol,
    first_entry: bool,
) -> str | None:
    """Ask for a version until it validates; empty input returns None."""
    while True:
        raw = prompt.text(MANUAL_ENTRY_PROMPT).strip()
        if not raw:
            return None
        checked = validate_candidate(raw, published=published, first_entry=first_entry)
        if isinstance(checked, Err):
            console.error(checked.error.message)
            continue
        return raw


def _menu_options(current: SemVer) -> list[PromptOption[MenuChoice]]:
    options: list[PromptOption[MenuChoice]] = [
        PromptOption(value=c.kind, label=f"{c.label}: {c.version}") for c in bump_choices(current)
    ]
    options.extend(
        [
            PromptOption(value="manual", label="Manual update (enter version)"),
            PromptOption(value="view", label="View previous versions"),
            PromptOption(value="exit", label="Exit"),
        ]
    )
    return options


def _show_previous(*, published: PublishedVersions, console: ConsoleProtocol) -> None:
    console.print("Previous versions:")
    for v in published.versions:
        console.print(f"- {v}", Style.DIM)


def resolve_version(
    *,
    published: PublishedVersions,
    prompt: PromptProtocol,
    console: ConsoleProtocol,
) -> Result[str | None, ReleaseError]:
    """Pick the next release version.

    Returns:
        Ok(version), Ok(None) when the operator exits, or Err if the menu
        state machine breaks.
    """
    if published.is_first_release:
        return Ok(
            prompt_manual_version(
                published=published, prompt=prompt, console=console, first_entry=True
            )
        )

    current_tag = published.current
    current = parse_tag(current_tag) if current_tag is not None else None
    if current is None:
        console.warning(
            f"current version {current_tag} is not semantic versioning, enter the next one manually"
        )
        return Ok(
            prompt_manual_version(
                published=published, prompt=prompt, console=console, first_entry=False
            )
        )

    def step_menu(s: _MenuState) -> Result[StepOutcome[_MenuState, str | None], ReleaseError]:
        choice = prompt.select(
            f"Update current version {current_tag} or perform other actions:",
            _menu_options(s.current),
        )
        match choice:
            case "patch" | "minor" | "major":
                return Ok(finish(str(s.current.bump(choice))))
            case "manual":
                return Ok(advance(_MenuState(step="manual", current=s.current)))
            case "view":
                _show_previous(published=published, console=console)
                prompt.pause(BACK_TO_MENU_PROMPT)
                return Ok(advance(s))
            case _:
                return Ok(finish(None))

    def step_manual(s: _MenuState) -> Result[StepOutcome[_MenuState, str | None], ReleaseError]:
        return Ok(
            finish(
                prompt_manual_version(
                    published=published, prompt=prompt, console=console, first_entry=False
                )
            )
        )

    return run_state_machine(
        initial_state=_MenuState(step="menu", current=current),
        get_step=lambda s: s.step,
        handlers={"menu": step_menu, "manual": step_manual},
    )
