from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from odc.core.result import Err, Ok, Result
from odc.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish[R]:
    outcome: R


type StepOutcome[S, R] = StepAdvance[S] | StepFinish[R]
type StepHandler[S, R] = Callable[[S], Result[StepOutcome[S, R], ReleaseError]]
type GetStep[S] = Callable[[S], str]


def advance[S](session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def finish[R](outcome: R) -> StepFinish[R]:
    return StepFinish(outcome=outcome)


def run_state_machine[S, R](
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S, R]],
) -> Result[R, ReleaseError]:
    """Run handlers until one finishes or fails.

    A handler may advance to its own step again; that is how menus loop back
    to themselves.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(ReleaseError(kind="invalid_input", message=f"unknown release step: {step}"))

        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome

        if isinstance(outcome.value, StepFinish):
            return Ok(outcome.value.outcome)

        current = outcome.value.session
