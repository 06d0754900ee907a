from __future__ import annotations

from dataclasses import dataclass, replace

from odc.cli.release_fsm import StepOutcome, advance, finish, run_state_machine
from odc.core.result import Err, Ok, Result
from odc.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class _State:
    step: str
    counter: int


def test_run_state_machine_advances_then_finishes() -> None:
    visited: list[_State] = []

    def step_a(s: _State) -> Result[StepOutcome[_State, int], ReleaseError]:
        visited.append(s)
        return Ok(advance(replace(s, step="b", counter=s.counter + 1)))

    def step_b(s: _State) -> Result[StepOutcome[_State, int], ReleaseError]:
        visited.append(s)
        return Ok(finish(s.counter * 10))

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": step_a, "b": step_b},
    )

    assert result == Ok(10)
    assert visited == [_State(step="a", counter=0), _State(step="b", counter=1)]


def test_run_state_machine_self_loop() -> None:
    def step_menu(s: _State) -> Result[StepOutcome[_State, str], ReleaseError]:
        if s.counter < 3:
            return Ok(advance(replace(s, counter=s.counter + 1)))
        return Ok(finish("done"))

    result = run_state_machine(
        initial_state=_State(step="menu", counter=0),
        get_step=lambda s: s.step,
        handlers={"menu": step_menu},
    )

    assert result == Ok("done")


def test_run_state_machine_unknown_step_fails() -> None:
    result = run_state_machine(
        initial_state=_State(step="missing", counter=0),
        get_step=lambda s: s.step,
        handlers={},
    )

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
    assert "missing" in result.error.message


def test_run_state_machine_propagates_handler_error() -> None:
    def bad_step(_: _State) -> Result[StepOutcome[_State, None], ReleaseError]:
        return Err(ReleaseError(kind="git_failed", message="boom"))

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": bad_step},
    )

    assert isinstance(result, Err)
    assert result.error.message == "boom"
