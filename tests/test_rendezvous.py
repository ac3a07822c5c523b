"""Tests for the validate → solve → describe pipeline."""

from dataclasses import dataclass
from typing import Literal
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel

from tournamention.config import Settings
from tournamention.core.rendezvous import (
    UNKNOWN_FAILURE_TEXT,
    CommandContext,
    RendezvousCommand,
    failure_boundary,
)
from tournamention.core.validation import check_constraints, constraint_map, present
from tournamention.models.outcome import (
    EmbedDescribedOutcome,
    FailMonoOutcome,
    MonoBody,
    TextDescribedOutcome,
    UnknownFailureOutcome,
)
from tournamention.models.request import CommandOption, CommandRequest


class EchoOutcome(BaseModel):
    status: Literal["ECHOED"] = "ECHOED"
    body: MonoBody


class StrayOutcome(BaseModel):
    status: Literal["STRAY"] = "STRAY"
    body: MonoBody


@dataclass(frozen=True)
class EchoParams:
    text: str


ECHO_OPTIONS = constraint_map([("text", [present("TEXT_REQUIRED", "Say something.")])])
ECHO_METADATA = constraint_map([])


async def validate_echo(request: CommandRequest):
    failure = check_constraints(request, ECHO_METADATA, ECHO_OPTIONS)
    if failure is not None:
        return failure
    return EchoParams(text=str(request.option_value("text", "")))


def describe_echo(outcome: EchoOutcome) -> EmbedDescribedOutcome:
    return EmbedDescribedOutcome(embeds=[], ephemeral=False)


def make_command(solver, descriptions=None, validator=validate_echo) -> RendezvousCommand:
    return RendezvousCommand(
        name="echo",
        description="Echo text back.",
        descriptions=descriptions if descriptions is not None else {"ECHOED": describe_echo},
        validator=validator,
        solver=solver,
        outcomes=(EchoOutcome,),
    )


def make_request(text: str | None = "hello") -> CommandRequest:
    return CommandRequest(
        command_name="echo",
        guild_id="g1",
        member_id="m1",
        options=(CommandOption(name="text", value=text),),
    )


@pytest.fixture
def context(settings: Settings) -> CommandContext:
    return CommandContext(client=MagicMock(), engine=MagicMock(), settings=settings)


class TestConstruction:
    def test_missing_description_for_specific_status(self) -> None:
        with pytest.raises(ValueError, match="ECHOED"):
            make_command(AsyncMock(), descriptions={})

    def test_generic_descriptions_are_inherited(self) -> None:
        command = make_command(AsyncMock())
        assert {"FAIL_VALIDATION", "FAIL_UNKNOWN", "SUCCESS_MONO", "FAIL_MONO", "ECHOED"} <= set(
            command.descriptions
        )

    def test_decode_uses_command_outcomes(self) -> None:
        command = make_command(AsyncMock())
        decoded = command.decode({"status": "ECHOED", "body": {"data": "hi"}})
        assert isinstance(decoded, EchoOutcome)


class TestRun:
    async def test_success_uses_command_renderer(self, context: CommandContext) -> None:
        solver = AsyncMock(return_value=EchoOutcome(body=MonoBody(data="hello")))
        described = await make_command(solver).run(make_request(), context)
        assert isinstance(described, EmbedDescribedOutcome)
        assert described.ephemeral is False
        solver.assert_awaited_once_with(EchoParams(text="hello"), context)

    async def test_validation_failure_skips_solver(self, context: CommandContext) -> None:
        solver = AsyncMock()
        described = await make_command(solver).run(make_request(text=None), context)
        solver.assert_not_awaited()
        assert isinstance(described, TextDescribedOutcome)
        assert described.ephemeral is True
        assert "`text`" in described.text
        assert "Say something." in described.text

    async def test_solver_exception_becomes_unknown_failure(
        self,
        context: CommandContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        @failure_boundary
        async def explode(params: EchoParams, ctx: CommandContext) -> EchoOutcome:
            raise RuntimeError("secret internal detail")

        described = await make_command(explode).run(make_request(), context)
        assert described == TextDescribedOutcome(text=UNKNOWN_FAILURE_TEXT, ephemeral=True)
        assert "secret" not in described.text
        assert "command_solver_failed" in caplog.text

    async def test_failure_boundary_returns_empty_body(self, context: CommandContext) -> None:
        @failure_boundary
        async def explode(params: EchoParams, ctx: CommandContext) -> EchoOutcome:
            raise KeyError("missing")

        outcome = await explode(EchoParams(text="x"), context)
        assert isinstance(outcome, UnknownFailureOutcome)
        assert outcome.body.model_dump() == {}

    async def test_generic_status_falls_back_to_shared_renderer(
        self,
        context: CommandContext,
    ) -> None:
        solver = AsyncMock(return_value=FailMonoOutcome(body=MonoBody(data="Nothing to echo.")))
        described = await make_command(solver).run(make_request(), context)
        assert described == TextDescribedOutcome(text="Nothing to echo.", ephemeral=True)

    async def test_command_may_override_generic_renderer(self, context: CommandContext) -> None:
        solver = AsyncMock(return_value=UnknownFailureOutcome())
        custom = TextDescribedOutcome(text="Echo is broken.", ephemeral=False)
        command = make_command(
            solver,
            descriptions={"ECHOED": describe_echo, "FAIL_UNKNOWN": lambda o: custom},
        )
        assert await command.run(make_request(), context) is custom

    async def test_validator_errors_propagate(self, context: CommandContext) -> None:
        async def broken(request: CommandRequest):
            raise RuntimeError("bad extraction")

        with pytest.raises(RuntimeError, match="bad extraction"):
            await make_command(AsyncMock(), validator=broken).run(make_request(), context)

    async def test_undeclared_outcome_is_rejected(self, context: CommandContext) -> None:
        solver = AsyncMock(return_value=StrayOutcome(body=MonoBody(data="?")))
        with pytest.raises(TypeError, match="StrayOutcome"):
            await make_command(solver).run(make_request(), context)

    async def test_runs_are_independent(self, context: CommandContext) -> None:
        solver = AsyncMock(return_value=EchoOutcome(body=MonoBody(data="x")))
        command = make_command(solver)
        first = await command.run(make_request(text=None), context)
        second = await command.run(make_request(), context)
        assert isinstance(first, TextDescribedOutcome)
        assert isinstance(second, EmbedDescribedOutcome)
