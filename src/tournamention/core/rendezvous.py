"""Rendezvous command pipeline: validate → solve → describe.

Every slash command is one ``RendezvousCommand``. The three stages only
exchange outcome models:

1. the validator turns a ``CommandRequest`` into typed solver params, or a
   ``ValidationFailureOutcome`` (solving is then skipped);
2. the solver turns params into a command outcome. Solvers are wrapped in
   ``failure_boundary`` so any exception becomes ``UnknownFailureOutcome``;
3. the description map turns the outcome into a text or embed reply.

Generic statuses are rendered here once; commands only map their own
statuses (and may override a generic one).
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

from tournamention.models.outcome import (
    GENERIC_OUTCOMES,
    DescribedOutcome,
    FailMonoOutcome,
    SuccessMonoOutcome,
    TextDescribedOutcome,
    UnknownFailureOutcome,
    ValidationFailureOutcome,
    outcome_adapter,
    status_of,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from tournamention.config import Settings
    from tournamention.models.request import CommandRequest

logger = logging.getLogger(__name__)

P = TypeVar("P")


class PlatformClient(Protocol):
    """The slice of ``discord.Client`` the solvers use."""

    async def fetch_guild(self, guild_id: int, /) -> Any: ...


@dataclass(frozen=True)
class CommandContext:
    """Collaborators handed to every solver."""

    client: PlatformClient
    engine: AsyncEngine
    settings: Settings


Validator = Callable[["CommandRequest"], Awaitable["P | ValidationFailureOutcome"]]
Solver = Callable[[P, CommandContext], Awaitable[BaseModel]]
Describer = Callable[[Any], DescribedOutcome]


UNKNOWN_FAILURE_TEXT = (
    "Something went wrong while running that command. "
    "Try again in a moment -- if this persists, let an admin know."
)


def _describe_validation_failure(outcome: ValidationFailureOutcome) -> DescribedOutcome:
    body = outcome.body
    text = f"Invalid `{body.field}` (`{body.value}`): {body.context or body.constraint}"
    return TextDescribedOutcome(text=text, ephemeral=True)


def _describe_unknown_failure(outcome: UnknownFailureOutcome) -> DescribedOutcome:
    return TextDescribedOutcome(text=UNKNOWN_FAILURE_TEXT, ephemeral=True)


def _describe_mono(outcome: SuccessMonoOutcome | FailMonoOutcome) -> DescribedOutcome:
    return TextDescribedOutcome(text=outcome.body.data, ephemeral=True)


GENERIC_DESCRIPTIONS: Mapping[str, Describer] = MappingProxyType(
    {
        "SUCCESS_MONO": _describe_mono,
        "FAIL_MONO": _describe_mono,
        "FAIL_VALIDATION": _describe_validation_failure,
        "FAIL_UNKNOWN": _describe_unknown_failure,
    }
)


def failure_boundary(
    solver: Callable[[P, CommandContext], Awaitable[BaseModel]],
) -> Callable[[P, CommandContext], Awaitable[BaseModel]]:
    """Convert any exception raised by *solver* into ``UnknownFailureOutcome``.

    The exception is logged with its traceback; nothing about it reaches the
    outcome body.
    """

    @functools.wraps(solver)
    async def wrapper(params: P, context: CommandContext) -> BaseModel:
        try:
            return await solver(params, context)
        except Exception:  # Every solver error becomes FAIL_UNKNOWN
            logger.exception("command_solver_failed solver=%s", solver.__name__)
            return UnknownFailureOutcome()

    return wrapper


class RendezvousCommand(Generic[P]):
    """One slash command wired through the validate → solve → describe pipeline.

    Args:
        name: Slash command name.
        description: Slash command description shown in the client.
        descriptions: Renderers for the command's own statuses, plus any
            generic status it wants to render differently.
        validator: Request → params or validation failure.
        solver: Params → outcome. Should be wrapped in ``failure_boundary``.
        outcomes: The command's own outcome models. Each status they declare
            must have a renderer in *descriptions*.
        defer_ephemeral: If set, the platform acknowledges the interaction up
            front with this visibility before validating. Every reply the
            command can produce then shares it. None answers directly.
    """

    def __init__(
        self,
        name: str,
        description: str,
        descriptions: Mapping[str, Describer],
        validator: Validator,
        solver: Solver[P],
        outcomes: Sequence[type[BaseModel]] = (),
        defer_ephemeral: bool | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self.defer_ephemeral = defer_ephemeral
        self.validator = validator
        self.solver = solver
        self.outcome_types = tuple(outcomes)
        self.adapter = outcome_adapter(*self.outcome_types)
        self._allowed = (*GENERIC_OUTCOMES, *self.outcome_types)

        missing = {status_of(o) for o in self.outcome_types} - set(descriptions)
        if missing:
            raise ValueError(f"/{name} has no description for status(es) {sorted(missing)}")
        self.descriptions: Mapping[str, Describer] = MappingProxyType(
            {**GENERIC_DESCRIPTIONS, **descriptions}
        )

    async def validate(self, request: CommandRequest) -> P | ValidationFailureOutcome:
        return await self.validator(request)

    async def solve(self, params: P, context: CommandContext) -> BaseModel:
        outcome = await self.solver(params, context)
        if not isinstance(outcome, self._allowed):
            msg = f"/{self.name} solver returned undeclared outcome {type(outcome).__name__}"
            raise TypeError(msg)
        return outcome

    def decode(self, data: Any) -> BaseModel:
        """Decode a serialized outcome of this command, keyed by its status."""
        return self.adapter.validate_python(data)

    def describe(self, outcome: BaseModel) -> DescribedOutcome:
        status = outcome.status  # type: ignore[attr-defined]
        return self.descriptions[status](outcome)

    async def run(self, request: CommandRequest, context: CommandContext) -> DescribedOutcome:
        """Run all three stages for one request."""
        logger.debug("command_validating command=%s", self.name)
        validated = await self.validate(request)

        if isinstance(validated, ValidationFailureOutcome):
            outcome: BaseModel = validated
        else:
            logger.debug("command_solving command=%s", self.name)
            outcome = await self.solve(validated, context)

        logger.debug("command_describing command=%s status=%s", self.name, outcome.status)  # type: ignore[attr-defined]
        return self.describe(outcome)
