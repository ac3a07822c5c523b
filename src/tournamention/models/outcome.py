"""Outcome models: the closed set of results every command stage produces.

An outcome is a tagged union keyed by ``status``. The generic variants below
are shared by every command; each command adds its own variants with their
own ``Literal`` status. The status alone decides the shape of ``body``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union, get_args

import discord
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

OutcomeStatus = Literal[
    "SUCCESS_MONO",
    "FAIL_MONO",
    "FAIL_VALIDATION",
    "FAIL_UNKNOWN",
]

GENERIC_STATUSES: frozenset[str] = frozenset(get_args(OutcomeStatus))


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class MonoBody(_Frozen):
    data: str


class ValidationFailureBody(_Frozen):
    """Diagnostics for the constraint that rejected the request."""

    constraint: str
    field: str
    value: Any = None
    context: str = ""


class EmptyBody(_Frozen):
    """Deliberately carries nothing: failures must not leak internals."""


class SuccessMonoOutcome(_Frozen):
    status: Literal["SUCCESS_MONO"] = "SUCCESS_MONO"
    body: MonoBody


class FailMonoOutcome(_Frozen):
    status: Literal["FAIL_MONO"] = "FAIL_MONO"
    body: MonoBody


class ValidationFailureOutcome(_Frozen):
    status: Literal["FAIL_VALIDATION"] = "FAIL_VALIDATION"
    body: ValidationFailureBody


class UnknownFailureOutcome(_Frozen):
    status: Literal["FAIL_UNKNOWN"] = "FAIL_UNKNOWN"
    body: EmptyBody = Field(default_factory=EmptyBody)


GenericOutcome = Annotated[
    Union[SuccessMonoOutcome, FailMonoOutcome, ValidationFailureOutcome, UnknownFailureOutcome],
    Field(discriminator="status"),
]

GENERIC_OUTCOMES: tuple[type[BaseModel], ...] = (
    SuccessMonoOutcome,
    FailMonoOutcome,
    ValidationFailureOutcome,
    UnknownFailureOutcome,
)


def status_of(outcome_type: type[BaseModel]) -> str:
    """Return the single status literal declared on an outcome model."""
    annotation = outcome_type.model_fields["status"].annotation
    (status,) = get_args(annotation)
    return status


def outcome_adapter(*specific: type[BaseModel]) -> TypeAdapter[Any]:
    """Build a decoder for the generic outcomes plus a command's own variants.

    Raises ValueError if a command variant reuses a generic status or another
    variant's status.
    """
    members = (*GENERIC_OUTCOMES, *specific)
    statuses = [status_of(m) for m in members]
    if len(set(statuses)) != len(statuses):
        raise ValueError(f"Duplicate outcome status in {statuses}")
    union = Annotated[Union[members], Field(discriminator="status")]  # type: ignore[valid-type]
    return TypeAdapter(union)


def make_validation_failure(
    constraint: str,
    field_name: str,
    value: Any,
    context: str,
) -> ValidationFailureOutcome:
    return ValidationFailureOutcome(
        body=ValidationFailureBody(
            constraint=constraint,
            field=field_name,
            value=value,
            context=context,
        )
    )


# ---------------------------------------------------------------------------
# Described outcomes: what the platform layer actually sends
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextDescribedOutcome:
    """Plain-text reply."""

    text: str
    ephemeral: bool = True


@dataclass(frozen=True)
class EmbedDescribedOutcome:
    """Rich embed reply."""

    embeds: list[discord.Embed] = field(default_factory=list)
    ephemeral: bool = True


DescribedOutcome = TextDescribedOutcome | EmbedDescribedOutcome
