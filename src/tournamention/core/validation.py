"""Declarative request validation.

A command declares two constraint maps once, at import time:

- metadata constraints, keyed by a ``CommandRequest`` attribute name;
- option constraints, keyed by option name, or by ``ALWAYS`` for a group
  that runs whether or not any particular option was supplied.

``validate_constraints`` walks both maps and raises ``ValidationError`` on the
first failing constraint. ``check_constraints`` wraps that into an outcome so
the rest of the pipeline only ever sees data.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final

from tournamention.models.outcome import ValidationFailureOutcome, make_validation_failure
from tournamention.models.request import CommandRequest

logger = logging.getLogger(__name__)


class _AlwaysMarker:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ALWAYS"


ALWAYS: Final = _AlwaysMarker()
"""Option-map key for constraints evaluated unconditionally against the request."""

ALWAYS_FIELD = "always"


@dataclass(frozen=True)
class Constraint:
    """A named predicate over one extracted value.

    ``category`` identifies the constraint in error reports; ``context``
    tells the user what was expected.
    """

    category: str
    func: Callable[[Any], bool]
    context: str = ""

    def check(self, value: Any) -> tuple[bool, str]:
        return bool(self.func(value)), self.context


class ValidationError(Exception):
    """Raised when a request value violates a declared constraint."""

    def __init__(self, constraint: str, field: str, value: Any, message: str = "") -> None:
        super().__init__(message)
        self.constraint = constraint
        self.field = field
        self.value = value

    @property
    def context(self) -> str:
        return str(self)


MetadataConstraints = Mapping[str, Sequence[Constraint]]
OptionConstraints = Mapping[str | _AlwaysMarker, Sequence[Constraint]]

EMPTY_CONSTRAINTS: Final[Mapping[Any, Sequence[Constraint]]] = MappingProxyType({})


def constraint_map(
    entries: Iterable[tuple[Any, Iterable[Constraint]]],
) -> Mapping[Any, tuple[Constraint, ...]]:
    """Freeze a constraint map so it can be shared across requests."""
    return MappingProxyType({key: tuple(constraints) for key, constraints in entries})


def _run(constraints: Sequence[Constraint], field: str, value: Any) -> None:
    for constraint in constraints:
        passed, context = constraint.check(value)
        if not passed:
            raise ValidationError(constraint.category, field, value, context)


def validate_constraints(
    request: CommandRequest,
    metadata_constraints: MetadataConstraints,
    option_constraints: OptionConstraints,
) -> None:
    """Evaluate every constraint against the request.

    Within one field, constraints run in list order and stop at the first
    failure. No ordering is promised across fields. Constraints on an option
    the request does not carry are skipped; the ``ALWAYS`` group receives
    the whole request.

    Raises ValidationError for the first failing constraint. An unknown
    metadata field name raises AttributeError.
    """
    for field, constraints in metadata_constraints.items():
        _run(constraints, field, getattr(request, field))

    for key, constraints in option_constraints.items():
        if key is ALWAYS:
            _run(constraints, ALWAYS_FIELD, request)
            continue
        option = request.get_option(key)
        if option is None:
            continue
        _run(constraints, key, option.value)


def check_constraints(
    request: CommandRequest,
    metadata_constraints: MetadataConstraints,
    option_constraints: OptionConstraints,
) -> ValidationFailureOutcome | None:
    """Run ``validate_constraints`` and return a failure outcome instead of raising."""
    try:
        validate_constraints(request, metadata_constraints, option_constraints)
    except ValidationError as err:
        logger.info(
            "command_validation_failed command=%s constraint=%s field=%s",
            request.command_name,
            err.constraint,
            err.field,
        )
        return make_validation_failure(err.constraint, err.field, err.value, err.context)
    return None


# ---------------------------------------------------------------------------
# Reusable constraints
# ---------------------------------------------------------------------------


def present(category: str = "PRESENT", context: str = "A value is required.") -> Constraint:
    return Constraint(category, lambda value: value is not None, context)


def length_between(lo: int, hi: int, category: str = "LENGTH") -> Constraint:
    """Stripped string length must fall within ``[lo, hi]``."""
    return Constraint(
        category,
        lambda value: isinstance(value, str) and lo <= len(value.strip()) <= hi,
        f"Must be between {lo} and {hi} characters.",
    )


def guild_only() -> Constraint:
    """Metadata constraint for ``guild_id``: the command was used inside a server."""
    return present("GUILD_ONLY", "This command can only be used inside a server.")
