"""/tournament: show this server's current tournament, or one by name."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from tournamention.core.rendezvous import CommandContext, RendezvousCommand, failure_boundary
from tournamention.core.validation import (
    check_constraints,
    constraint_map,
    guild_only,
    length_between,
)
from tournamention.discord.embeds import build_tournament_embed
from tournamention.discord.helpers import db_session
from tournamention.models.outcome import (
    DescribedOutcome,
    EmbedDescribedOutcome,
    FailMonoOutcome,
    MonoBody,
    ValidationFailureOutcome,
)
from tournamention.models.request import CommandRequest
from tournamention.models.tournament import GuildSettings, Tournament

TournamentStatus = Literal["SUCCESS_DETAILS"]

NAME_OPTION = "name"

NO_CURRENT_TOURNAMENT = "There is no active tournament in this server right now."


class TournamentDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    active: bool
    created_at: datetime
    challenge_count: int
    is_current: bool


class TournamentSuccessDetailsOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["SUCCESS_DETAILS"] = "SUCCESS_DETAILS"
    body: TournamentDetails


@dataclass(frozen=True)
class TournamentSolverParams:
    guild_id: str
    name: str | None = None


METADATA_CONSTRAINTS = constraint_map(
    [
        ("guild_id", [guild_only()]),
    ]
)
OPTION_CONSTRAINTS = constraint_map(
    [
        (NAME_OPTION, [length_between(1, 100, "NAME_LENGTH")]),
    ]
)


async def validate_tournament(
    request: CommandRequest,
) -> TournamentSolverParams | ValidationFailureOutcome:
    failure = check_constraints(request, METADATA_CONSTRAINTS, OPTION_CONSTRAINTS)
    if failure is not None:
        return failure

    name = request.option_value(NAME_OPTION)
    return TournamentSolverParams(
        guild_id=str(request.guild_id),
        name=name.strip() if name is not None else None,
    )


@failure_boundary
async def solve_tournament(
    params: TournamentSolverParams,
    context: CommandContext,
) -> TournamentSuccessDetailsOutcome | FailMonoOutcome:
    async with db_session(context.engine) as repo:
        settings_row = await repo.get_or_create_guild_settings(params.guild_id)
        settings = GuildSettings.model_validate(settings_row)
        active_rows = await repo.get_tournaments_for_guild(params.guild_id, active_only=True)
        current = settings.current_tournament(Tournament.model_validate(r) for r in active_rows)

        if params.name is None:
            tournament = current
            if tournament is None:
                return FailMonoOutcome(body=MonoBody(data=NO_CURRENT_TOURNAMENT))
        else:
            row = await repo.get_tournament_by_name(params.guild_id, params.name)
            if row is None:
                return FailMonoOutcome(
                    body=MonoBody(data=f"No tournament named **{params.name}** in this server.")
                )
            tournament = Tournament.model_validate(row)

        challenge_count = await repo.count_challenges(tournament.id)

    return TournamentSuccessDetailsOutcome(
        body=TournamentDetails(
            id=tournament.id,
            name=tournament.name,
            active=tournament.active,
            created_at=tournament.created_at,
            challenge_count=challenge_count,
            is_current=current is not None and current.id == tournament.id,
        )
    )


def _describe_details(outcome: TournamentSuccessDetailsOutcome) -> DescribedOutcome:
    body = outcome.body
    embed = build_tournament_embed(
        name=body.name,
        active=body.active,
        created_at=body.created_at,
        challenge_count=body.challenge_count,
        is_current=body.is_current,
    )
    return EmbedDescribedOutcome(embeds=[embed], ephemeral=False)


TournamentCommand: RendezvousCommand[TournamentSolverParams] = RendezvousCommand(
    name="tournament",
    description="Show the current tournament, or look one up by name.",
    descriptions={"SUCCESS_DETAILS": _describe_details},
    validator=validate_tournament,
    solver=solve_tournament,
    outcomes=(TournamentSuccessDetailsOutcome,),
)
