"""/profile: show a member's tournament points in this server.

Defaults to the invoking member when no ``user`` option is given.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from tournamention.core.rendezvous import CommandContext, RendezvousCommand, failure_boundary
from tournamention.core.validation import (
    EMPTY_CONSTRAINTS,
    check_constraints,
    constraint_map,
    guild_only,
)
from tournamention.discord.embeds import build_profile_embed
from tournamention.discord.helpers import (
    get_career_points,
    get_current_points,
    get_or_create_contestant,
)
from tournamention.models.outcome import (
    DescribedOutcome,
    EmbedDescribedOutcome,
    ValidationFailureOutcome,
)
from tournamention.models.request import CommandRequest

ProfileStatus = Literal["SUCCESS_DETAILS"]

USER_OPTION = "user"


class UserDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    icon: str


class ProfileDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_points: int  # -1 when the server has no current tournament
    career_points: int
    user_details: UserDetails


class ProfileSuccessDetailsOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["SUCCESS_DETAILS"] = "SUCCESS_DETAILS"
    body: ProfileDetails


@dataclass(frozen=True)
class ProfileSolverParams:
    guild_id: str
    member_id: str


METADATA_CONSTRAINTS = constraint_map([("guild_id", [guild_only()])])
OPTION_CONSTRAINTS = EMPTY_CONSTRAINTS


async def validate_profile(
    request: CommandRequest,
) -> ProfileSolverParams | ValidationFailureOutcome:
    failure = check_constraints(request, METADATA_CONSTRAINTS, OPTION_CONSTRAINTS)
    if failure is not None:
        return failure

    return ProfileSolverParams(
        guild_id=str(request.guild_id),
        member_id=str(request.option_value(USER_OPTION, request.member_id)),
    )


async def _fetch_member(context: CommandContext, guild_id: str, member_id: str) -> Any:
    guild = await context.client.fetch_guild(int(guild_id))
    return await guild.fetch_member(int(member_id))


@failure_boundary
async def solve_profile(
    params: ProfileSolverParams,
    context: CommandContext,
) -> ProfileSuccessDetailsOutcome:
    engine = context.engine

    # A failing lookup cancels its sibling; the error reaches failure_boundary.
    async with asyncio.TaskGroup() as tg:
        member_task = tg.create_task(_fetch_member(context, params.guild_id, params.member_id))
        contestant_task = tg.create_task(
            get_or_create_contestant(engine, params.guild_id, params.member_id)
        )
    member = member_task.result()
    contestant = contestant_task.result()

    async with asyncio.TaskGroup() as tg:
        career_task = tg.create_task(get_career_points(engine, contestant))
        current_task = tg.create_task(get_current_points(engine, params.guild_id, contestant))
    career_points = career_task.result()
    current_points = current_task.result()

    icon = member.avatar.url if member.avatar else context.settings.default_profile_icon
    return ProfileSuccessDetailsOutcome(
        body=ProfileDetails(
            current_points=current_points,
            career_points=career_points,
            user_details=UserDetails(name=member.display_name, icon=icon),
        )
    )


def _describe_details(outcome: ProfileSuccessDetailsOutcome) -> DescribedOutcome:
    body = outcome.body
    embed = build_profile_embed(
        name=body.user_details.name,
        icon=body.user_details.icon,
        current_points=body.current_points,
        career_points=body.career_points,
    )
    return EmbedDescribedOutcome(embeds=[embed], ephemeral=True)


ProfileCommand: RendezvousCommand[ProfileSolverParams] = RendezvousCommand(
    name="profile",
    description="Show your Tournamention profile, or view another's profile.",
    descriptions={"SUCCESS_DETAILS": _describe_details},
    validator=validate_profile,
    solver=solve_profile,
    outcomes=(ProfileSuccessDetailsOutcome,),
    defer_ephemeral=True,
)
