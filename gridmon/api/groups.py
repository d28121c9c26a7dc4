"""
Group views.
"""

from fastapi import APIRouter

from gridmon.core.group import GroupDetailEntry, GroupsList
from gridmon.core.models import ApiError, ApiResponse, Meta
from gridmon.service import groups as groups_service

from .dependencies import LoggerDependency, SnapshotDependency
from .identity import UserContextDependency

group_app = APIRouter(tags=["Groups"])


@group_app.get(
    "",
    summary="List all groups",
    description=(
        "Returns the list of groups with name, GID, and member count, merged "
        "across all servers. Admins see all groups. Other users see only the "
        "groups they are a member of, and groups containing more than 80% of "
        "all users (system-wide groups like 'meta' and 'storage') are left out."
    ),
    responses={
        200: {"description": "List of groups."},
        401: {"description": "Not logged in.", "model": ApiError},
    },
)
async def list_groups(
    user: UserContextDependency,
    snapshots: SnapshotDependency,
    log: LoggerDependency,
) -> ApiResponse[GroupsList]:
    """
    List all groups.
    """
    groups = groups_service.list_groups(
        caller=user,
        server_groups=snapshots.server_groups(),
        directory_users=snapshots.directory_users(),
        log=log,
    )

    return ApiResponse[GroupsList](
        data=GroupsList(groups=groups), meta=Meta(total_count=len(groups))
    )


@group_app.get(
    "/{name}",
    summary="Get group detail",
    description=(
        "Returns a group with its members (nickname and full name). Admins "
        "can see any group, other users only groups they are a member of."
    ),
    responses={
        200: {"description": "Group details with members."},
        401: {"description": "Not logged in.", "model": ApiError},
        404: {"description": "Group not found.", "model": ApiError},
    },
)
async def get_group_detail(
    name: str,
    user: UserContextDependency,
    snapshots: SnapshotDependency,
    log: LoggerDependency,
) -> ApiResponse[GroupDetailEntry]:
    """
    Get a group by its name.
    """
    group = groups_service.get_group_detail(
        group_name=name,
        caller=user,
        server_groups=snapshots.server_groups(),
        directory_users=snapshots.directory_users(),
        log=log,
    )

    return ApiResponse[GroupDetailEntry](data=group)
