"""
Service layer for groups.

Groups come from the `/etc/group` listings of every server in the Perun
export. The same group usually exists on many servers; all listings that
share a name are merged into one group with the union of their members.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from structlog.typing import FilteringBoundLogger

from gridmon.core.collation import collation_key
from gridmon.core.group import (
    GroupDetailEntry,
    GroupListEntry,
    GroupMember,
    GroupRecord,
    ServerGroupSnapshot,
)
from gridmon.core.user import DirectoryUser, UserContext, username_base

# Groups holding more than this share of all known users (system-wide groups
# such as "meta" or "storage") are hidden from the list view of non-admins.
MAX_SHARE_OF_ALL_USERS = 0.8


class GroupNotFound(Exception):
    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__(f"Group '{group_name}' was not found")


@dataclass
class MergedGroup:
    gid: str
    members: set[str] = field(default_factory=set)


def is_member(caller: UserContext, record: GroupRecord) -> bool:
    """
    Membership test tolerant of the `@domain` suffix on the caller's name.
    """
    return (
        username_base(caller.username) in record.members
        or caller.username in record.members
    )


def merge_records(
    records: Iterable[GroupRecord], merged: dict[str, MergedGroup]
) -> dict[str, MergedGroup]:
    """
    Merge records into `merged`, keyed by group name. The first gid seen for
    a name wins; members are unioned.
    """
    for record in records:
        existing = merged.get(record.groupname)
        if existing is None:
            merged[record.groupname] = MergedGroup(
                gid=record.gid, members=set(record.members)
            )
        else:
            existing.members.update(record.members)

    return merged


def visible_records(
    caller: UserContext,
    server_groups: Sequence[ServerGroupSnapshot],
    group_name: str | None = None,
) -> Iterable[GroupRecord]:
    for snapshot in server_groups:
        for record in snapshot.entries:
            if group_name is not None and record.groupname != group_name:
                continue

            if not caller.is_admin and not is_member(caller, record):
                continue

            yield record


def count_directory_users(directory_users: Sequence[DirectoryUser]) -> int:
    """
    Size of the set of every user's full logname plus its base. A user with
    a domain suffix contributes two entries; the total is an approximation
    that matches how the directory itself counts.
    """
    names = set()
    for user in directory_users:
        if user.logname:
            names.add(user.logname)
            names.add(user.base)
    return len(names)


def list_groups(
    caller: UserContext,
    server_groups: Sequence[ServerGroupSnapshot],
    directory_users: Sequence[DirectoryUser],
    log: FilteringBoundLogger,
) -> list[GroupListEntry]:
    """
    List the groups visible to the caller.

    Parameters
    ----------
    caller: UserContext
        The identity of the caller. Admins see every group, everyone else
        only the groups they are a member of.
    server_groups: Sequence[ServerGroupSnapshot]
        Group listings for every server.
    directory_users: Sequence[DirectoryUser]
        All known users, used to hide system-wide groups from non-admins.
    log: FilteringBoundLogger
        Logger instance.

    Returns
    -------
    list[GroupListEntry]
        Groups with their deduplicated member count, sorted by name.
    """
    log = log.bind(username=caller.username, role=caller.role.value)

    if not server_groups:
        log.debug("group.list.no_data")
        return []

    merged = merge_records(visible_records(caller, server_groups), {})

    groups = sorted(
        (
            GroupListEntry(name=name, gid=group.gid, member_count=len(group.members))
            for name, group in merged.items()
        ),
        key=lambda entry: collation_key(entry.name),
    )

    if not caller.is_admin:
        total_users = count_directory_users(directory_users)

        if total_users > 0:
            groups = [
                group
                for group in groups
                if group.member_count / total_users <= MAX_SHARE_OF_ALL_USERS
            ]

        log = log.bind(total_users=total_users, hidden=len(merged) - len(groups))

    log.debug("group.list", number_of_groups=len(groups))

    return groups


def get_group_detail(
    group_name: str,
    caller: UserContext,
    server_groups: Sequence[ServerGroupSnapshot],
    directory_users: Sequence[DirectoryUser],
    log: FilteringBoundLogger,
) -> GroupDetailEntry:
    """
    Get a single group with its members and their full names.

    Parameters
    ----------
    group_name: str
        The name of the group.
    caller: UserContext
        The identity of the caller. Non-admins must be a member of the group.
    server_groups: Sequence[ServerGroupSnapshot]
        Group listings for every server.
    directory_users: Sequence[DirectoryUser]
        All known users, used to resolve full names of members.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    GroupNotFound
        If the group does not exist, or the caller may not see it. The two
        cases are deliberately indistinguishable.
    """
    log = log.bind(
        group_name=group_name, username=caller.username, role=caller.role.value
    )

    merged = merge_records(
        visible_records(caller, server_groups, group_name=group_name), {}
    )
    group = merged.get(group_name)

    if group is None:
        log.info("group.not_found")
        raise GroupNotFound(group_name)

    full_names: dict[str, str | None] = {}
    for user in directory_users:
        if not user.logname:
            continue
        full_names.setdefault(user.logname, user.name)
        if user.base != user.logname:
            full_names.setdefault(user.base, user.name)

    members = sorted(
        (
            GroupMember(nickname=nickname, name=full_names.get(nickname))
            for nickname in group.members
        ),
        key=lambda member: collation_key(member.nickname),
    )

    log.debug("group.found", number_of_members=len(members))

    return GroupDetailEntry(name=group_name, gid=group.gid, members=members)
