"""
Core group data models.
"""

from pydantic import BaseModel, ConfigDict

from .models import CamelModel


class GroupRecord(BaseModel):
    """
    A single line of an `/etc/group` file on one server.
    """

    model_config = ConfigDict(frozen=True)

    groupname: str
    password: str = ""
    gid: str
    members: tuple[str, ...] = ()


class ServerGroupSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: str
    entries: tuple[GroupRecord, ...] = ()


class GroupListEntry(CamelModel):
    name: str
    gid: str
    member_count: int


class GroupsList(CamelModel):
    groups: list[GroupListEntry]


class GroupMember(CamelModel):
    nickname: str
    name: str | None = None


class GroupDetailEntry(CamelModel):
    name: str
    gid: str
    members: list[GroupMember]
