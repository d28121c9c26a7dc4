"""
Shared user objects: directory users and caller identity.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserContext(BaseModel):
    """
    The identity of the caller for a single request. Built by the identity
    dependency and handed to the service layer as a plain value.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def username_base(username: str) -> str:
    """
    Strip the `@domain` suffix (everything after the first `@`), if any.
    """
    return username.split("@", 1)[0]


def resolve_text(value: Any) -> str | None:
    """
    Perun fields are sometimes plain strings and sometimes localized
    objects (``{"cs": ..., "en": ...}``). Resolve either into a string.
    """
    if value is None or isinstance(value, str):
        return value

    if isinstance(value, dict):
        for language in ("en", "cs"):
            if isinstance(value.get(language), str):
                return value[language]

    return None


class DirectoryUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    logname: str
    name: str | None = None
    org: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def resolve_name(cls, value: Any) -> str | None:
        return resolve_text(value)

    @field_validator("org", mode="before")
    @classmethod
    def resolve_org(cls, value: Any) -> str:
        return resolve_text(value) or ""

    @property
    def base(self) -> str:
        return username_base(self.logname)
