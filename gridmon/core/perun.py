"""
The Perun snapshot: everything read from the Perun export in one pass.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .group import ServerGroupSnapshot
from .user import DirectoryUser


class PerunSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    # None when the users export could not be read at all
    users: tuple[DirectoryUser, ...] | None = None
    etc_groups: tuple[ServerGroupSnapshot, ...] = ()
