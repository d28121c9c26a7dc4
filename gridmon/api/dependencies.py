"""
Dependencies used by the API.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from gridmon.config.settings import Settings
from gridmon.service.perun import SnapshotStore


@lru_cache
def SETTINGS():
    return Settings()


def logger():
    return get_logger()


def get_settings(request: Request) -> Settings:
    return request.app.settings


def get_snapshots(request: Request) -> SnapshotStore:
    return request.app.snapshots


SettingsDependency = Annotated[Settings, Depends(get_settings)]
SnapshotDependency = Annotated[SnapshotStore, Depends(get_snapshots)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
