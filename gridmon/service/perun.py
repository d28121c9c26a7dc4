"""
Service layer for the Perun export: reading the snapshot from disk and
keeping the latest copy around for the API.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from structlog.typing import FilteringBoundLogger

from gridmon.core.group import GroupRecord, ServerGroupSnapshot
from gridmon.core.perun import PerunSnapshot
from gridmon.core.user import DirectoryUser

USERS_FILENAME = "pbsmon_users.json"
ETC_GROUPS_DIRECTORY = "etc_groups"
ETC_GROUP_PREFIX = "etc_group_"


def parse_etc_group(content: str) -> list[GroupRecord]:
    """
    Parse the contents of an `/etc/group` file. Lines are
    `name:password:gid:member1,member2`; comments, blank lines and lines with
    fewer than three fields are skipped.
    """
    entries = []

    for line in content.splitlines():
        if not line.strip() or line.startswith("#"):
            continue

        parts = line.split(":")
        if len(parts) < 3:
            continue

        members = parts[3].split(",") if len(parts) > 3 else []

        entries.append(
            GroupRecord(
                groupname=parts[0],
                password=parts[1],
                gid=parts[2],
                members=tuple(m for m in members if m.strip()),
            )
        )

    return entries


def parse_users(payload: Any, log: FilteringBoundLogger) -> list[DirectoryUser]:
    """
    Parse the `pbsmon_users.json` export (`{"users": [...]}`, or the bare
    list). Entries without a usable logname are logged and dropped; they
    never invalidate the rest of the directory.
    """
    users = []

    if isinstance(payload, dict):
        payload = payload.get("users")
    if not isinstance(payload, list):
        return users

    for raw in payload:
        if not isinstance(raw, dict) or not raw.get("logname"):
            continue
        try:
            users.append(
                DirectoryUser(
                    logname=raw["logname"], name=raw.get("name"), org=raw.get("org")
                )
            )
        except ValidationError as e:
            log.warning(
                "perun.collect.user_invalid",
                logname=repr(raw["logname"]),
                error=str(e),
            )

    return users


def read_users(path: Path, log: FilteringBoundLogger) -> list[DirectoryUser] | None:
    log = log.bind(path=str(path))

    try:
        with open(path, "r") as handle:
            payload = json.load(handle)
        users = parse_users(payload, log)
    except (OSError, ValueError) as e:
        log.warning("perun.collect.users_missing", error=str(e))
        return None

    log.debug("perun.collect.users", number_of_users=len(users))
    return users


def read_etc_groups(
    directory: Path, log: FilteringBoundLogger
) -> list[ServerGroupSnapshot]:
    log = log.bind(path=str(directory))

    try:
        files = sorted(
            f
            for f in directory.iterdir()
            if f.name.startswith(ETC_GROUP_PREFIX) and f.is_file()
        )
    except OSError as e:
        log.warning("perun.collect.etc_groups_missing", error=str(e))
        return []

    snapshots = []

    for path in files:
        server = path.name.removeprefix(ETC_GROUP_PREFIX)
        try:
            entries = parse_etc_group(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            log.warning(
                "perun.collect.etc_group_unreadable", server=server, error=str(e)
            )
            continue

        snapshots.append(ServerGroupSnapshot(server=server, entries=tuple(entries)))
        log.debug(
            "perun.collect.etc_group", server=server, number_of_groups=len(entries)
        )

    return snapshots


def collect(data_path: Path, log: FilteringBoundLogger) -> PerunSnapshot:
    """
    Read the Perun export rooted at `data_path`.

    Parameters
    ----------
    data_path: Path
        Directory containing `pbsmon_users.json` and `etc_groups/`.
    log: FilteringBoundLogger
        Logger instance.

    Returns
    -------
    PerunSnapshot
        The snapshot. Missing pieces are logged and left empty; this never
        raises for missing data.
    """
    data_path = Path(data_path)
    log = log.bind(data_path=str(data_path))

    users = read_users(data_path / USERS_FILENAME, log)
    etc_groups = read_etc_groups(data_path / ETC_GROUPS_DIRECTORY, log)

    snapshot = PerunSnapshot(
        timestamp=datetime.now(tz=timezone.utc),
        users=tuple(users) if users is not None else None,
        etc_groups=tuple(etc_groups),
    )

    log.info(
        "perun.collected",
        users_loaded=users is not None,
        number_of_servers=len(etc_groups),
    )

    return snapshot


class SnapshotStore:
    """
    Holds the latest Perun snapshot. Readers always see a complete snapshot;
    a refresh builds a new one and swaps the reference.
    """

    data_path: Path
    log: FilteringBoundLogger
    _snapshot: PerunSnapshot | None

    def __init__(self, data_path: Path, log: FilteringBoundLogger):
        self.data_path = Path(data_path)
        self.log = log
        self._snapshot = None

    async def refresh(self) -> PerunSnapshot:
        snapshot = await asyncio.to_thread(collect, self.data_path, self.log)
        self._snapshot = snapshot
        return snapshot

    def current(self) -> PerunSnapshot | None:
        return self._snapshot

    def server_groups(self) -> tuple[ServerGroupSnapshot, ...]:
        if self._snapshot is None:
            return ()
        return self._snapshot.etc_groups

    def directory_users(self) -> tuple[DirectoryUser, ...]:
        if self._snapshot is None or self._snapshot.users is None:
            return ()
        return self._snapshot.users


async def run_periodic_refresh(
    store: SnapshotStore, interval: timedelta, log: FilteringBoundLogger
) -> None:
    """
    Refresh `store` every `interval` until cancelled.
    """
    log = log.bind(interval=interval.total_seconds())

    while True:
        await asyncio.sleep(interval.total_seconds())
        await log.adebug("perun.refresh")
        try:
            await store.refresh()
        except Exception:
            await log.aexception("perun.refresh.failed")
