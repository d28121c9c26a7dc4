"""
A simple CLI for running the server and inspecting the Perun export.
"""

import sys

import structlog
import uvicorn

from gridmon.config.settings import Settings
from gridmon.core.group import GroupsList
from gridmon.core.user import UserContext, UserRole
from gridmon.service import groups as groups_service
from gridmon.service import perun as perun_service

USAGE = (
    "Supported commands are gridmon run, gridmon groups [username], "
    "or gridmon group {name} [username]"
)


def caller_for(arguments: list[str]) -> UserContext:
    if arguments:
        return UserContext(username=arguments[0], role=UserRole.USER)
    return UserContext(username="admin", role=UserRole.ADMIN)


def main():
    try:
        command = sys.argv[1]
    except IndexError:
        print(USAGE)
        exit(1)

    settings = Settings()

    if command == "run":
        uvicorn.run("gridmon.api.app:app", host=settings.host, port=settings.port)
        return

    if command not in ("groups", "group"):
        print(USAGE)
        exit(1)

    # Keep stdout for the JSON output
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))
    log = structlog.get_logger()
    snapshot = perun_service.collect(data_path=settings.perun_data_path, log=log)
    users = snapshot.users or ()

    if command == "groups":
        groups = groups_service.list_groups(
            caller=caller_for(sys.argv[2:]),
            server_groups=snapshot.etc_groups,
            directory_users=users,
            log=log,
        )
        print(GroupsList(groups=groups).model_dump_json(by_alias=True, indent=2))
        return

    try:
        name = sys.argv[2]
    except IndexError:
        print(USAGE)
        exit(1)

    try:
        group = groups_service.get_group_detail(
            group_name=name,
            caller=caller_for(sys.argv[3:]),
            server_groups=snapshot.etc_groups,
            directory_users=users,
            log=log,
        )
    except groups_service.GroupNotFound as e:
        print(e)
        exit(1)

    print(group.model_dump_json(by_alias=True, indent=2))
