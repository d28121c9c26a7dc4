"""
Core configuration
"""

import json

import pytest
import structlog

from gridmon.config.settings import Settings

USERS = {
    "users": [
        {"logname": "alice", "name": "Alice Novak", "org": "CESNET"},
        {"logname": "bob@example.org", "name": "Bob Dvorak", "org": "MU"},
        {"logname": "carol", "name": {"cs": "Karolína", "en": "Carol"}, "org": "UK"},
        {"logname": "dave", "name": "Dave", "org": "VUT"},
        {"logname": "", "name": "Nobody"},
    ]
}

ETC_GROUPS = {
    "skirit": (
        "# generated by perun\n"
        "meta:x:1000:alice,bob,carol,dave\n"
        "storage:x:100:alice,bob\n"
        "project-x:x:2000:alice\n"
    ),
    "tarkil": (
        "meta:x:1001:alice,bob,carol,dave,erin\n"
        "storage:x:999:bob,carol\n"
        "empty:x:3000:\n"
        "broken-line\n"
    ),
}


@pytest.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest.fixture
def perun_data_path(tmp_path):
    data_path = tmp_path / "perun"
    groups_path = data_path / "etc_groups"
    groups_path.mkdir(parents=True)

    with open(data_path / "pbsmon_users.json", "w") as handle:
        json.dump(USERS, handle)

    for server, content in ETC_GROUPS.items():
        (groups_path / f"etc_group_{server}").write_text(content, encoding="utf-8")

    yield data_path


@pytest.fixture
def server_settings(perun_data_path):
    yield Settings(
        perun_data_path=perun_data_path,
        admin_users=["root"],
    )
