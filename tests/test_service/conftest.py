"""
Fixtures for the service layer tests: in-memory snapshots and callers.
"""

import pytest
from factories import server

from gridmon.core.user import DirectoryUser, UserContext, UserRole


@pytest.fixture
def admin():
    yield UserContext(username="admin", role=UserRole.ADMIN)


@pytest.fixture
def server_groups():
    yield [
        server(
            "skirit",
            ("storage", "100", ["alice", "bob"]),
            ("zeta", "5", ["dave"]),
            ("alpha", "6", ["dave", "alice"]),
        ),
        server(
            "tarkil",
            ("storage", "101", ["bob", "carol"]),
            ("beta", "7", ["bob@example.org"]),
        ),
    ]


@pytest.fixture
def directory_users():
    yield [
        DirectoryUser(logname="alice", name="Alice Novak"),
        DirectoryUser(logname="bob@example.org", name="Bob Dvorak"),
        DirectoryUser(logname="carol", name={"cs": "Karolína", "en": "Carol"}),
        DirectoryUser(logname="dave", name="Dave"),
        DirectoryUser(logname="erin", name=None),
        DirectoryUser(logname="frank", name="Frank"),
        DirectoryUser(logname="grace", name="Grace"),
        DirectoryUser(logname="heidi", name="Heidi"),
    ]


@pytest.fixture
def ten_users():
    yield [DirectoryUser(logname=f"user{i}", name=f"User {i}") for i in range(10)]
