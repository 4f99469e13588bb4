from __future__ import annotations

import os

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests that require a running PostgreSQL",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: requires a running PostgreSQL database",
    )


def _integration_enabled(config: pytest.Config) -> bool:
    if config.getoption("--integration"):
        return True
    return os.getenv("RUN_INTEGRATION") in {"1", "true", "TRUE", "yes", "YES"}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if _integration_enabled(config):
        return

    skip_marker = pytest.mark.skip(
        reason="integration tests disabled (use --integration or RUN_INTEGRATION=1)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_marker)


PROGRAM_CSV = """Date,Time,Topic,Hall,Speaker Name,Role,Email,Mobile Number
15/01/2026,9:00 - 9:45,Opening Keynote,Hall A,Dr. Asha Rao,Speaker,asha@example.org,9876543210
15/01/2026,9:00 - 9:45,Opening Keynote,Hall A,Dr. Vikram Sen,Chairperson,vikram@example.org,
15/01/2026,10:00 - 10:30,Glaucoma Update,Hall B,Dr. Meera Iyer,Speaker,meera-at-example,
16/01/2026,14:00 - 15:00,Panel: Cataract Complications,Hall A,Dr. Asha Rao,Moderator,,
16/01/2026,14:00 - 15:00,Panel: Cataract Complications,Hall A,Dr. John Paul,Panelist,john@example.org,
"""


@pytest.fixture
def program_csv() -> str:
    """A small day-first program with speakers, chairs and a moderator."""
    return PROGRAM_CSV
