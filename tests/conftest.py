from __future__ import annotations

import sys
from pathlib import Path

import pytest
import respx
from typer.testing import CliRunner


# Ensure the repository-local ``src`` directory is importable when the project is
# not installed as a package.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


ENV_VARS = (
    "CLOUDIAM_TOKEN_URL",
    "CLOUDIAM_CLIENT_ID",
    "CLOUDIAM_CLIENT_SECRET",
    "CLOUDIAM_API_KEY",
    "CLOUDIAM_ACCESS_TOKEN",
    "CLOUDIAM_TIMEOUT",
    "CLOUDIAM_MAX_RETRIES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def respx_mock():
    with respx.mock(assert_all_called=False) as respx_mgr:
        yield respx_mgr


@pytest.fixture
def cli_runner():
    return CliRunner()
