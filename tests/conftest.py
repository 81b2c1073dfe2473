# tests/conftest.py
"""Shared test fixtures.

Fake Azure provider
===================

Tests patch flowblob.plugins.azure.operations.open_container_client to return
a FakeContainerClient (tests/fakes.py), so no credential or HTTP pipeline is
ever built. Integration tests marked `integration` run against Azurite.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import logging
import os
import shutil
import socket
import subprocess
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
import structlog
from azure.core.exceptions import AzureError, HttpResponseError
from hypothesis import Phase, Verbosity, settings

from tests.fakes import AZURITE_ACCOUNT, AZURITE_ACCOUNT_KEY, FakeContainerClient


@pytest.fixture
def fake_container() -> FakeContainerClient:
    return FakeContainerClient()


@pytest.fixture
def open_client_mock(fake_container: FakeContainerClient) -> Iterator[MagicMock]:
    """Route every container client request to fake_container."""
    with patch("flowblob.plugins.azure.operations.open_container_client", return_value=fake_container) as mock:
        yield mock


@pytest.fixture
def provider_error() -> AzureError:
    return HttpResponseError(message="Operation could not be completed within the specified time.")


@pytest.fixture(autouse=True)
def _reset_structlog_context() -> Iterator[None]:
    """Evaluation context is bound via contextvars; keep tests isolated."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """configure_logging replaces root handlers; CLI tests bind them to short-lived streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def in_tmp_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with tmp_path as the working directory.

    Upload writes the `file` input relative to the working directory.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Azurite (integration tests only)
# =============================================================================


def _find_azurite_bin() -> str | None:
    """Locate the Azurite CLI binary.

    Prefers repo-local install (node_modules/.bin/azurite). Falls back to PATH.
    """
    repo_root = Path(__file__).resolve().parents[1]
    local_bin = repo_root / "node_modules" / ".bin" / "azurite"
    if local_bin.exists():
        return str(local_bin)
    return shutil.which("azurite")


def _get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


def _wait_for_port(host: str, port: int, timeout_seconds: float = 5.0) -> bool:
    deadline = time.time() + timeout_seconds
    while time.time() < deadline:
        try:
            with socket.create_connection((host, port), timeout=0.2):
                return True
        except OSError:
            time.sleep(0.05)
    return False


@pytest.fixture(scope="session")
def azurite_blob_service(tmp_path_factory: pytest.TempPathFactory) -> Iterator[dict[str, Any]]:
    """Start Azurite (blob-only) and provide its account URL."""
    azurite_bin = _find_azurite_bin()
    if azurite_bin is None:
        pytest.skip("Azurite CLI not found. Run 'npm install azurite' to enable integration tests.")

    host = "127.0.0.1"
    port = _get_free_port()
    data_dir = tmp_path_factory.mktemp("azurite")

    process = subprocess.Popen(
        [
            azurite_bin,
            "--silent",
            "--skipApiVersionCheck",
            "--disableProductStyleUrl",
            "--location",
            str(data_dir),
            "--blobHost",
            host,
            "--blobPort",
            str(port),
        ],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )

    if not _wait_for_port(host, port):
        process.terminate()
        try:
            process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            process.kill()
        pytest.skip("Azurite failed to start (blob endpoint not reachable).")

    try:
        yield {"account_url": f"http://{host}:{port}/{AZURITE_ACCOUNT}"}
    finally:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()


@pytest.fixture
def azurite_settings(azurite_blob_service: dict[str, Any]) -> dict[str, Any]:
    """Activity settings pointing at a fresh, not-yet-created container."""
    return {
        "azure_storage_account": AZURITE_ACCOUNT,
        "azure_storage_access_key": AZURITE_ACCOUNT_KEY,
        "container_name": f"test-{uuid4().hex}",
        "account_url": azurite_blob_service["account_url"],
    }


# =============================================================================
# Hypothesis profiles
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
