import io
import logging
from pathlib import Path

import pytest

from depcache.managers.base import DependencyConfig, md5


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("depcache")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def project(tmp_path) -> Path:
    """Project directory install commands run in."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def install_log(tmp_path) -> Path:
    """File the fake install command appends a line to on every run."""
    return tmp_path / "install.log"


@pytest.fixture
def make_config(cache_dir, install_log):
    """
    Factory for configs of a fake package manager.

    The default install command populates deps/ with two files and records the
    run in install_log, so tests need no real package manager.
    """

    def _make(
        cli_name: str = "fakepm",
        install_command: str = None,
        config_name: str = "deps.lock",
        install_directory: str = "deps",
        version: str = "1.0.0",
        get_file_hash=md5,
        **kwargs,
    ) -> DependencyConfig:
        if install_command is None:
            install_command = (
                f"echo run >> '{install_log}' && "
                f"mkdir -p {install_directory}/sub && "
                f"printf alpha > {install_directory}/a.txt && "
                f"printf beta > {install_directory}/sub/b.txt"
            )
        return DependencyConfig(
            cli_name=cli_name,
            install_command=install_command,
            install_directory=Path(install_directory),
            config_path=Path(config_name),
            cache_directory=cache_dir,
            get_file_hash=get_file_hash,
            get_cli_version=lambda: version,
            **kwargs,
        )

    return _make


@pytest.fixture
def tools_installed(monkeypatch):
    """Pretend every package manager except 'missingpm' is on the PATH."""
    monkeypatch.setattr(
        "depcache.cache.orchestrator.tool_available", lambda name: name != "missingpm"
    )
