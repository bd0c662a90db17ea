"""PHP packages via composer."""

from pathlib import Path

from .base import DependencyConfig, md5, query_version

CLI_NAME = "composer"
CONFIG_FILE = "composer.json"
INSTALL_DIRECTORY = "vendor"


def get_cli_version() -> str:
    """
    composer prints a banner rather than a bare version, e.g.
    "Composer version 2.7.1 2024-02-09 15:26:28".
    """
    return query_version(CLI_NAME, "composer --version --no-ansi", extract=True)


def composer_config(
    cache_directory: Path, force_refresh: bool = False, install_options: str = ""
) -> DependencyConfig:
    return DependencyConfig(
        cli_name=CLI_NAME,
        install_command="composer install",
        install_directory=Path(INSTALL_DIRECTORY),
        config_path=Path(CONFIG_FILE),
        cache_directory=Path(cache_directory),
        get_file_hash=md5,
        get_cli_version=get_cli_version,
        install_options=install_options,
        force_refresh=force_refresh,
    )
