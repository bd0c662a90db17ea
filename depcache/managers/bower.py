"""Front-end packages via bower."""

from pathlib import Path

from .base import DependencyConfig, md5, query_version

CLI_NAME = "bower"
CONFIG_FILE = "bower.json"
INSTALL_DIRECTORY = "bower_components"


def get_cli_version() -> str:
    return query_version(CLI_NAME, f"{CLI_NAME} --version")


def bower_config(
    cache_directory: Path, force_refresh: bool = False, install_options: str = ""
) -> DependencyConfig:
    return DependencyConfig(
        cli_name=CLI_NAME,
        install_command="bower install",
        install_directory=Path(INSTALL_DIRECTORY),
        config_path=Path(CONFIG_FILE),
        cache_directory=Path(cache_directory),
        get_file_hash=md5,
        get_cli_version=get_cli_version,
        install_options=install_options,
        force_refresh=force_refresh,
    )
