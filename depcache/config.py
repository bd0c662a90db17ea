"""Configuration for the cache directory and lock behaviour"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

import humanfriendly

APP_NAME = "depcache"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")


default_cfg = {
    "dirs": {"cache": "~/.package_cache"},
    "cache": {"lock_timeout": "", "max_workers": ""},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/depcache").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


logger = logging.getLogger(__name__)


def get_config_file():
    return config_dir / f"{APP_NAME}.cfg"


def init_dirs():
    """Initialize the configuration directory.

    Fails gracefully if the directory cannot be created (e.g., read-only filesystem).
    """
    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        logger.warning(
            f"Could not create config directory {config_dir}: {e}. "
            "Using in-memory configuration only."
        )


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    This class provides a way to access configuration options with a dictionary-like
    interface while handling missing sections or keys gracefully.

    Usage:
        config = ConfigAccessor()
        value = config.get('section', 'key', default='default')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize a ConfigAccessor with an optional config file path.

        Args:
            config_path: Path to the configuration file. If None, uses the default path.
        """
        if config_path is None:
            self.config_path = get_config_file()
            init_dirs()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)

        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the current configuration to the config file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        try:
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except (OSError, IOError) as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )

    def sections(self) -> list:
        return self.config.sections()

    def options(self, section: str) -> list:
        """
        Get all options (keys) in a section.

        Returns:
            List of options in the section or empty list if section doesn't exist
        """
        try:
            return self.config.options(section)
        except configparser.NoSectionError:
            return []


# Create a global config accessor instance
config = ConfigAccessor()


def get_cache_dir(accessor: Optional[ConfigAccessor] = None) -> Path:
    """
    Get the configured root directory for cached dependency archives.

    The directory is not created here; bootstrapping it is left to the caller.

    Returns:
        Path to the cache root (defaults to ~/.package_cache)
    """
    accessor = accessor or config
    cache_dir_str = accessor.get("dirs", "cache") or default_cfg["dirs"]["cache"]
    return Path(cache_dir_str).expanduser()


def parse_lock_timeout(value: Optional[str]) -> Optional[float]:
    """
    Parse a human friendly timespan ("30s", "2m") into seconds.

    An empty value means "block forever" and yields None.

    Raises:
        humanfriendly.InvalidTimespan: if the value cannot be parsed
    """
    if value is None or not str(value).strip():
        return None
    return humanfriendly.parse_timespan(str(value).strip())


def get_lock_timeout(accessor: Optional[ConfigAccessor] = None) -> Optional[float]:
    """Lock acquisition timeout in seconds, or None to block indefinitely."""
    accessor = accessor or config
    value = accessor.get("cache", "lock_timeout", default_cfg["cache"]["lock_timeout"])
    return parse_lock_timeout(value)


def get_max_workers(accessor: Optional[ConfigAccessor] = None) -> Optional[int]:
    accessor = accessor or config
    value = accessor.get("cache", "max_workers", default_cfg["cache"]["max_workers"])
    if value is None or not str(value).strip():
        return None
    try:
        workers = int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid max_workers value: {value!r}")
        return None
    return workers if workers > 0 else None
