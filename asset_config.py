"""
Configuration management for the asset pipeline.
Holds the write-once pipeline settings and loads the optional JSON config file.
"""

import os
import json
import logging
from typing import Iterable, Optional, Tuple

from asset_errors import ConfigurationError

logger = logging.getLogger(__name__)

# Default configuration file path. A value patched by tests before the module
# is reloaded is kept across the reload.
CONFIG_FILE = globals().get("CONFIG_FILE", "assets.json")

# Environment variable naming the destination root
OUT_DIR_ENV = "OUT_DIR"

DEFAULT_CONFIG = {
    "source": "assets",
    "passthrough_extensions": [],
    "no_mangle": [],
    "jsmin_fallback": False,
}


class PipelineConfig:
    """
    Settings that parameterize file classification for one pipeline run.

    Both lists are write-once: an empty list leaves the field unset, a
    non-empty list is recorded once, and setting it again raises
    :class:`ConfigurationError`. Empty strings inside a list are rejected
    since an empty suffix would match every file.

    ``jsmin_fallback`` allows scripts to be minified with jsmin (no
    compression, no mangling) when uglifyjs is not installed. It is off by
    default, making a missing uglifyjs fatal.
    """

    def __init__(self, jsmin_fallback: bool = False):
        self._passthrough_extensions: Optional[Tuple[str, ...]] = None
        self._mangle_exemptions: Optional[Tuple[str, ...]] = None
        self.jsmin_fallback = jsmin_fallback

    @classmethod
    def create(cls, passthrough_extensions=(), no_mangle=(), jsmin_fallback=False) -> "PipelineConfig":
        """Build a config and initialize both lists in one step."""
        config = cls(jsmin_fallback=jsmin_fallback)
        config.set_passthrough_extensions(passthrough_extensions)
        config.set_mangle_exemptions(no_mangle)
        return config

    def set_passthrough_extensions(self, extensions: Iterable[str]) -> None:
        extensions = tuple(extensions)
        if not extensions:
            return
        if not all(extensions):
            raise ConfigurationError("Passthrough extensions must be non-empty strings")
        if self._passthrough_extensions is not None:
            raise ConfigurationError("Failed to set passthrough extension list: already initialized")
        self._passthrough_extensions = extensions
        logger.debug("Passthrough extensions: %s", ", ".join(extensions))

    def set_mangle_exemptions(self, filenames: Iterable[str]) -> None:
        filenames = tuple(filenames)
        if not filenames:
            return
        if not all(filenames):
            raise ConfigurationError("No-mangle filenames must be non-empty strings")
        if self._mangle_exemptions is not None:
            raise ConfigurationError("Failed to set no-mangle file list: already initialized")
        self._mangle_exemptions = filenames
        logger.debug("JavaScript files exempt from mangling: %s", ", ".join(filenames))

    @property
    def passthrough_extensions(self) -> Tuple[str, ...]:
        return self._passthrough_extensions or ()

    @property
    def mangle_exemptions(self) -> Tuple[str, ...]:
        return self._mangle_exemptions or ()

    def is_passthrough_extension(self, name: str) -> bool:
        """Return True if ``name`` ends with one of the registered suffixes."""
        if self._passthrough_extensions is None:
            return False
        return any(name.endswith(ext) for ext in self._passthrough_extensions)

    def is_mangle_exempt(self, filename: str) -> bool:
        """Return True if ``filename`` must not have its identifiers shortened."""
        if self._mangle_exemptions is None:
            return False
        return filename in self._mangle_exemptions

    def __repr__(self):
        return (
            f"PipelineConfig(passthrough_extensions={self.passthrough_extensions!r}, "
            f"mangle_exemptions={self.mangle_exemptions!r}, jsmin_fallback={self.jsmin_fallback!r})"
        )


def validate_config(config):
    """Validate configuration values."""
    required_types = {
        "source": str,
        "passthrough_extensions": list,
        "no_mangle": list,
        "jsmin_fallback": bool,
    }

    for key, expected in required_types.items():
        if key not in config:
            logger.error("Missing configuration key: %s", key)
            return False
        if not isinstance(config[key], expected):
            logger.error("Invalid type for %s", key)
            return False

    for key in ("passthrough_extensions", "no_mangle"):
        if not all(isinstance(item, str) and item for item in config[key]):
            logger.error("Entries of %s must be non-empty strings", key)
            return False
    return True


def load_config(path=None):
    """
    Load the pipeline configuration file merged over the defaults.

    Args:
        path (str, optional): Config file to read, defaults to ``CONFIG_FILE``

    Returns:
        dict: Configuration values

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    config_file = path or CONFIG_FILE

    if not os.path.exists(config_file):
        if path is not None:
            raise ConfigurationError("Config file not found", config_file)
        logger.warning(f"Config file {config_file} not found, using defaults")
        return dict(DEFAULT_CONFIG)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file ({e})", config_file) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading config file ({e})", config_file) from e

    if not isinstance(loaded, dict):
        raise ConfigurationError("Config file must contain a JSON object", config_file)

    config = {**DEFAULT_CONFIG, **loaded}
    if not validate_config(config):
        raise ConfigurationError("Invalid configuration file", config_file)

    logger.info(f"Configuration loaded from {config_file}")
    return config


def get_out_dir(out_dir=None):
    """
    Return the destination root for the build.

    An explicit value wins over the ``OUT_DIR`` environment variable.

    Raises:
        ConfigurationError: If neither is set
    """
    if out_dir:
        return out_dir

    env_out_dir = os.environ.get(OUT_DIR_ENV)
    if not env_out_dir:
        raise ConfigurationError(f"Failed to get {OUT_DIR_ENV} env variable")
    return env_out_dir


def get_log_level():
    """Get the log level name from the environment with fallback to INFO."""
    return os.environ.get("LOG_LEVEL", "INFO").upper()
